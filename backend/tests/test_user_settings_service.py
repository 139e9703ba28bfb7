import uuid

from planboard.services.assignment_warnings import WARN_SETTING_KEY, warnings_enabled
from planboard.services.errors import ValidationError
from planboard.services.user_settings import get_user_setting, get_user_settings, set_user_setting

from timeline_fixtures import TimelineDbTestCase


class TestUserSettings(TimelineDbTestCase):
    async def test_defaults_until_saved(self) -> None:
        user_id = uuid.uuid4()

        self.assertEqual(
            await get_user_settings(self.db, user_id),
            {"warn_weekend_assignments": "true", "show_overlap_visualization": "true"},
        )
        self.assertTrue(warnings_enabled(await get_user_setting(self.db, user_id, WARN_SETTING_KEY)))

    async def test_saved_value_is_normalized_and_per_user(self) -> None:
        user_id, other_id = uuid.uuid4(), uuid.uuid4()

        self.assertEqual(await set_user_setting(self.db, user_id=user_id, key=WARN_SETTING_KEY, value=" FALSE "), "false")
        await set_user_setting(self.db, user_id=user_id, key=WARN_SETTING_KEY, value="false")

        self.assertFalse(warnings_enabled(await get_user_setting(self.db, user_id, WARN_SETTING_KEY)))
        self.assertTrue(warnings_enabled(await get_user_setting(self.db, other_id, WARN_SETTING_KEY)))

    async def test_rejects_unknown_key_and_value(self) -> None:
        with self.assertRaises(ValidationError):
            await set_user_setting(self.db, user_id=uuid.uuid4(), key="theme", value="true")
        with self.assertRaises(ValidationError):
            await set_user_setting(self.db, user_id=uuid.uuid4(), key=WARN_SETTING_KEY, value="yes")
        self.assertIsNone(await get_user_setting(self.db, uuid.uuid4(), "theme"))
