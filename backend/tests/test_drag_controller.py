import unittest
import uuid

import httpx

from planboard.client.api_client import PlanboardClient
from planboard.client.cache import TimelineCache
from planboard.client.drag import (
    DragController,
    DragMode,
    DragStore,
    PointerPress,
    WarningContext,
    load_warning_context,
)
from planboard.services.date_ranges import DateRange
from planboard.services.work_schedule import WorkSchedule


AID = uuid.uuid4()
ALT = PointerPress(alt=True)
SECONDARY = PointerPress(button=2)
SEVEN_DAY_WEEK = WorkSchedule(sat=True, sun=True)


class FakeOrchestrator:
    def __init__(self) -> None:
        self.cache = TimelineCache()
        self.calls: list[tuple] = []

    async def create_days(self, assignment_id, dates):
        self.calls.append(("create", assignment_id, list(dates)))

    async def delete_days(self, assignment_id, dates):
        self.calls.append(("delete", assignment_id, list(dates)))

    async def move_block(self, assignment_id, source, destination):
        self.calls.append(("move", assignment_id, source, destination))


class DragTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = DragStore()
        self.orchestrator = FakeOrchestrator()
        self.context = WarningContext(schedule=SEVEN_DAY_WEEK)
        self.controller = DragController(
            self.store, self.orchestrator, warning_context=lambda assignment_id: self.context
        )

    def schedule(self, *keys: str) -> None:
        self.orchestrator.cache.add_days(AID, keys)


class TestPress(DragTestCase):
    def test_plain_press_on_empty_cell_starts_create(self) -> None:
        self.assertEqual(self.controller.press(AID, "2025-02-11"), DragMode.create)

    def test_plain_press_on_assigned_cell_does_nothing(self) -> None:
        self.schedule("2025-02-11")
        self.assertIsNone(self.controller.press(AID, "2025-02-11"))
        self.assertIsNone(self.store.state)

    def test_secondary_ctrl_or_meta_on_assigned_cell_starts_delete(self) -> None:
        self.schedule("2025-02-11")
        for press in (SECONDARY, PointerPress(ctrl=True), PointerPress(meta=True)):
            self.assertEqual(self.controller.press(AID, "2025-02-11", press), DragMode.delete)
            self.controller.cancel()

    def test_delete_press_on_empty_cell_does_nothing(self) -> None:
        self.assertIsNone(self.controller.press(AID, "2025-02-11", SECONDARY))

    def test_alt_press_captures_whole_run(self) -> None:
        self.schedule("2025-02-10", "2025-02-11", "2025-02-12")
        self.assertEqual(self.controller.press(AID, "2025-02-11", ALT), DragMode.move)
        self.assertEqual(self.store.state.move_source, DateRange("2025-02-10", "2025-02-12"))


class TestStoreNotifications(DragTestCase):
    def test_only_flipped_cells_are_notified(self) -> None:
        seen: dict[str, list[bool]] = {}
        for key in ("2025-02-10", "2025-02-11", "2025-02-12", "2025-02-13"):
            self.store.subscribe(AID, key, lambda value, key=key: seen.setdefault(key, []).append(value))

        self.controller.press(AID, "2025-02-10")
        self.controller.enter("2025-02-12")
        self.controller.enter("2025-02-11")

        self.assertEqual(seen["2025-02-10"], [True])
        self.assertEqual(seen["2025-02-11"], [True])
        self.assertEqual(seen["2025-02-12"], [True, False])
        self.assertNotIn("2025-02-13", seen)

    def test_unsubscribe_stops_notifications(self) -> None:
        seen = []
        unsubscribe = self.store.subscribe(AID, "2025-02-10", seen.append)
        unsubscribe()
        self.controller.press(AID, "2025-02-10")
        self.assertEqual(seen, [])

    def test_move_highlights_projected_destination(self) -> None:
        self.schedule("2025-02-10", "2025-02-11", "2025-02-12")
        self.controller.press(AID, "2025-02-11", ALT)
        self.controller.enter("2025-02-13")

        self.assertTrue(self.store.is_highlighted(AID, "2025-02-14"))
        self.assertFalse(self.store.is_highlighted(AID, "2025-02-11"))


class TestRelease(DragTestCase):
    async def test_create_dispatches_unassigned_days_in_range(self) -> None:
        self.schedule("2025-02-11")
        self.controller.press(AID, "2025-02-12")
        self.controller.enter("2025-02-10")

        self.assertIsNone(await self.controller.release())

        self.assertEqual(self.orchestrator.calls, [("create", AID, ["2025-02-10", "2025-02-12"])])
        self.assertIsNone(self.store.state)

    async def test_delete_dispatches_assigned_days_only(self) -> None:
        self.schedule("2025-02-10", "2025-02-12")
        self.controller.press(AID, "2025-02-10", SECONDARY)
        self.controller.enter("2025-02-13")

        await self.controller.release()

        self.assertEqual(self.orchestrator.calls, [("delete", AID, ["2025-02-10", "2025-02-12"])])

    async def test_move_dispatches_translation(self) -> None:
        self.schedule("2025-02-01", "2025-02-02", "2025-02-03")
        self.controller.press(AID, "2025-02-02", ALT)
        self.controller.enter("2025-02-07")

        await self.controller.release()

        self.assertEqual(
            self.orchestrator.calls,
            [("move", AID, DateRange("2025-02-01", "2025-02-03"), DateRange("2025-02-06", "2025-02-08"))],
        )

    async def test_zero_offset_move_is_noop(self) -> None:
        self.schedule("2025-02-01", "2025-02-02")
        self.controller.press(AID, "2025-02-01", ALT)
        self.controller.enter("2025-02-03")
        self.controller.enter("2025-02-01")

        self.assertIsNone(await self.controller.release())
        self.assertEqual(self.orchestrator.calls, [])

    async def test_release_without_drag_is_noop(self) -> None:
        self.assertIsNone(await self.controller.release())
        self.assertEqual(self.orchestrator.calls, [])

    async def test_cancel_drops_drag(self) -> None:
        self.controller.press(AID, "2025-02-10")
        self.controller.cancel()
        self.assertIsNone(await self.controller.release())
        self.assertEqual(self.orchestrator.calls, [])


class TestWarnings(DragTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.context = WarningContext(member_name="Anna Huber")

    async def test_warning_waits_for_confirmation(self) -> None:
        # Fri .. Mon, 2025-01-06 is Epiphany.
        self.controller.press(AID, "2025-01-03")
        self.controller.enter("2025-01-06")

        pending = await self.controller.release()

        self.assertEqual(self.orchestrator.calls, [])
        self.assertEqual(pending.warning.dates, ["2025-01-04", "2025-01-05", "2025-01-06"])
        await pending.confirm()
        self.assertEqual(
            self.orchestrator.calls,
            [("create", AID, ["2025-01-03", "2025-01-04", "2025-01-05", "2025-01-06"])],
        )

    async def test_confirm_runs_once(self) -> None:
        self.controller.press(AID, "2025-01-04")
        pending = await self.controller.release()
        await pending.confirm()
        await pending.confirm()
        self.assertEqual(len(self.orchestrator.calls), 1)

    async def test_skip_creates_working_days_only(self) -> None:
        self.controller.press(AID, "2025-01-03")
        self.controller.enter("2025-01-07")

        pending = await self.controller.release()
        self.assertTrue(pending.can_skip)
        await pending.skip()

        self.assertEqual(self.orchestrator.calls, [("create", AID, ["2025-01-03", "2025-01-07"])])

    async def test_cancel_dispatches_nothing(self) -> None:
        self.controller.press(AID, "2025-01-04")
        pending = await self.controller.release()
        pending.cancel()
        await pending.confirm()
        self.assertEqual(self.orchestrator.calls, [])

    async def test_disabled_setting_skips_warning(self) -> None:
        self.context = WarningContext(enabled=False)
        self.controller.press(AID, "2025-01-04")
        self.assertIsNone(await self.controller.release())
        self.assertEqual(self.orchestrator.calls, [("create", AID, ["2025-01-04"])])

    async def test_move_onto_weekend_needs_confirmation(self) -> None:
        self.schedule("2025-01-08", "2025-01-09")
        self.controller.press(AID, "2025-01-08", ALT)
        self.controller.enter("2025-01-11")

        pending = await self.controller.release()

        self.assertEqual(pending.mode, DragMode.move)
        self.assertFalse(pending.can_skip)
        await pending.confirm()
        self.assertEqual(
            self.orchestrator.calls,
            [("move", AID, DateRange("2025-01-08", "2025-01-09"), DateRange("2025-01-11", "2025-01-12"))],
        )

    async def test_move_onto_scheduled_holiday_needs_confirmation(self) -> None:
        self.context = WarningContext(schedule=SEVEN_DAY_WEEK)
        self.schedule("2025-12-20", "2025-12-21", "2025-12-25")
        self.controller.press(AID, "2025-12-20", ALT)
        self.controller.enter("2025-12-24")

        pending = await self.controller.release()

        self.assertIsNotNone(pending)
        self.assertEqual(pending.warning.dates, ["2025-12-25"])
        self.assertEqual(self.orchestrator.calls, [])


class TestLoadWarningContext(unittest.IsolatedAsyncioTestCase):
    def make_client(self, user_settings: dict, day_offs: list[dict], seen: list) -> PlanboardClient:
        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.url.path, dict(request.url.params)))
            if request.url.path == "/api/settings":
                return httpx.Response(200, json=user_settings)
            return httpx.Response(200, json=day_offs)

        return PlanboardClient("http://planboard.test", "token", transport=httpx.MockTransport(handler))

    async def test_reads_setting_and_member_day_offs(self) -> None:
        member_id = uuid.uuid4()
        seen: list = []
        day_offs = [{"id": str(uuid.uuid4()), "team_member_id": str(member_id), "date": "2025-02-05"}]

        async with self.make_client({"warn_weekend_assignments": "true"}, day_offs, seen) as client:
            context = await load_warning_context(
                client, member_id, member_name="Anna Huber", start="2025-02-01", end="2025-02-28"
            )

        self.assertTrue(context.enabled)
        self.assertEqual(tuple(context.day_offs), ("2025-02-05",))
        self.assertEqual(context.member_name, "Anna Huber")
        self.assertIn(
            ("/api/day-offs", {"team_member_id": str(member_id), "start_date": "2025-02-01", "end_date": "2025-02-28"}),
            seen,
        )

    async def test_loaded_context_drives_controller(self) -> None:
        member_id = uuid.uuid4()
        day_offs = [{"id": str(uuid.uuid4()), "team_member_id": str(member_id), "date": "2025-02-05"}]
        async with self.make_client({"warn_weekend_assignments": "true"}, day_offs, []) as client:
            context = await load_warning_context(client, member_id)

        orchestrator = FakeOrchestrator()
        controller = DragController(DragStore(), orchestrator, warning_context=lambda assignment_id: context)
        controller.press(AID, "2025-02-04")
        controller.enter("2025-02-05")

        pending = await controller.release()

        self.assertEqual(pending.warning.dates, ["2025-02-05"])
        await pending.skip()
        self.assertEqual(orchestrator.calls, [("create", AID, ["2025-02-04"])])

    async def test_disabled_setting_turns_warnings_off(self) -> None:
        async with self.make_client({"warn_weekend_assignments": "false"}, [], []) as client:
            context = await load_warning_context(client, uuid.uuid4())
        self.assertFalse(context.enabled)


if __name__ == "__main__":
    unittest.main()
