from __future__ import annotations

import uuid
from typing import Any

import httpx

from planboard.services.date_ranges import DateLike, day_key


_UNSET = object()


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail

    @property
    def existing_group_id(self) -> uuid.UUID | None:
        if self.status_code == 409 and isinstance(self.detail, dict) and self.detail.get("existing_group_id"):
            return uuid.UUID(str(self.detail["existing_group_id"]))
        return None


def _raise_for_status(res: httpx.Response) -> None:
    if res.is_success:
        return
    try:
        body = res.json()
    except ValueError:
        body = res.text
    detail = body.get("detail", body) if isinstance(body, dict) else body
    raise ApiError(res.status_code, detail)


class PlanboardClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api",
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "PlanboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        res = await self._client.request(method, url, **kwargs)
        _raise_for_status(res)
        if res.status_code == 204 or not res.content:
            return None
        return res.json()

    # Day assignments

    async def list_days(self, start: DateLike | None = None, end: DateLike | None = None) -> list[dict]:
        params = {}
        if start is not None:
            params["start_date"] = day_key(start)
        if end is not None:
            params["end_date"] = day_key(end)
        return await self._request("GET", "/assignments/days", params=params)

    async def create_day(self, assignment_id: uuid.UUID, day: DateLike) -> dict:
        return await self._request(
            "POST", "/assignments/days", json={"assignment_id": str(assignment_id), "date": day_key(day)}
        )

    async def create_days(self, assignment_id: uuid.UUID, days: list[DateLike]) -> list[dict]:
        return await self._request(
            "POST",
            "/assignments/days/batch",
            json={"assignment_id": str(assignment_id), "dates": [day_key(d) for d in days]},
        )

    async def update_day_comment(self, day_assignment_id: uuid.UUID, comment: str | None) -> dict:
        return await self._request("PATCH", f"/assignments/days/{day_assignment_id}", json={"comment": comment})

    async def delete_day(self, day_assignment_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/assignments/days/{day_assignment_id}")

    async def delete_days(self, day_assignment_ids: list[uuid.UUID]) -> None:
        await self._request(
            "POST", "/assignments/days/batch-delete", json={"ids": [str(i) for i in day_assignment_ids]}
        )

    # Groups

    async def list_groups(self, start: DateLike | None = None, end: DateLike | None = None) -> list[dict]:
        params = {}
        if start is not None:
            params["start_date"] = day_key(start)
        if end is not None:
            params["end_date"] = day_key(end)
        return await self._request("GET", "/assignments/groups", params=params)

    async def create_group(
        self,
        assignment_id: uuid.UUID,
        start: DateLike,
        end: DateLike,
        *,
        priority: str = "normal",
        comment: str | None = None,
    ) -> dict:
        return await self._request(
            "POST",
            "/assignments/groups",
            json={
                "assignment_id": str(assignment_id),
                "start_date": day_key(start),
                "end_date": day_key(end),
                "priority": priority,
                "comment": comment,
            },
        )

    async def update_group(
        self, group_id: uuid.UUID, *, priority: str | None = None, comment: str | None | object = _UNSET
    ) -> dict:
        body: dict[str, Any] = {}
        if priority is not None:
            body["priority"] = priority
        if comment is not _UNSET:
            body["comment"] = comment
        return await self._request("PATCH", f"/assignments/groups/{group_id}", json=body)

    async def delete_group(self, group_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/assignments/groups/{group_id}")

    async def save_group(
        self,
        assignment_id: uuid.UUID,
        start: DateLike,
        end: DateLike,
        *,
        priority: str = "normal",
        comment: str | None = None,
        group_id: uuid.UUID | None = None,
    ) -> dict:
        """Create the group, or update the one already covering the range."""
        if group_id is not None:
            return await self.update_group(group_id, priority=priority, comment=comment)
        try:
            return await self.create_group(assignment_id, start, end, priority=priority, comment=comment)
        except ApiError as exc:
            if exc.existing_group_id is None:
                raise
            return await self.update_group(exc.existing_group_id, priority=priority, comment=comment)

    # Move

    async def move_block(
        self,
        assignment_id: uuid.UUID,
        old_start: DateLike,
        old_end: DateLike,
        new_start: DateLike,
        new_end: DateLike,
    ) -> dict:
        return await self._request(
            "POST",
            "/assignments/move",
            json={
                "assignment_id": str(assignment_id),
                "old_start_date": day_key(old_start),
                "old_end_date": day_key(old_end),
                "new_start_date": day_key(new_start),
                "new_end_date": day_key(new_end),
            },
        )

    # Calendar context

    async def list_day_offs(
        self,
        start: DateLike | None = None,
        end: DateLike | None = None,
        *,
        team_member_id: uuid.UUID | None = None,
    ) -> list[dict]:
        params = {}
        if team_member_id is not None:
            params["team_member_id"] = str(team_member_id)
        if start is not None:
            params["start_date"] = day_key(start)
        if end is not None:
            params["end_date"] = day_key(end)
        return await self._request("GET", "/day-offs", params=params)

    async def get_settings(self) -> dict[str, str]:
        return await self._request("GET", "/settings")
