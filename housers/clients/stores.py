"""Backend-backed implementations of the service storage protocols."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence
from uuid import UUID

from pydantic import ValidationError as SchemaValidationError

from ..errors import NotFoundError
from ..schemas import Notification, Profile
from .backend import BackendClient, eq, usernames_filter

logger = logging.getLogger(__name__)


class BackendProfileDirectory:
    """Reads the ``profiles`` table."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def find_by_usernames(self, usernames: Sequence[str]) -> list[Profile]:
        if not usernames:
            return []
        rows = await self._client.select("profiles", filters=usernames_filter(list(usernames)))
        return _parse_rows(Profile, rows)

    async def get_profile(self, user_id: UUID) -> Profile | None:
        try:
            row = await self._client.select_one("profiles", filters={"id": eq(user_id)})
        except NotFoundError:
            return None
        profiles = _parse_rows(Profile, [row])
        return profiles[0] if profiles else None

    async def update_profile(self, user_id: UUID, values: Mapping[str, Any]) -> None:
        await self._client.update("profiles", values, filters={"id": eq(user_id)})


class BackendNotificationStore:
    """Reads and updates the ``notifications`` table."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def fetch_recent(self, user_id: UUID, *, limit: int) -> list[Notification]:
        rows = await self._client.select(
            "notifications",
            filters={"user_id": eq(user_id)},
            order="created_at.desc",
            limit=limit,
        )
        return _parse_rows(Notification, rows)

    async def mark_read(self, notification_id: UUID) -> None:
        await self._client.update("notifications", {"is_read": True}, filters={"id": eq(notification_id)})

    async def mark_all_read(self, user_id: UUID) -> None:
        await self._client.update(
            "notifications",
            {"is_read": True},
            filters={"user_id": eq(user_id), "is_read": eq(False)},
        )

    async def count_unread(self, user_id: UUID) -> int:
        rows = await self._client.select(
            "notifications",
            columns="id",
            filters={"user_id": eq(user_id), "is_read": eq(False)},
        )
        return len(rows)


def _parse_rows(model: Any, rows: list[dict[str, Any]]) -> list[Any]:
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except SchemaValidationError:
            logger.warning("Skipping malformed %s row | id=%s", model.__name__, row.get("id"))
    return parsed


__all__ = ["BackendProfileDirectory", "BackendNotificationStore"]
