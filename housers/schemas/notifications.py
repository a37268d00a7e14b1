"""Schemas for notifications."""
from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationKind(StrEnum):
    LIKE = "like"
    COMMENT = "comment"
    OPEN_HOUSE_CANCELLED = "open_house_cancelled"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "NotificationKind":
        """Map a backend ``type`` string onto the closed enum, defaulting to OTHER."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.OTHER


class Notification(BaseModel):
    """A row of the backend ``notifications`` table."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: UUID
    user_id: UUID
    triggered_by_user_id: UUID | None = None
    kind: NotificationKind = Field(default=NotificationKind.OTHER, alias="type")
    title: str = ""
    message: str = ""
    home_id: UUID | None = None
    is_read: bool = False
    created_at: datetime

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> NotificationKind:
        return NotificationKind.parse(value)


class NotificationResponse(BaseModel):
    id: UUID
    user_id: UUID
    triggered_by_user_id: UUID | None = None
    type: NotificationKind
    title: str
    message: str
    home_id: UUID | None = None
    is_read: bool
    created_at: datetime
    icon: str
    color: str
    time_ago: str


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    state: str


class NotificationSummaryResponse(BaseModel):
    unread_count: int = 0


__all__ = [
    "NotificationKind",
    "Notification",
    "NotificationResponse",
    "NotificationListResponse",
    "NotificationSummaryResponse",
]
