"""Schemas for mention rendering."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class MentionRenderRequest(BaseModel):
    text: str = Field(default="", max_length=5000)


class MentionSegmentResponse(BaseModel):
    text: str
    username: str | None = None
    user_id: UUID | None = None


class MentionRenderResponse(BaseModel):
    segments: list[MentionSegmentResponse]


class MentionActivationResponse(BaseModel):
    username: str
    user_id: UUID | None = None


__all__ = [
    "MentionRenderRequest",
    "MentionSegmentResponse",
    "MentionRenderResponse",
    "MentionActivationResponse",
]
