"""Schemas for user profiles, avatars and tiers."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class Profile(BaseModel):
    """A row of the backend ``profiles`` table."""

    model_config = ConfigDict(extra="ignore")

    id: UUID
    username: str
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    market: str | None = None
    user_types: list[str] | None = None
    tier: str | None = None
    points: int | None = None
    accepted_terms_version: str | None = None


class AvatarResponse(BaseModel):
    username: str
    initial: str
    colors: list[str]


class TierProgressResponse(BaseModel):
    tier: str
    display_name: str
    color: str | None
    next_tier: str | None
    progress: float
    points_to_next: int


__all__ = ["Profile", "AvatarResponse", "TierProgressResponse"]
