"""Mention rendering and activation routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from ..schemas import (
    MentionActivationResponse,
    MentionRenderRequest,
    MentionRenderResponse,
    MentionSegmentResponse,
)
from ..services import SessionRegistry, get_current_user_id, get_session_registry

router = APIRouter(prefix="/mentions", tags=["mentions"])


@router.post("/render", response_model=MentionRenderResponse)
async def render_mentions(
    payload: MentionRenderRequest,
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> MentionRenderResponse:
    segments = await registry.get(user_id).mentions.render(payload.text)
    return MentionRenderResponse(
        segments=[
            MentionSegmentResponse(text=segment.text, username=segment.username, user_id=segment.user_id)
            for segment in segments
        ]
    )


@router.get("/{username}", response_model=MentionActivationResponse)
async def activate_mention(
    username: str,
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> MentionActivationResponse:
    """Resolve a tapped mention; ``user_id`` is null when no account matches."""

    target = await registry.get(user_id).mentions.activate(username)
    return MentionActivationResponse(username=username, user_id=target)
