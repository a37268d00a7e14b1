"""Profile presentation routes: fallback avatars and tier progress."""
from __future__ import annotations

from fastapi import APIRouter, Query

from ..schemas import AvatarResponse, TierProgressResponse
from ..services import UserTier, avatar_initial, colors_for, points_to_next, tier_progress

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/tiers/{tier}", response_model=TierProgressResponse)
async def tier_progress_endpoint(tier: str, points: int = Query(default=0, ge=0)) -> TierProgressResponse:
    current = UserTier.from_string(tier)
    upcoming = current.next_tier
    return TierProgressResponse(
        tier=str(current),
        display_name=current.display_name,
        color=current.color,
        next_tier=str(upcoming) if upcoming is not None else None,
        progress=tier_progress(current, points),
        points_to_next=points_to_next(current, points),
    )


@router.get("/{username}/avatar", response_model=AvatarResponse)
async def avatar_endpoint(username: str) -> AvatarResponse:
    start, end = colors_for(username)
    return AvatarResponse(username=username, initial=avatar_initial(username), colors=[start.hex, end.hex])
