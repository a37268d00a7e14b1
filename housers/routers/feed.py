"""Feed helpers: price filter mapping and the discover-more import."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..schemas import DiscoverResponse, PriceRangeResponse
from ..services import SessionRegistry, format_price, get_current_user_id, get_session_registry
from ..services.price_range import DEFAULT_PRICE_RANGE

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("/price-range", response_model=PriceRangeResponse)
async def price_range_endpoint(
    min_position: float = Query(default=0.0, ge=0.0, le=1.0),
    max_position: float = Query(default=1.0, ge=0.0, le=1.0),
) -> PriceRangeResponse:
    slider = DEFAULT_PRICE_RANGE
    low = slider.drag_min_handle(min_position, max_position)
    high = slider.drag_max_handle(max_position, low)
    min_price = slider.position_to_price(low)
    max_price = slider.position_to_price(high)
    return PriceRangeResponse(
        min_position=low,
        max_position=high,
        min_price=min_price,
        max_price=max_price,
        min_label=format_price(min_price),
        max_label=format_price(max_price),
    )


@router.post("/discover", response_model=DiscoverResponse)
async def discover_more(
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> DiscoverResponse:
    session = registry.get(user_id).discover
    result = await session.discover(user_id)
    return DiscoverResponse(
        status=str(result.status),
        message=result.message,
        posted=result.posted,
        remaining=session.remaining,
    )
