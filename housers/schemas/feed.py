"""Schemas for the feed filters and the discover-more action."""
from __future__ import annotations

from pydantic import BaseModel


class PriceRangeResponse(BaseModel):
    min_position: float
    max_position: float
    min_price: float
    max_price: float
    min_label: str
    max_label: str


class DiscoverResponse(BaseModel):
    status: str
    message: str
    posted: int | None = None
    remaining: int


__all__ = ["PriceRangeResponse", "DiscoverResponse"]
