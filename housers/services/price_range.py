"""Logarithmic mapping for the dual-handle price filter."""
from __future__ import annotations

import math
from dataclasses import dataclass

MIN_PRICE = 25_000.0
MAX_PRICE = 50_000_000.0
MIN_HANDLE_GAP = 0.05

# (upper bound exclusive, increment)
_PRICE_STEPS: tuple[tuple[float, float], ...] = (
    (100_000.0, 5_000.0),
    (500_000.0, 10_000.0),
    (1_000_000.0, 25_000.0),
    (5_000_000.0, 100_000.0),
    (math.inf, 500_000.0),
)


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class PriceRange:
    absolute_min: float = MIN_PRICE
    absolute_max: float = MAX_PRICE
    min_gap: float = MIN_HANDLE_GAP

    @property
    def _log_bounds(self) -> tuple[float, float]:
        return math.log10(self.absolute_min), math.log10(self.absolute_max)

    def price_to_position(self, price: float) -> float:
        log_min, log_max = self._log_bounds
        log_price = math.log10(_clamp(price, self.absolute_min, self.absolute_max))
        return (log_price - log_min) / (log_max - log_min)

    def position_to_price(self, position: float) -> float:
        """Map a slider position in ``[0, 1]`` to a price rounded to a friendly step."""

        log_min, log_max = self._log_bounds
        raw_price = 10 ** (log_min + _clamp(position, 0.0, 1.0) * (log_max - log_min))
        for upper, step in _PRICE_STEPS:
            if raw_price < upper:
                rounded = _round_half_up(raw_price / step) * step
                break
        return _clamp(rounded, self.absolute_min, self.absolute_max)

    def drag_min_handle(self, position: float, max_position: float) -> float:
        return max(0.0, min(position, max_position - self.min_gap))

    def drag_max_handle(self, position: float, min_position: float) -> float:
        return max(min_position + self.min_gap, min(position, 1.0))


DEFAULT_PRICE_RANGE = PriceRange()


def position_to_price(position: float) -> float:
    return DEFAULT_PRICE_RANGE.position_to_price(position)


def price_to_position(price: float) -> float:
    return DEFAULT_PRICE_RANGE.price_to_position(price)


def format_price(price: float) -> str:
    """Short label such as ``$2.5M`` or ``$750K``."""

    if price >= 1_000_000:
        millions = price / 1_000_000
        if millions == math.floor(millions):
            return f"${int(millions)}M"
        return f"${millions:.1f}M"
    if price >= 1000:
        return f"${int(price / 1000)}K"
    return f"${int(price)}"


__all__ = [
    "MIN_PRICE",
    "MAX_PRICE",
    "MIN_HANDLE_GAP",
    "PriceRange",
    "DEFAULT_PRICE_RANGE",
    "position_to_price",
    "price_to_position",
    "format_price",
]
