"""Fallback avatar helpers: initials and a stable gradient per username."""
from __future__ import annotations

from dataclasses import dataclass

_INT64_SPAN = 1 << 64
_INT64_MIN = -(1 << 63)


@dataclass(frozen=True, slots=True)
class Color:
    red: float
    green: float
    blue: float

    @property
    def hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*(round(channel * 255) for channel in (self.red, self.green, self.blue)))


# (start, end) gradient stops; the reversed pair is the second variant.
AVATAR_PALETTE: tuple[tuple[Color, Color], ...] = (
    (Color(1.0, 0.65, 0.3), Color(1.0, 0.45, 0.2)),  # houser orange
    (Color(0.2, 0.5, 1.0), Color(0.1, 0.3, 0.8)),  # blue
    (Color(0.6, 0.3, 0.9), Color(0.4, 0.2, 0.7)),  # purple
    (Color(0.2, 0.7, 0.4), Color(0.1, 0.5, 0.3)),  # green
    (Color(0.9, 0.3, 0.4), Color(0.7, 0.2, 0.3)),  # red/pink
    (Color(0.2, 0.7, 0.7), Color(0.1, 0.5, 0.6)),  # teal
)


def _wrap_int64(value: int) -> int:
    return (value - _INT64_MIN) % _INT64_SPAN + _INT64_MIN


def username_hash(username: str) -> int:
    """Sum of the lower-cased code points, wrapped to a signed 64-bit integer."""

    total = 0
    for char in username.lower():
        total = _wrap_int64(total + ord(char))
    return total


def colors_for(username: str, palette: tuple[tuple[Color, Color], ...] = AVATAR_PALETTE) -> tuple[Color, Color]:
    """Return the two gradient stops for ``username`` (case-insensitive)."""

    size = len(palette)
    magnitude = abs(username_hash(username))
    start, end = palette[magnitude % size]
    # abs(hash / size) with truncating division
    if (magnitude // size) % 2 == 0:
        return start, end
    return end, start


def avatar_initial(username: str) -> str:
    if not username:
        return "?"
    return username[0].upper()


__all__ = ["Color", "AVATAR_PALETTE", "username_hash", "colors_for", "avatar_initial"]
