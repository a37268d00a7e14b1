"""Reputation tiers derived from a static points table."""
from __future__ import annotations

from enum import StrEnum


class UserTier(StrEnum):
    NEWCOMER = "newcomer"
    CONTRIBUTOR = "contributor"
    LOCAL_EXPERT = "local_expert"
    NEIGHBORHOOD_PRO = "neighborhood_pro"
    SUPER_HOUSER = "super_houser"

    @classmethod
    def from_string(cls, value: str | None) -> "UserTier":
        if not value:
            return cls.NEWCOMER
        try:
            return cls(value)
        except ValueError:
            return cls.NEWCOMER

    @property
    def min_points(self) -> int:
        return _MIN_POINTS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def short_name(self) -> str:
        return _SHORT_NAMES[self]

    @property
    def color(self) -> str | None:
        return _COLORS[self]

    @property
    def next_tier(self) -> "UserTier | None":
        order = list(UserTier)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None


_MIN_POINTS: dict[UserTier, int] = {
    UserTier.NEWCOMER: 0,
    UserTier.CONTRIBUTOR: 100,
    UserTier.LOCAL_EXPERT: 500,
    UserTier.NEIGHBORHOOD_PRO: 2000,
    UserTier.SUPER_HOUSER: 10000,
}

_DISPLAY_NAMES: dict[UserTier, str] = {
    UserTier.NEWCOMER: "Newcomer",
    UserTier.CONTRIBUTOR: "Contributor",
    UserTier.LOCAL_EXPERT: "Local Expert",
    UserTier.NEIGHBORHOOD_PRO: "Pro",
    UserTier.SUPER_HOUSER: "Super Houser",
}

_SHORT_NAMES: dict[UserTier, str] = {
    UserTier.NEWCOMER: "",
    UserTier.CONTRIBUTOR: "C",
    UserTier.LOCAL_EXPERT: "E",
    UserTier.NEIGHBORHOOD_PRO: "P",
    UserTier.SUPER_HOUSER: "S",
}

# Newcomers get no badge colour
_COLORS: dict[UserTier, str | None] = {
    UserTier.NEWCOMER: None,
    UserTier.CONTRIBUTOR: "#b87333",  # bronze
    UserTier.LOCAL_EXPERT: "#9999a6",  # silver
    UserTier.NEIGHBORHOOD_PRO: "#d9a621",  # gold
    UserTier.SUPER_HOUSER: "#61b5b5",  # platinum
}


def tier_for_points(points: int) -> UserTier:
    current = UserTier.NEWCOMER
    for tier in UserTier:
        if points >= tier.min_points:
            current = tier
    return current


def tier_progress(tier: UserTier, points: int | None) -> float:
    """Fraction of the way from ``tier`` to the next one, clamped to ``[0, 1]``."""

    upcoming = tier.next_tier
    if upcoming is None:
        return 1.0
    span = upcoming.min_points - tier.min_points
    progress = ((points or 0) - tier.min_points) / span
    return min(max(progress, 0.0), 1.0)


def points_to_next(tier: UserTier, points: int | None) -> int:
    upcoming = tier.next_tier
    if upcoming is None:
        return 0
    return max(0, upcoming.min_points - (points or 0))


__all__ = ["UserTier", "tier_for_points", "tier_progress", "points_to_next"]
