"""Rate-limited "discover more" listing import for the feed."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, Sequence
from uuid import UUID

from ..clients.onboarding import OnboardingImportRejected
from ..errors import NetworkError
from ..schemas import Profile

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMPORTS = 10
DEFAULT_USER_TYPE = "browsing"
USER_TYPE_PRIORITY: tuple[str, ...] = ("buyer", "renter", "investor", "realtor", "professional", "designer")


class ProfileSource(Protocol):
    async def get_profile(self, user_id: UUID) -> Profile | None:
        ...


class ListingImporter(Protocol):
    async def import_listings(
        self,
        *,
        location: str,
        user_type: str,
        user_id: UUID,
        fetch_descriptions: bool = True,
    ) -> int | None:
        ...


class DiscoverStatus(StrEnum):
    IMPORTED = "imported"
    LIMIT_REACHED = "limit_reached"
    BUSY = "busy"
    MISSING_MARKET = "missing_market"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DiscoverResult:
    status: DiscoverStatus
    message: str
    posted: int | None = None

    @property
    def should_refresh_feed(self) -> bool:
        return self.status is DiscoverStatus.IMPORTED


def primary_user_type(user_types: Sequence[str] | None) -> str:
    if not user_types:
        return DEFAULT_USER_TYPE
    for candidate in USER_TYPE_PRIORITY:
        if candidate in user_types:
            return candidate
    return DEFAULT_USER_TYPE


def _imported_message(posted: int | None) -> str:
    if posted is None:
        return "Feed refreshed!"
    if posted > 0:
        return f"Found {posted} new properties!"
    return "All caught up! No new listings right now."


class DiscoverMoreSession:
    """Per-session import counter; one import at a time, capped per session."""

    def __init__(
        self,
        profiles: ProfileSource,
        importer: ListingImporter,
        *,
        max_imports: int = DEFAULT_MAX_IMPORTS,
    ) -> None:
        self._profiles = profiles
        self._importer = importer
        self._max_imports = max_imports
        self.import_count = 0
        self.is_importing = False

    @property
    def remaining(self) -> int:
        return max(0, self._max_imports - self.import_count)

    async def discover(self, user_id: UUID) -> DiscoverResult:
        if self.import_count >= self._max_imports:
            return DiscoverResult(DiscoverStatus.LIMIT_REACHED, "You've reached today's discovery limit")
        if self.is_importing:
            return DiscoverResult(DiscoverStatus.BUSY, "Already looking for new properties")

        self.is_importing = True
        try:
            return await self._run_import(user_id)
        finally:
            self.is_importing = False

    async def _run_import(self, user_id: UUID) -> DiscoverResult:
        try:
            profile = await self._profiles.get_profile(user_id)
            if profile is None:
                logger.error("Discover import has no profile row | user_id=%s", user_id)
                return DiscoverResult(DiscoverStatus.FAILED, "Something went wrong")
            market = (profile.market or "").strip()
            if not market:
                return DiscoverResult(DiscoverStatus.MISSING_MARKET, "Please set your market in your profile")

            posted = await self._importer.import_listings(
                location=market,
                user_type=primary_user_type(profile.user_types),
                user_id=user_id,
                fetch_descriptions=True,
            )
        except OnboardingImportRejected:
            return DiscoverResult(DiscoverStatus.REJECTED, "Couldn't find new properties")
        except NetworkError:
            logger.exception("Discovering properties failed | user_id=%s", user_id)
            return DiscoverResult(DiscoverStatus.FAILED, "Something went wrong")

        self.import_count += 1
        logger.info("Discover import finished | user_id=%s posted=%s remaining=%d", user_id, posted, self.remaining)
        return DiscoverResult(DiscoverStatus.IMPORTED, _imported_message(posted), posted)


__all__ = [
    "DiscoverMoreSession",
    "DiscoverResult",
    "DiscoverStatus",
    "ListingImporter",
    "ProfileSource",
    "primary_user_type",
]
