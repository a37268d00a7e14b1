"""Per-user view-model sessions held for the lifetime of the process."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol, Sequence
from uuid import UUID

from ..clients.backend import get_backend_client
from ..clients.onboarding import OnboardingImportClient
from ..clients.stores import BackendNotificationStore, BackendProfileDirectory
from ..config import get_settings
from ..schemas import Profile
from .discover_service import DiscoverMoreSession, ListingImporter
from .events import EventBus, UnreadCountStale
from .mention_service import MentionResolver
from .notification_service import NotificationStore, NotificationSyncEngine, UnreadBadge
from .notification_stream import refresh_stream

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    async def find_by_usernames(self, usernames: Sequence[str]) -> list[Profile]:
        ...

    async def get_profile(self, user_id: UUID) -> Profile | None:
        ...

    async def update_profile(self, user_id: UUID, values: Mapping[str, Any]) -> None:
        ...


@dataclass
class UserSession:
    user_id: UUID
    bus: EventBus
    profiles: ProfileRepository
    mentions: MentionResolver
    notifications: NotificationSyncEngine
    badge: UnreadBadge
    discover: DiscoverMoreSession
    _teardown: list[Callable[[], None]] = field(default_factory=list)

    def close(self) -> None:
        self.notifications.close()
        self.badge.close()
        for callback in self._teardown:
            callback()
        self._teardown.clear()


def build_user_session(
    user_id: UUID,
    *,
    profiles: ProfileRepository,
    notification_store: NotificationStore,
    importer: ListingImporter,
    page_size: int | None = None,
    max_imports: int | None = None,
) -> UserSession:
    if page_size is None:
        page_size = get_settings().notification_page_size
    if max_imports is None:
        max_imports = get_settings().max_imports_per_session
    bus = EventBus()

    async def _count_unread() -> int:
        return await notification_store.count_unread(user_id)

    async def _push_refresh(_event: UnreadCountStale) -> None:
        await refresh_stream.push_refresh(str(user_id))

    session = UserSession(
        user_id=user_id,
        bus=bus,
        profiles=profiles,
        mentions=MentionResolver(profiles),
        notifications=NotificationSyncEngine(
            notification_store,
            bus=bus,
            page_size=page_size,
        ),
        badge=UnreadBadge(_count_unread, bus=bus),
        discover=DiscoverMoreSession(
            profiles,
            importer,
            max_imports=max_imports,
        ),
    )
    session._teardown.append(bus.subscribe(UnreadCountStale, _push_refresh))
    return session


SessionFactory = Callable[[UUID], UserSession]


def backend_session_factory(user_id: UUID) -> UserSession:
    client = get_backend_client()
    return build_user_session(
        user_id,
        profiles=BackendProfileDirectory(client),
        notification_store=BackendNotificationStore(client),
        importer=OnboardingImportClient(),
    )


class SessionRegistry:
    """Creates sessions on first use and keeps them until dropped."""

    def __init__(self, factory: SessionFactory = backend_session_factory) -> None:
        self._factory = factory
        self._sessions: dict[UUID, UserSession] = {}

    def get(self, user_id: UUID) -> UserSession:
        session = self._sessions.get(user_id)
        if session is None:
            session = self._factory(user_id)
            self._sessions[user_id] = session
            logger.debug("Created view session | user_id=%s", user_id)
        return session

    def drop(self, user_id: UUID) -> None:
        session = self._sessions.pop(user_id, None)
        if session is not None:
            session.close()

    def close_all(self) -> None:
        for user_id in list(self._sessions):
            self.drop(user_id)

    def __len__(self) -> int:
        return len(self._sessions)


_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


__all__ = [
    "UserSession",
    "SessionRegistry",
    "SessionFactory",
    "build_user_session",
    "backend_session_factory",
    "get_session_registry",
]
