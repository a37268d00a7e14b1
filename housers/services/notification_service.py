"""Notification list state and read-state synchronization with the backend."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Awaitable, Callable, Protocol, Sequence
from uuid import UUID

from ..constants import NOTIFICATION_PAGE_SIZE
from ..errors import FetchError, NetworkError
from ..schemas import Notification, NotificationKind
from .events import EventBus, UnreadCountStale, event_bus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NotificationStyle:
    icon: str
    color: str


NOTIFICATION_STYLES: dict[NotificationKind, NotificationStyle] = {
    NotificationKind.LIKE: NotificationStyle(icon="heart.fill", color="pink"),
    NotificationKind.COMMENT: NotificationStyle(icon="bubble.left.fill", color="blue"),
    NotificationKind.OPEN_HOUSE_CANCELLED: NotificationStyle(icon="calendar.badge.exclamationmark", color="red"),
    NotificationKind.OTHER: NotificationStyle(icon="bell.fill", color="orange"),
}


def style_for(kind: NotificationKind) -> NotificationStyle:
    return NOTIFICATION_STYLES[kind]


def time_ago(created_at: datetime, *, now: datetime | None = None) -> str:
    """Render a short relative timestamp such as ``3h ago``."""

    current = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    seconds = int((current - created_at).total_seconds())
    if seconds < 0:
        return "just now"
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400
    if days >= 7:
        return f"{days // 7}w ago"
    if days > 0:
        return f"{days}d ago"
    if hours > 0:
        return f"{hours}h ago"
    if minutes > 0:
        return f"{minutes}m ago"
    return "just now"


class NotificationStore(Protocol):
    async def fetch_recent(self, user_id: UUID, *, limit: int) -> list[Notification]:
        ...

    async def mark_read(self, notification_id: UUID) -> None:
        ...

    async def mark_all_read(self, user_id: UUID) -> None:
        ...

    async def count_unread(self, user_id: UUID) -> int:
        ...


class SyncState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


# Called after a remote mark-read fails. ``notification_ids`` is None for the bulk update.
MarkReadFailurePolicy = Callable[["NotificationSyncEngine", Sequence[UUID] | None, NetworkError], None]


def keep_optimistic_state(
    engine: "NotificationSyncEngine",
    notification_ids: Sequence[UUID] | None,
    error: NetworkError,
) -> None:
    """Leave the local read flags as they are; the backend may disagree until the next load."""

    logger.warning(
        "Remote mark-read failed; keeping local read state | ids=%s status=%s",
        "all" if notification_ids is None else ",".join(str(item) for item in notification_ids),
        error.status_code,
    )


class NotificationSyncEngine:
    """Client-side projection of one user's notification list.

    Reads go through to the store; read-state writes are applied locally first
    and then sent to the store. Every mutation happens on the event loop thread.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        bus: EventBus | None = None,
        page_size: int = NOTIFICATION_PAGE_SIZE,
        on_remote_failure: MarkReadFailurePolicy = keep_optimistic_state,
    ) -> None:
        self._store = store
        self._bus = bus or event_bus
        self._page_size = page_size
        self._on_remote_failure = on_remote_failure
        self._notifications: list[Notification] = []
        self._state = SyncState.IDLE
        self._inflight_loads = 0
        self._loaded_once = False
        self._closed = False
        self.last_error: FetchError | None = None

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._notifications if not item.is_read)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Detach the engine; results of tasks still in flight are discarded."""

        self._closed = True

    async def load(self, user_id: UUID) -> list[Notification]:
        """Fetch the newest notifications and replace the local list.

        Overlapping calls are allowed; whichever response arrives last is the
        one left visible.
        """

        self._inflight_loads += 1
        self._state = SyncState.LOADING
        try:
            fetched = await self._store.fetch_recent(user_id, limit=self._page_size)
        except NetworkError as exc:
            error = exc if isinstance(exc, FetchError) else FetchError(str(exc), status_code=exc.status_code)
            self._finish_load(error=error)
            logger.warning("Loading notifications failed | user_id=%s status=%s", user_id, error.status_code)
            raise error from exc
        except BaseException:
            self._finish_load(error=None, cancelled=True)
            raise

        items = sorted(fetched, key=lambda item: item.created_at, reverse=True)[: self._page_size]
        if not self._closed:
            self._notifications = items
        self._finish_load(error=None)
        logger.debug("Loaded notifications | user_id=%s count=%d", user_id, len(items))
        return list(items)

    def _finish_load(self, *, error: FetchError | None, cancelled: bool = False) -> None:
        self._inflight_loads -= 1
        if self._closed:
            return
        if not cancelled:
            self.last_error = error
            if error is None:
                self._loaded_once = True
        if self._inflight_loads > 0:
            return
        if cancelled:
            self._state = SyncState.LOADED if self._loaded_once else SyncState.IDLE
        elif error is not None:
            self._state = SyncState.LOAD_FAILED
        else:
            self._state = SyncState.LOADED

    async def refresh(self, user_id: UUID) -> bool:
        """Pull-to-refresh: like ``load`` but failures only get logged."""

        try:
            await self.load(user_id)
        except FetchError:
            return False
        return True

    def dismiss_error(self) -> None:
        """Acknowledge a failed load: ``LOAD_FAILED`` goes back to ``IDLE``.

        ``last_error`` is kept until the next successful load; a load already
        in flight owns the state and is left alone.
        """

        if self._state is SyncState.LOAD_FAILED and self._inflight_loads == 0:
            self._state = SyncState.IDLE

    async def mark_read(self, notification: Notification) -> None:
        """Mark one notification read; a no-op when it already is."""

        if self._closed or notification.is_read:
            return
        index = self._index_of(notification.id)
        if index is not None and self._notifications[index].is_read:
            return

        if index is not None:
            self._notifications[index] = self._notifications[index].model_copy(update={"is_read": True})
        self._publish_stale()

        try:
            await self._store.mark_read(notification.id)
        except NetworkError as exc:
            if not self._closed:
                self._on_remote_failure(self, [notification.id], exc)

    async def mark_all_read(self, user_id: UUID) -> None:
        """Mark every unread notification of ``user_id`` read, locally and remotely."""

        if self._closed:
            return
        self._notifications = [
            item if item.is_read else item.model_copy(update={"is_read": True}) for item in self._notifications
        ]
        self._publish_stale()

        try:
            await self._store.mark_all_read(user_id)
        except NetworkError as exc:
            if not self._closed:
                self._on_remote_failure(self, None, exc)

    def _index_of(self, notification_id: UUID) -> int | None:
        for index, item in enumerate(self._notifications):
            if item.id == notification_id:
                return index
        return None

    def _publish_stale(self) -> None:
        self._bus.publish(UnreadCountStale())


class UnreadBadge:
    """Unread counter that recounts whenever an ``UnreadCountStale`` arrives.

    A burst of events collapses into as few recounts as possible; the count
    always reflects a recount started after the latest event.
    """

    def __init__(self, counter: Callable[[], Awaitable[int]], *, bus: EventBus | None = None) -> None:
        self._counter = counter
        self._dirty = False
        self._task: asyncio.Task[None] | None = None
        self.count = 0
        self._unsubscribe = (bus or event_bus).subscribe(UnreadCountStale, self._on_stale)

    def _on_stale(self, _event: UnreadCountStale) -> None:
        self._dirty = True
        if self._task is not None and not self._task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._dirty:
            self._dirty = False
            try:
                self.count = await self._counter()
            except NetworkError:
                logger.warning("Unread badge recount failed; keeping %d", self.count)

    async def refresh(self) -> int:
        """Recount now and wait for the result."""

        self._on_stale(UnreadCountStale())
        if self._task is not None:
            await self._task
        return self.count

    def close(self) -> None:
        self._unsubscribe()


__all__ = [
    "NotificationKind",
    "NotificationStyle",
    "NOTIFICATION_STYLES",
    "style_for",
    "time_ago",
    "NotificationStore",
    "SyncState",
    "MarkReadFailurePolicy",
    "keep_optimistic_state",
    "NotificationSyncEngine",
    "UnreadBadge",
]
