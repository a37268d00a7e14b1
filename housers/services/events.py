"""In-process publish/subscribe bus for UI invalidation signals."""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, ClassVar, TypeVar

from ..constants import REFRESH_NOTIFICATIONS_EVENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnreadCountStale:
    """Payload-less signal: subscribers should recount unread notifications."""

    name: ClassVar[str] = REFRESH_NOTIFICATIONS_EVENT


EventT = TypeVar("EventT")
Handler = Callable[[Any], Awaitable[None] | None]


class EventBus:
    """Fire-and-forget fanout; async handlers are scheduled on the running loop."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = {}
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, event_type: type[EventT], handler: Callable[[EventT], Awaitable[None] | None]) -> Callable[[], None]:
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(handler)

        def _unsubscribe() -> None:
            try:
                handlers.remove(handler)
            except ValueError:
                pass

        return _unsubscribe

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, ()))

    def publish(self, event: object) -> None:
        for handler in list(self._handlers.get(type(event), ())):
            try:
                result = handler(event)
            except Exception:
                logger.exception("Event handler failed | event=%s", type(event).__name__)
                continue
            if inspect.isawaitable(result):
                self._schedule(result, type(event).__name__)

    def _schedule(self, awaitable: Awaitable[None], event_name: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; dropping async handler | event=%s", event_name)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task = loop.create_task(self._run(awaitable, event_name))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _run(awaitable: Awaitable[None], event_name: str) -> None:
        try:
            await awaitable
        except Exception:
            logger.exception("Async event handler failed | event=%s", event_name)


event_bus = EventBus()


__all__ = ["EventBus", "UnreadCountStale", "event_bus"]
