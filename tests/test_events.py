"""Tests for the event bus and the unread badge recount."""
from __future__ import annotations

import asyncio
import logging

import pytest

from housers.errors import NetworkError
from housers.services.events import EventBus, UnreadCountStale
from housers.services.notification_service import UnreadBadge


def test_publish_reaches_subscribers_until_unsubscribed() -> None:
    bus = EventBus()
    received: list[UnreadCountStale] = []
    unsubscribe = bus.subscribe(UnreadCountStale, received.append)

    bus.publish(UnreadCountStale())
    unsubscribe()
    unsubscribe()
    bus.publish(UnreadCountStale())

    assert len(received) == 1
    assert bus.subscriber_count(UnreadCountStale) == 0
    assert UnreadCountStale.name == "RefreshNotifications"


def test_failing_handler_does_not_block_others(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()
    received: list[UnreadCountStale] = []

    def boom(_event: UnreadCountStale) -> None:
        raise RuntimeError("handler exploded")

    bus.subscribe(UnreadCountStale, boom)
    bus.subscribe(UnreadCountStale, received.append)

    caplog.set_level(logging.ERROR)
    bus.publish(UnreadCountStale())

    assert len(received) == 1
    assert "Event handler failed" in caplog.text


def test_async_handler_without_loop_is_dropped() -> None:
    bus = EventBus()
    calls: list[str] = []

    async def handler(_event: UnreadCountStale) -> None:
        calls.append("ran")

    bus.subscribe(UnreadCountStale, handler)
    bus.publish(UnreadCountStale())

    assert calls == []


@pytest.mark.asyncio
async def test_async_handler_runs_on_loop() -> None:
    bus = EventBus()
    done = asyncio.Event()

    async def handler(_event: UnreadCountStale) -> None:
        done.set()

    bus.subscribe(UnreadCountStale, handler)
    bus.publish(UnreadCountStale())

    await asyncio.wait_for(done.wait(), timeout=1)


@pytest.mark.asyncio
async def test_badge_coalesces_bursts() -> None:
    bus = EventBus()
    calls = 0
    gate = asyncio.Event()

    async def counter() -> int:
        nonlocal calls
        calls += 1
        await gate.wait()
        return calls

    badge = UnreadBadge(counter, bus=bus)
    for _ in range(5):
        bus.publish(UnreadCountStale())
    await asyncio.sleep(0)
    for _ in range(5):
        bus.publish(UnreadCountStale())
    gate.set()

    assert await badge.refresh() == calls
    # one recount for the first burst, one for everything published while it ran
    assert calls == 2


@pytest.mark.asyncio
async def test_badge_keeps_last_count_on_failure(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()
    results: list[int | Exception] = [3, NetworkError("down", status_code=503)]

    async def counter() -> int:
        result = results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    badge = UnreadBadge(counter, bus=bus)
    assert await badge.refresh() == 3

    caplog.set_level(logging.WARNING)
    assert await badge.refresh() == 3
    assert "Unread badge recount failed" in caplog.text


@pytest.mark.asyncio
async def test_closed_badge_ignores_events() -> None:
    bus = EventBus()
    calls = 0

    async def counter() -> int:
        nonlocal calls
        calls += 1
        return calls

    badge = UnreadBadge(counter, bus=bus)
    badge.close()
    bus.publish(UnreadCountStale())
    await asyncio.sleep(0)

    assert calls == 0
    assert bus.subscriber_count(UnreadCountStale) == 0
