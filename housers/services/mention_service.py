"""Detect @username mentions in free text and resolve them to user ids."""
from __future__ import annotations

import asyncio
import inspect
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Protocol, Sequence
from uuid import UUID

from ..errors import NetworkError
from ..schemas import Profile

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@([a-zA-Z0-9_]+)")


@dataclass(frozen=True, slots=True)
class MentionToken:
    raw_text: str
    username: str | None = None

    @property
    def is_mention(self) -> bool:
        return self.username is not None


@dataclass(frozen=True, slots=True)
class MentionSegment:
    """A token after resolution; ``user_id`` is set only for linkable mentions."""

    text: str
    username: str | None = None
    user_id: UUID | None = None

    @property
    def is_link(self) -> bool:
        return self.user_id is not None


class ProfileDirectory(Protocol):
    async def find_by_usernames(self, usernames: Sequence[str]) -> list[Profile]:
        """Return the profiles whose username is in ``usernames``."""
        ...


def segment_text(text: str) -> list[MentionToken]:
    """Split ``text`` into literal and mention tokens without losing characters."""

    tokens: list[MentionToken] = []
    last_index = 0
    for match in MENTION_PATTERN.finditer(text):
        start, end = match.span()
        if start > last_index:
            tokens.append(MentionToken(text[last_index:start]))
        tokens.append(MentionToken(match.group(0), match.group(1)))
        last_index = end
    if last_index < len(text):
        tokens.append(MentionToken(text[last_index:]))
    return tokens


def extract_usernames(text: str) -> set[str]:
    return {match.group(1) for match in MENTION_PATTERN.finditer(text)}


NavigateCallback = Callable[[UUID], Awaitable[Any] | Any]


class MentionResolver:
    """Session-scoped username resolver with batched lookups.

    The cache only grows; a user renamed after being cached keeps linking to
    the old id for the rest of the session.
    """

    def __init__(self, directory: ProfileDirectory) -> None:
        self._directory = directory
        self._cache: dict[str, UUID] = {}
        self._inflight: dict[str, asyncio.Future[UUID | None]] = {}
        self._background: set[asyncio.Future[Any]] = set()

    def cached(self, username: str) -> UUID | None:
        return self._cache.get(username)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def segment(self, text: str) -> list[MentionToken]:
        return segment_text(text)

    async def resolve(self, usernames: Iterable[str]) -> dict[str, UUID]:
        """Resolve ``usernames`` best-effort; unknown or unreachable names are omitted."""

        wanted = {name for name in usernames if name}
        resolved = {name: self._cache[name] for name in wanted if name in self._cache}
        pending = wanted - resolved.keys()
        if not pending:
            return resolved

        waiting = {name: self._inflight[name] for name in pending if name in self._inflight}
        to_fetch = sorted(pending - waiting.keys())
        if to_fetch:
            loop = asyncio.get_running_loop()
            futures: dict[str, asyncio.Future[UUID | None]] = {name: loop.create_future() for name in to_fetch}
            self._inflight.update(futures)
            waiting.update(futures)
            await self._lookup_batch(to_fetch, futures)

        for name, future in waiting.items():
            user_id = await future
            if user_id is not None:
                resolved[name] = user_id
        return resolved

    async def _lookup_batch(self, names: list[str], futures: dict[str, asyncio.Future[UUID | None]]) -> None:
        found: dict[str, UUID] = {}
        try:
            profiles = await self._directory.find_by_usernames(names)
            for profile in profiles:
                if profile.username in futures:
                    found[profile.username] = profile.id
            self._cache.update(found)
        except NetworkError:
            logger.warning("Mention lookup failed; mentions stay plain text | usernames=%d", len(names))
        finally:
            for name, future in futures.items():
                if self._inflight.get(name) is future:
                    del self._inflight[name]
                if not future.done():
                    future.set_result(found.get(name))
        if len(found) < len(names):
            logger.debug("Unresolved mentions | missing=%s", sorted(set(names) - found.keys()))

    async def render(self, text: str) -> list[MentionSegment]:
        """Segment ``text`` and attach ids to the mentions that resolve."""

        tokens = segment_text(text)
        resolved = await self.resolve(token.username for token in tokens if token.username)
        return [
            MentionSegment(token.raw_text, token.username, resolved.get(token.username) if token.username else None)
            for token in tokens
        ]

    def on_mention_activated(
        self,
        username: str,
        navigate: NavigateCallback | None = None,
    ) -> UUID | asyncio.Task[UUID | None]:
        """Return the cached id at once, or a task that resolves then navigates.

        The task yields ``None`` (and never navigates) when no account matches.
        """

        user_id = self.cached(username)
        if user_id is not None:
            if navigate is not None:
                result = navigate(user_id)
                if inspect.isawaitable(result):
                    self._track(asyncio.ensure_future(result))
            return user_id
        return self._track(asyncio.get_running_loop().create_task(self.activate(username, navigate)))

    async def activate(self, username: str, navigate: NavigateCallback | None = None) -> UUID | None:
        resolved = await self.resolve([username])
        user_id = resolved.get(username)
        if user_id is None:
            logger.debug("Mention tap ignored; no account | username=%s", username)
            return None
        if navigate is not None:
            result = navigate(user_id)
            if inspect.isawaitable(result):
                await result
        return user_id

    def _track(self, task: asyncio.Future[Any]) -> Any:
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task


__all__ = [
    "MENTION_PATTERN",
    "MentionToken",
    "MentionSegment",
    "MentionResolver",
    "ProfileDirectory",
    "segment_text",
    "extract_usernames",
]
