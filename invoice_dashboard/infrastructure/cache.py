"""Fetch Caches — per-request memoization and a tag-invalidated cross-request cache.

Invariants:
    - request_memo only memoizes inside request_scope(); outside it the wrapped
      coroutine function runs every time
    - Within one scope, calls with equal arguments share one task and its outcome
      (a failure included)
    - TaggedCache slots hold either a resolved value or one in-flight task;
      concurrent misses for a key attach to the same task (single flight)
    - Failures are never stored in a TaggedCache slot, and a failed key is
      dropped from its tags
    - revalidate_tag() clears every key registered under the tag, resolved or
      in-flight, without awaiting; a cleared in-flight task never repopulates its slot
    - No expiry, no size bound: entries live until revalidated or clear()ed

Design Decisions:
    - ContextVar for the request scope: every task spawned inside the request
      (asyncio.gather branches included) inherits the same memo dict
    - Waiters await asyncio.shield(task): one cancelled caller does not cancel
      the shared query for everyone else
    - Mutations happen between awaits on a single event loop, so no lock is needed
"""

import asyncio
import functools
import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_request_memo: ContextVar[dict | None] = ContextVar("request_memo", default=None)


# ─── Per-request memoization ────────────────────────────────────

@contextmanager
def request_scope() -> Iterator[dict]:
    """Open a memoization scope for one request. Nested scopes start empty."""
    memo: dict = {}
    token = _request_memo.set(memo)
    try:
        yield memo
    finally:
        _request_memo.reset(token)


def request_memo(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Collapse duplicate calls with equal arguments within one request scope."""
    name = getattr(fn, "__qualname__", repr(fn))

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        memo = _request_memo.get()
        if memo is None:
            return await fn(*args, **kwargs)
        key = (name, args, tuple(sorted(kwargs.items())))
        task = memo.get(key)
        if task is None:
            task = asyncio.ensure_future(fn(*args, **kwargs))
            memo[key] = task
        else:
            logger.debug(f"Request memo hit for {name}")
        return await asyncio.shield(task)

    return wrapper


# ─── Tag-invalidated cache ──────────────────────────────────────

def cache_key(key_parts: list[str], args: tuple, kwargs: dict) -> str:
    """Stable key: fixed parts plus the JSON-encoded call arguments."""
    return json.dumps(
        [key_parts, list(args), kwargs], sort_keys=True, default=str,
    )


class TaggedCache:
    """Cross-request cache whose entries are dropped by tag, never by time."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._tags: dict[str, set[str]] = {}

    def __len__(self) -> int:
        return len(self._values)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        tags: tuple[str, ...] = (),
    ) -> T:
        """Return the cached value for key, running loader at most once per miss."""
        if key in self._values:
            logger.debug("Cache hit", extra={"cache_key": key})
            return self._values[key]

        task = self._inflight.get(key)
        if task is None:
            logger.debug("Cache miss", extra={"cache_key": key})
            task = asyncio.ensure_future(loader())
            self._inflight[key] = task
            for tag in tags:
                self._tags.setdefault(tag, set()).add(key)
            task.add_done_callback(functools.partial(self._settle, key, tags))
        return await asyncio.shield(task)

    def _settle(self, key: str, tags: tuple[str, ...], task: asyncio.Task) -> None:
        # Only the task that still owns the slot may fill it
        owns_slot = self._inflight.get(key) is task
        if owns_slot:
            del self._inflight[key]
        if task.cancelled() or task.exception() is not None:
            if owns_slot and key not in self._values:
                self._untag(key, tags)
            return
        if owns_slot:
            self._values[key] = task.result()

    def _untag(self, key: str, tags: tuple[str, ...]) -> None:
        for tag in tags:
            keys = self._tags.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._tags[tag]

    def revalidate_tag(self, tag: str) -> int:
        """Drop every entry registered under tag. Returns how many keys were cleared."""
        keys = self._tags.pop(tag, set())
        cleared = 0
        for key in keys:
            had_value = self._values.pop(key, _MISSING) is not _MISSING
            had_task = self._inflight.pop(key, None) is not None
            cleared += had_value or had_task
        logger.info(
            f"Revalidated tag {tag!r}: {cleared} entr{'y' if cleared == 1 else 'ies'} cleared",
            extra={"tag": tag},
        )
        return cleared

    def clear(self) -> None:
        self._values.clear()
        self._inflight.clear()
        self._tags.clear()

    def cached(
        self, key_parts: list[str], tags: list[str] | None = None,
    ) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
        """Decorator: cache a coroutine function under key_parts + its JSON arguments."""
        tag_tuple = tuple(tags or ())

        def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
            @functools.wraps(fn)
            async def wrapper(*args: Any, **kwargs: Any) -> T:
                key = cache_key(key_parts, args, kwargs)
                return await self.get_or_load(
                    key, lambda: fn(*args, **kwargs), tag_tuple,
                )
            return wrapper

        return decorator


_MISSING = object()

# Process-wide cache (revalidated via POST /api/v1/cache/revalidate)
data_cache = TaggedCache()
