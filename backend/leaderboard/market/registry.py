"""Concurrency-safe set of live subscriber connections."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from .errors import DeliveryError

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """A live bidirectional connection. Starlette's WebSocket satisfies this."""

    async def send_json(self, data: Any) -> None: ...

    async def close(self) -> None: ...


class SubscriberRegistry:
    """Set of active subscribers, identified by the connection object itself.

    add(), remove() and for_each() all hold the same asyncio.Lock, so
    connects and disconnects never interleave with a broadcast pass.
    """

    def __init__(self) -> None:
        self._subscribers: set[Subscriber] = set()
        self._lock = asyncio.Lock()

    async def add(self, subscriber: Subscriber) -> None:
        async with self._lock:
            self._subscribers.add(subscriber)
            count = len(self._subscribers)
        logger.info("Subscriber connected (%d active)", count)

    async def remove(self, subscriber: Subscriber) -> bool:
        """Unregister a subscriber. Idempotent; returns True if it was present."""
        async with self._lock:
            if subscriber not in self._subscribers:
                return False
            self._subscribers.discard(subscriber)
            count = len(self._subscribers)
        logger.info("Subscriber disconnected (%d active)", count)
        return True

    async def for_each(
        self, fn: Callable[[Subscriber], Awaitable[None]]
    ) -> list[Subscriber]:
        """Call fn on every subscriber while holding the lock.

        Subscribers for which fn raises DeliveryError are removed before the
        lock is released and returned to the caller; the pass continues with
        the remaining subscribers.
        """
        evicted: list[Subscriber] = []
        async with self._lock:
            for subscriber in list(self._subscribers):
                try:
                    await fn(subscriber)
                except DeliveryError as e:
                    logger.warning("Evicting subscriber: %s", e)
                    evicted.append(subscriber)
            self._subscribers.difference_update(evicted)
        return evicted

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers
