"""Fan-out of channel updates to every registered subscriber."""

from __future__ import annotations

import asyncio
import logging

from .channel import UpdateChannel
from .errors import DeliveryError
from .models import Update
from .registry import Subscriber, SubscriberRegistry

logger = logging.getLogger(__name__)


class Broadcaster:
    """Drains the UpdateChannel and delivers each Update to all subscribers.

    Every subscriber gets update N (or is evicted) before any subscriber sees
    update N+1. A subscriber whose send raises or takes longer than
    ``send_timeout`` seconds is closed and dropped from the registry; the
    others still receive the update. This is the only code path that writes
    to subscriber connections.
    """

    def __init__(
        self,
        channel: UpdateChannel,
        registry: SubscriberRegistry,
        send_timeout: float = 5.0,
    ) -> None:
        self._channel = channel
        self._registry = registry
        self._send_timeout = send_timeout
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run_loop(), name="broadcaster")
        logger.info("Broadcaster started")

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Broadcaster stopped")

    async def broadcast(self, update: Update) -> int:
        """Deliver one update to every current subscriber. Returns the eviction count."""
        message = update.to_dict()

        async def deliver(subscriber: Subscriber) -> None:
            try:
                await asyncio.wait_for(subscriber.send_json(message), self._send_timeout)
            except Exception as e:
                raise DeliveryError(f"send of {update.symbol} failed: {e!r}") from e

        evicted = await self._registry.for_each(deliver)
        for subscriber in evicted:
            await _close_quietly(subscriber)
        return len(evicted)

    # --- Internal ---

    async def _run_loop(self) -> None:
        while True:
            update = await self._channel.get()
            try:
                await self.broadcast(update)
            except Exception:
                logger.exception("Broadcast of %s failed", update.symbol)


async def _close_quietly(subscriber: Subscriber) -> None:
    try:
        await subscriber.close()
    except Exception as e:
        # Already-broken connections commonly fail to close.
        logger.debug("Ignoring error while closing subscriber: %r", e)
