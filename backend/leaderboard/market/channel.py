"""Bounded, non-blocking update channel between the poller and the broadcaster."""

from __future__ import annotations

import asyncio
import logging

from .models import Update

logger = logging.getLogger(__name__)


class UpdateChannel:
    """Fixed-capacity FIFO of Updates with drop-newest overflow.

    Producers call try_enqueue(), which never blocks: when the buffer is full
    the new update is discarded and already-buffered updates are kept. The
    single consumer (the Broadcaster) awaits get().

    The queue is only touched from the event loop thread, so asyncio.Queue's
    own bookkeeping serializes producers and the consumer.
    """

    def __init__(self, capacity: int = 128) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._queue: asyncio.Queue[Update] = asyncio.Queue(maxsize=capacity)
        self._capacity = capacity
        self._dropped = 0

    def try_enqueue(self, update: Update) -> bool:
        """Buffer an update. Returns False (and drops it) if the channel is full."""
        try:
            self._queue.put_nowait(update)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.debug("Update channel full, dropped update for %s", update.symbol)
            return False
        return True

    async def get(self) -> Update:
        """Wait for and remove the oldest buffered update."""
        return await self._queue.get()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def dropped(self) -> int:
        """Number of updates discarded because the channel was full."""
        return self._dropped

    def __len__(self) -> int:
        return self._queue.qsize()
