"""Fixed-cadence quote poller feeding the ranked store and the update channel."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from .channel import UpdateChannel
from .errors import RankedStoreError, TransportError
from .models import Update
from .quote_client import QuoteClient
from .ranked_store import RankedStore

logger = logging.getLogger(__name__)


class QuotePoller:
    """Polls every configured symbol once per interval.

    For each symbol, in configured order:
      - TransportError → logged, symbol skipped until the next cycle
      - no data        → skipped silently
      - an Update      → score recorded in the ranked store, then offered
                         to the update channel (dropped if the channel is full)

    One symbol's failure never aborts the rest of the cycle.
    """

    def __init__(
        self,
        quote_client: QuoteClient,
        ranked_store: RankedStore,
        channel: UpdateChannel,
        symbols: Sequence[str],
        interval: float = 60.0,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._client = quote_client
        self._store = ranked_store
        self._channel = channel
        self._symbols = tuple(symbols)
        self._interval = interval
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        # Immediate first cycle so the leaderboard has data right away
        await self.poll_once()

        self._task = asyncio.create_task(self._poll_loop(), name="quote-poller")
        logger.info(
            "Quote poller started: %d symbols, %.1fs interval",
            len(self._symbols),
            self._interval,
        )

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Quote poller stopped")

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    async def poll_once(self) -> list[Update]:
        """Run one poll cycle. Returns the updates produced, in symbol order."""
        updates: list[Update] = []
        for symbol in self._symbols:
            try:
                update = await self._client.fetch(symbol)
            except TransportError as e:
                logger.warning("Quote fetch failed: %s", e)
                continue
            except Exception:
                logger.exception("Unexpected error fetching %s", symbol)
                continue
            if update is None:
                continue

            try:
                await self._store.record_score(update.symbol, update.change_percent)
            except RankedStoreError as e:
                logger.error("Ranked store write failed for %s: %s", symbol, e)

            self._channel.try_enqueue(update)
            updates.append(update)

        logger.debug("Poll cycle: %d/%d symbols updated", len(updates), len(self._symbols))
        return updates

    # --- Internal ---

    async def _poll_loop(self) -> None:
        """Run cycles on a fixed cadence. The first cycle already ran in start()."""
        loop = asyncio.get_running_loop()
        next_run = loop.time() + self._interval
        while True:
            await asyncio.sleep(max(0.0, next_run - loop.time()))
            next_run = loop.time() + self._interval
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Poll cycle failed")
