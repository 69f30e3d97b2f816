"""Ranked store adapters: latest percent-change score per symbol."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .errors import RankedStoreError
from .models import RankedEntry

logger = logging.getLogger(__name__)


class RankedStore(ABC):
    """Contract for the sorted-set service that backs the leaderboard.

    Scores are last-write-wins per symbol; no history is kept. Symbols with
    equal scores come back in reverse lexicographic order, which is what
    Redis ZREVRANGE does.
    """

    @abstractmethod
    async def record_score(self, symbol: str, score: float) -> None:
        """Set the symbol's score, replacing any previous one."""

    @abstractmethod
    async def read_all_descending(self) -> list[RankedEntry]:
        """Return every known symbol, highest score first."""

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""


class RedisRankedStore(RankedStore):
    """RankedStore backed by a Redis sorted set (ZADD / ZREVRANGE WITHSCORES)."""

    def __init__(self, client: aioredis.Redis, key: str = "leaderboard") -> None:
        self._client = client
        self._key = key

    @classmethod
    def from_url(cls, url: str, key: str = "leaderboard") -> RedisRankedStore:
        client = aioredis.from_url(url, encoding="utf-8", decode_responses=True)
        return cls(client, key=key)

    async def record_score(self, symbol: str, score: float) -> None:
        try:
            await self._client.zadd(self._key, {symbol: score})
        except RedisError as e:
            raise RankedStoreError(f"ZADD {self._key} {symbol} failed: {e}") from e

    async def read_all_descending(self) -> list[RankedEntry]:
        try:
            rows = await self._client.zrevrange(self._key, 0, -1, withscores=True)
        except RedisError as e:
            raise RankedStoreError(f"ZREVRANGE {self._key} failed: {e}") from e
        return [RankedEntry(symbol=_decode(member), score=float(score)) for member, score in rows]

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis ranked store closed")


class InMemoryRankedStore(RankedStore):
    """Process-local RankedStore for development and tests."""

    def __init__(self) -> None:
        self._scores: dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def record_score(self, symbol: str, score: float) -> None:
        async with self._lock:
            self._scores[symbol] = score

    async def read_all_descending(self) -> list[RankedEntry]:
        async with self._lock:
            items = list(self._scores.items())
        # Redis orders ties lexicographically and ZREVRANGE reverses that.
        items.sort(key=lambda item: (item[1], item[0]), reverse=True)
        return [RankedEntry(symbol=symbol, score=score) for symbol, score in items]

    def __len__(self) -> int:
        return len(self._scores)


def _decode(member: str | bytes) -> str:
    return member.decode() if isinstance(member, bytes) else member
