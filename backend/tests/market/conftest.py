"""Fixtures for update pipeline tests."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from leaderboard.market.channel import UpdateChannel
from leaderboard.market.models import Update
from leaderboard.market.quote_client import QuoteClient
from leaderboard.market.ranked_store import InMemoryRankedStore
from leaderboard.market.registry import SubscriberRegistry


class FakeSubscriber:
    """In-memory stand-in for a WebSocket connection."""

    def __init__(self, fail: bool = False, delay: float = 0.0, fail_close: bool = False) -> None:
        self.fail = fail
        self.delay = delay
        self.fail_close = fail_close
        self.messages: list[Any] = []
        self.closed = False

    async def send_json(self, data: Any) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.messages.append(data)

    async def close(self) -> None:
        self.closed = True
        if self.fail_close:
            raise RuntimeError("already closed")


def make_quote_client(results: dict[str, Any]) -> AsyncMock:
    """Mock QuoteClient whose fetch() returns (or raises) results[symbol]."""

    async def fetch(symbol: str) -> Update | None:
        result = results.get(symbol)
        if isinstance(result, Exception):
            raise result
        return result

    client = AsyncMock(spec=QuoteClient)
    client.fetch.side_effect = fetch
    return client


@pytest.fixture
def store() -> InMemoryRankedStore:
    return InMemoryRankedStore()


@pytest.fixture
def channel() -> UpdateChannel:
    return UpdateChannel(capacity=128)


@pytest.fixture
def registry() -> SubscriberRegistry:
    return SubscriberRegistry()


@pytest.fixture
def make_subscriber():
    return FakeSubscriber


@pytest.fixture
def make_client():
    return make_quote_client
