"""Quote polling and live update pipeline.

Public API:
    Update              - Immutable per-symbol price/percent-change snapshot
    RankedEntry         - One leaderboard row (symbol, score)
    Settings            - Environment-sourced configuration
    QuoteClient         - Alpha Vantage quote fetcher
    UpdateChannel       - Bounded drop-newest queue between poller and broadcaster
    QuotePoller         - Fixed-cadence poll loop
    SubscriberRegistry  - Lock-guarded set of live connections
    Broadcaster         - Fan-out of updates to subscribers
    RankedStore         - Abstract sorted-set interface (Redis / in-memory)
    create_stream_router - FastAPI router factory for /leaderboard and /ws
"""

from .broadcaster import Broadcaster
from .channel import UpdateChannel
from .config import Settings
from .errors import (
    ConfigurationError,
    DeliveryError,
    LeaderboardError,
    RankedStoreError,
    TransportError,
)
from .models import RankedEntry, Update
from .poller import QuotePoller
from .quote_client import QuoteClient
from .ranked_store import InMemoryRankedStore, RankedStore, RedisRankedStore
from .registry import Subscriber, SubscriberRegistry
from .stream import create_stream_router

__all__ = [
    "Broadcaster",
    "ConfigurationError",
    "DeliveryError",
    "InMemoryRankedStore",
    "LeaderboardError",
    "QuoteClient",
    "QuotePoller",
    "RankedEntry",
    "RankedStore",
    "RankedStoreError",
    "RedisRankedStore",
    "Settings",
    "Subscriber",
    "SubscriberRegistry",
    "TransportError",
    "Update",
    "UpdateChannel",
    "create_stream_router",
]
