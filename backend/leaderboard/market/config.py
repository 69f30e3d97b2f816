"""Environment-sourced configuration, loaded once at startup."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SYMBOLS: tuple[str, ...] = ("AAPL", "GOOGL")
DEFAULT_POLL_SECONDS = 60
DEFAULT_QUOTE_TIMEOUT = 10.0
DEFAULT_CHANNEL_CAPACITY = 128
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_LEADERBOARD_KEY = "leaderboard"
DEFAULT_PORT = 8081


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable process configuration."""

    symbols: tuple[str, ...]
    poll_interval: float
    provider_key: str
    redis_url: str = DEFAULT_REDIS_URL
    leaderboard_key: str = DEFAULT_LEADERBOARD_KEY
    quote_timeout: float = DEFAULT_QUOTE_TIMEOUT
    channel_capacity: int = DEFAULT_CHANNEL_CAPACITY
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from environment variables.

        - STOCK_SYMBOLS: comma-separated, defaults to AAPL,GOOGL
        - POLL_SECONDS: positive integer, defaults to 60
        - ALPHA_VANTAGE_KEY: required; raises ConfigurationError when blank
        - REDIS_URL, LEADERBOARD_KEY, QUOTE_TIMEOUT_SECONDS, PORT: optional
        """
        env = os.environ if environ is None else environ

        provider_key = env.get("ALPHA_VANTAGE_KEY", "").strip()
        if not provider_key:
            raise ConfigurationError("missing ALPHA_VANTAGE_KEY")

        return cls(
            symbols=parse_symbols(env.get("STOCK_SYMBOLS", "")),
            poll_interval=float(_positive_int(env.get("POLL_SECONDS", ""), DEFAULT_POLL_SECONDS)),
            provider_key=provider_key,
            redis_url=env.get("REDIS_URL", "").strip() or DEFAULT_REDIS_URL,
            leaderboard_key=env.get("LEADERBOARD_KEY", "").strip() or DEFAULT_LEADERBOARD_KEY,
            quote_timeout=_positive_float(env.get("QUOTE_TIMEOUT_SECONDS", ""), DEFAULT_QUOTE_TIMEOUT),
            port=_positive_int(env.get("PORT", ""), DEFAULT_PORT),
        )


def parse_symbols(raw: str) -> tuple[str, ...]:
    """Split a comma-separated symbol list into an ordered, de-duplicated tuple."""
    symbols: list[str] = []
    for part in raw.split(","):
        symbol = part.strip()
        if symbol and symbol not in symbols:
            symbols.append(symbol)
    return tuple(symbols) if symbols else DEFAULT_SYMBOLS


def _positive_int(raw: str, default: int) -> int:
    raw = raw.strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer value %r, using %d", raw, default)
        return default
    return value if value > 0 else default


def _positive_float(raw: str, default: float) -> float:
    raw = raw.strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric value %r, using %s", raw, default)
        return default
    return value if value > 0 else default
