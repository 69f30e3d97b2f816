"""Pytest configuration and fixtures."""

import pytest

CONFIG_ENV_VARS = (
    "ALPHA_VANTAGE_KEY",
    "STOCK_SYMBOLS",
    "POLL_SECONDS",
    "REDIS_URL",
    "LEADERBOARD_KEY",
    "QUOTE_TIMEOUT_SECONDS",
    "PORT",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep the developer's shell configuration out of the tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
