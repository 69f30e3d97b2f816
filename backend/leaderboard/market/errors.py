"""Error taxonomy for the update pipeline.

Empty quotes and a full update channel are ordinary outcomes, not errors:
QuoteClient.fetch() returns None and UpdateChannel.try_enqueue() returns False.
"""

from __future__ import annotations


class LeaderboardError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(LeaderboardError):
    """Required configuration is missing or invalid. Fatal at startup."""


class TransportError(LeaderboardError):
    """A quote request failed or its response did not match the expected schema."""

    def __init__(self, symbol: str, message: str) -> None:
        super().__init__(f"{symbol}: {message}")
        self.symbol = symbol


class DeliveryError(LeaderboardError):
    """Sending an update to a subscriber failed."""


class RankedStoreError(LeaderboardError):
    """The ranked store could not be read or written."""
