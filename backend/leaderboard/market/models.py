"""Data models for the update pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Update:
    """Immutable price snapshot for one symbol in one poll cycle."""

    symbol: str
    price: float
    change_percent: float  # Signed, unrounded

    @classmethod
    def from_quote(cls, symbol: str, price: float, previous_close: float) -> Update:
        """Build an Update from the current price and the previous close.

        The caller must guarantee previous_close != 0.
        """
        change = (price - previous_close) / previous_close * 100
        return cls(symbol=symbol, price=price, change_percent=change)

    def to_dict(self) -> dict:
        """Serialize for JSON / WebSocket transmission."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "change": self.change_percent,
        }


@dataclass(frozen=True, slots=True)
class RankedEntry:
    """One row of the leaderboard: symbol and its latest percent-change score."""

    symbol: str
    score: float

    def to_dict(self) -> dict:
        return {"symbol": self.symbol, "score": self.score}
