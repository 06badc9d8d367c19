"""Core value types shared by every adapter."""

from __future__ import annotations

from enum import Enum


class OrderType(str, Enum):
    """Order direction: BUY or SELL."""

    BUY = "buy"
    SELL = "sell"

    def opposite(self) -> OrderType:
        """Return the opposite order type."""
        return OrderType.SELL if self == OrderType.BUY else OrderType.BUY
