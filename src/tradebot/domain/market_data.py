"""Market data domain models.

These models represent public market data received from exchanges,
normalized to a common format. All models are immutable snapshots.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic.dataclasses import dataclass

from tradebot.domain.types import OrderType


@dataclass(frozen=True)
class MarketOrder:
    """A single level in an order book."""

    order_type: OrderType
    price: Decimal
    quantity: Decimal
    total: Decimal  # price * quantity

    @classmethod
    def from_level(
        cls, order_type: OrderType, price: Decimal, quantity: Decimal
    ) -> MarketOrder:
        """Create a MarketOrder, computing its total.

        Args:
            order_type: BUY or SELL side of the book
            price: Level price
            quantity: Amount available at that price

        Returns:
            MarketOrder with total = price * quantity
        """
        return cls(
            order_type=order_type,
            price=price,
            quantity=quantity,
            total=price * quantity,
        )


@dataclass(frozen=True)
class MarketOrderBook:
    """Order book snapshot for one market.

    Sell orders are ascending by price (best ask first).
    Buy orders are descending by price (best bid first).
    The ordering is the exchange's; it is never re-sorted here.
    """

    market_id: str
    sell_orders: list[MarketOrder]
    buy_orders: list[MarketOrder]

    def best_bid(self) -> MarketOrder | None:
        """Return the highest bid, or None if no bids."""
        return self.buy_orders[0] if self.buy_orders else None

    def best_ask(self) -> MarketOrder | None:
        """Return the lowest ask, or None if no asks."""
        return self.sell_orders[0] if self.sell_orders else None

    def spread(self) -> Decimal | None:
        """Return the spread (best_ask - best_bid), or None if empty."""
        bid = self.best_bid()
        ask = self.best_ask()
        if bid is None or ask is None:
            return None
        return ask.price - bid.price
