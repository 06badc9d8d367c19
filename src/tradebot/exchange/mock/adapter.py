"""Mock exchange adapter for testing.

Provides a complete in-memory implementation of the TradingApi
contract, useful for engine tests and dry runs without exchange
connectivity.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from tradebot.domain.balances import BalanceInfo
from tradebot.domain.errors import ContractError, UnsupportedMarketError
from tradebot.domain.market_data import MarketOrderBook
from tradebot.domain.orders import OpenOrder
from tradebot.domain.types import OrderType
from tradebot.exchange.amounts import fee_fraction, order_decimal
from tradebot.exchange.base import TradingApi

if TYPE_CHECKING:
    from tradebot.core.config import ExchangeConfig

DEFAULT_MARKETS = "BTC-USD"


class MockExchangeAdapter(TradingApi):
    """Mock exchange adapter for testing.

    All state is in memory. Markets come from other_config["markets"]
    (comma-separated), fees from other_config["buy-fee"]/["sell-fee"]
    as percentages.
    """

    def __init__(self, config: ExchangeConfig) -> None:
        """Initialize mock adapter.

        Args:
            config: Exchange configuration
        """
        self.config = config
        other = config.other_config
        self._markets = [
            m.strip() for m in other.get("markets", DEFAULT_MARKETS).split(",") if m.strip()
        ]
        self._buy_fee = fee_fraction(Decimal(other.get("buy-fee", "0")))
        self._sell_fee = fee_fraction(Decimal(other.get("sell-fee", "0")))

        self._orders: dict[str, OpenOrder] = {}
        self._books: dict[str, MarketOrderBook] = {}
        self._prices: dict[str, Decimal] = {}
        self._balance = BalanceInfo(available={}, on_order={})
        self._order_counter = 0
        self._closed = False

    @property
    def supported_markets(self) -> list[str]:
        """Return every market id this adapter serves."""
        return list(self._markets)

    def _check_market(self, market_id: str) -> None:
        if market_id not in self._markets:
            raise UnsupportedMarketError(market_id, self.supported_markets)

    async def create_order(
        self,
        market_id: str,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> str:
        """Store a resting order and return its mock id."""
        self._check_market(market_id)
        if not isinstance(order_type, OrderType):
            raise ContractError(f"Invalid order type: '{order_type}'")

        price = order_decimal("price", price)
        quantity = order_decimal("quantity", quantity)
        if price <= 0 or quantity <= 0:
            raise ContractError(
                f"Price and quantity must be positive: price={price}, quantity={quantity}"
            )

        self._order_counter += 1
        order_id = f"mock_ord_{self._order_counter:06d}"

        self._orders[order_id] = OpenOrder(
            id=order_id,
            creation_date=datetime.now(UTC),
            market_id=market_id,
            order_type=order_type,
            price=price,
            quantity=quantity,
            original_quantity=quantity,
            total=price * quantity,
        )
        return order_id

    async def cancel_order(self, order_id: str, market_id: str) -> bool:
        """Remove a resting order; False if it is not on the book."""
        self._check_market(market_id)
        order = self._orders.get(order_id)
        if order is None or order.market_id != market_id:
            return False
        del self._orders[order_id]
        return True

    async def get_your_open_orders(self, market_id: str) -> list[OpenOrder]:
        """Return resting orders for a market."""
        self._check_market(market_id)
        return [o for o in self._orders.values() if o.market_id == market_id]

    async def get_market_orders(self, market_id: str) -> MarketOrderBook:
        """Return the seeded book, or an empty one."""
        self._check_market(market_id)
        return self._books.get(
            market_id,
            MarketOrderBook(market_id=market_id, sell_orders=[], buy_orders=[]),
        )

    async def get_balance_info(self) -> BalanceInfo:
        """Return the seeded balances."""
        return self._balance

    async def get_latest_market_price(self, market_id: str) -> Decimal:
        """Return the seeded price (zero if never set)."""
        self._check_market(market_id)
        return self._prices.get(market_id, Decimal(0))

    async def get_percentage_of_buy_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        """Return the configured buy fee fraction."""
        self._check_market(market_id)
        return self._buy_fee

    async def get_percentage_of_sell_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        """Return the configured sell fee fraction."""
        self._check_market(market_id)
        return self._sell_fee

    def get_impl_name(self) -> str:
        """Return the adapter name."""
        return "Mock Exchange"

    async def aclose(self) -> None:
        """Mark the adapter closed."""
        self._closed = True

    @property
    def is_closed(self) -> bool:
        """Return True once aclose() has been called."""
        return self._closed

    # Test helpers

    def set_order_book(self, book: MarketOrderBook) -> None:
        """Seed the order book for a market."""
        self._books[book.market_id] = book

    def set_latest_price(self, market_id: str, price: Decimal) -> None:
        """Seed the last traded price for a market."""
        self._prices[market_id] = price

    def set_balance(self, balance: BalanceInfo) -> None:
        """Seed wallet balances."""
        self._balance = balance

    def fill_order(self, order_id: str, quantity: Decimal) -> OpenOrder | None:
        """Simulate a (partial) fill.

        A fully filled order leaves the book and None is returned.

        Args:
            order_id: Order to fill
            quantity: Amount executed by this fill

        Returns:
            Updated order, or None once fully filled

        Raises:
            ContractError: If the order is unknown or quantity is not positive
        """
        order = self._orders.get(order_id)
        if order is None:
            raise ContractError(f"Unknown order id: '{order_id}'")
        quantity = order_decimal("quantity", quantity)
        if quantity <= 0:
            raise ContractError(f"Fill quantity must be positive: {quantity}")

        remaining = order.quantity - quantity
        if remaining <= 0:
            del self._orders[order_id]
            return None

        updated = OpenOrder(
            id=order.id,
            creation_date=order.creation_date,
            market_id=order.market_id,
            order_type=order.order_type,
            price=order.price,
            quantity=remaining,
            original_quantity=order.original_quantity,
            total=order.total,
        )
        self._orders[order_id] = updated
        return updated
