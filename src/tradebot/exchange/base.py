"""Exchange adapter abstractions.

Defines the interfaces that all exchange adapters must implement,
enabling the trading engine to work with any exchange through a
common abstraction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from decimal import Decimal
from types import TracebackType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tradebot.domain.balances import BalanceInfo
    from tradebot.domain.market_data import MarketOrderBook
    from tradebot.domain.orders import OpenOrder
    from tradebot.domain.types import OrderType


class TradingApi(ABC):
    """Abstract base for all exchange integrations.

    All exchange-specific code should be isolated in implementations
    of this interface. The engine depends only on this abstraction.

    Implementations must:
    - Sign authenticated requests
    - Normalize responses to domain models
    - Classify failures as ExchangeTimeoutError (transient) or
      TradingApiError (fatal)
    - Reject unsupported markets and order types before any request

    An instance is single-owner and single-caller. It holds no locks;
    wrap it in a TradingApiWorker if several tasks need to share it.
    """

    @abstractmethod
    async def create_order(
        self,
        market_id: str,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> str:
        """Place a limit order on the exchange.

        Args:
            market_id: The market identifier
            order_type: BUY or SELL
            quantity: Amount of base currency
            price: Limit price in counter currency

        Returns:
            The exchange-assigned order ID

        Raises:
            ExchangeTimeoutError: On a transient network failure
            TradingApiError: If the exchange rejects the order
        """
        ...

    @abstractmethod
    async def cancel_order(self, order_id: str, market_id: str) -> bool:
        """Cancel an order on the exchange.

        Args:
            order_id: The exchange-assigned order ID
            market_id: The market the order was placed on

        Returns:
            True if cancelled, False if the exchange refused to cancel it

        Raises:
            ExchangeTimeoutError: On a transient network failure
            TradingApiError: On any other communication error
        """
        ...

    @abstractmethod
    async def get_your_open_orders(self, market_id: str) -> list[OpenOrder]:
        """Get the caller's resting orders for a market.

        Args:
            market_id: The market identifier

        Returns:
            List of open orders
        """
        ...

    @abstractmethod
    async def get_market_orders(self, market_id: str) -> MarketOrderBook:
        """Get the public order book for a market.

        Args:
            market_id: The market identifier

        Returns:
            Order book snapshot
        """
        ...

    @abstractmethod
    async def get_balance_info(self) -> BalanceInfo:
        """Get wallet balances.

        Returns:
            Available and on-order balances by currency
        """
        ...

    @abstractmethod
    async def get_latest_market_price(self, market_id: str) -> Decimal:
        """Get the last traded price for a market.

        Args:
            market_id: The market identifier

        Returns:
            Last traded price
        """
        ...

    @abstractmethod
    async def get_percentage_of_buy_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        """Return the buy fee as a fraction between 0 and 1."""
        ...

    @abstractmethod
    async def get_percentage_of_sell_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        """Return the sell fee as a fraction between 0 and 1."""
        ...

    @abstractmethod
    def get_impl_name(self) -> str:
        """Return the adapter's name, for logging only."""
        ...

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
        return None

    async def __aenter__(self) -> TradingApi:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class RequestSigner(ABC):
    """Produces the signature an exchange expects on authenticated calls.

    Each exchange has its own scheme (MD5 over sorted params, HMAC-SHA256
    over a prehash string, ...). The secret is used to compute the
    signature and is never part of the transmitted payload.
    """

    @abstractmethod
    def sign(self, params: Mapping[str, str]) -> str:
        """Sign a set of request parameters.

        Args:
            params: Request parameters, already including any nonce/timestamp

        Returns:
            Signature value to embed in the request
        """
        ...
