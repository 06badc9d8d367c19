"""Huobi exchange adapter.

Full implementation of TradingApi for the Huobi REST Trade API v3.

Supported markets and their settlement-currency ids for signed calls:

    BTC-USD -> usd
    BTC-CNY -> cny

Precision: prices go out with 2 decimal places and amounts with 4, both
rounded ROUND_HALF_EVEN. Fees are not exposed by the API; the configured
percentages are converted once to fractions (8 places, ROUND_HALF_UP)
and returned for every market.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from types import MappingProxyType

import httpx

from tradebot.core.config import AdapterConfig
from tradebot.domain.balances import BalanceInfo
from tradebot.domain.errors import (
    ContractError,
    ExchangeTimeoutError,
    TradingApiError,
    UnsupportedMarketError,
)
from tradebot.domain.market_data import MarketOrderBook
from tradebot.domain.orders import OpenOrder
from tradebot.domain.types import OrderType
from tradebot.exchange.amounts import fee_fraction, order_decimal
from tradebot.exchange.base import TradingApi
from tradebot.exchange.huobi.auth import HuobiAuth
from tradebot.exchange.huobi.normalizer import EXCHANGE_NAME, HuobiNormalizer
from tradebot.exchange.huobi.rest import HuobiRestClient
from tradebot.exchange.transport import HttpTransport

logger = logging.getLogger(__name__)

IMPL_NAME = "Huobi REST Trade API v3"

UNEXPECTED_ERROR_MSG = "Unexpected error has occurred in Huobi Exchange Adapter."

PRICE_PRECISION = Decimal("0.01")
QUANTITY_PRECISION = Decimal("0.0001")

# Huobi's edge rejects requests without a browser-like agent.
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/35.0.1916.114 Safari/537.36"
)


@dataclass(frozen=True)
class HuobiMarket:
    """Everything the adapter needs to address one market."""

    market_id: str  # public id used by the engine
    account_market: str  # settlement-currency id for signed calls
    depth_path: str
    ticker_path: str


SUPPORTED_MARKETS: Mapping[str, HuobiMarket] = MappingProxyType(
    {
        "BTC-USD": HuobiMarket(
            market_id="BTC-USD",
            account_market="usd",
            depth_path="usdmarket/detail_btc_json.js",
            ticker_path="usdmarket/ticker_btc_json.js",
        ),
        "BTC-CNY": HuobiMarket(
            market_id="BTC-CNY",
            account_market="cny",
            depth_path="staticmarket/detail_btc_json.js",
            ticker_path="staticmarket/ticker_btc_json.js",
        ),
    }
)


def round_price(price: Decimal) -> Decimal:
    """Round a price to Huobi's 2 decimal places (half-even)."""
    return price.quantize(PRICE_PRECISION, rounding=ROUND_HALF_EVEN)


def round_quantity(quantity: Decimal) -> Decimal:
    """Round an amount to Huobi's 4 decimal places (half-even)."""
    return quantity.quantize(QUANTITY_PRECISION, rounding=ROUND_HALF_EVEN)


class HuobiExchangeAdapter(TradingApi):
    """Huobi exchange adapter.

    Composes request signing, HTTP transport and response normalization
    behind the TradingApi contract.

    One instance per credential set. Calls must be serialized by the
    owner; the adapter holds no locks.
    """

    def __init__(
        self,
        config: AdapterConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the Huobi adapter.

        Args:
            config: Validated adapter settings
            transport: Optional httpx transport, for tests
            clock: Source of unix time for request timestamps

        Raises:
            ConfigurationError: If credentials are empty or signing is unavailable
        """
        self._config = config
        self._auth = HuobiAuth(config.api_key, config.api_secret, clock)
        self._normalizer = HuobiNormalizer()
        self._rest = HuobiRestClient(
            self._auth,
            HttpTransport(
                EXCHANGE_NAME,
                timeout_seconds=config.connection_timeout,
                network=config.network,
                transport=transport,
                headers={"User-Agent": USER_AGENT},
            ),
        )

        self._buy_fee = fee_fraction(config.buy_fee_percentage)
        self._sell_fee = fee_fraction(config.sell_fee_percentage)

        logger.info(f"Buy fee % in decimal format: {self._buy_fee}")
        logger.info(f"Sell fee % in decimal format: {self._sell_fee}")

    def __repr__(self) -> str:
        return f"HuobiExchangeAdapter(config={self._config!r})"

    @property
    def supported_markets(self) -> list[str]:
        """Return every public market id this adapter serves."""
        return list(SUPPORTED_MARKETS)

    def _market(self, market_id: str) -> HuobiMarket:
        market = SUPPORTED_MARKETS.get(market_id)
        if market is None:
            error = UnsupportedMarketError(market_id, self.supported_markets)
            logger.error(str(error))
            raise error
        return market

    def get_authenticated_market_id(self, market_id: str) -> str:
        """Map a public market id to the id signed calls expect.

        Args:
            market_id: Public market id, e.g. "BTC-USD"

        Returns:
            Settlement-currency id, e.g. "usd"

        Raises:
            UnsupportedMarketError: If the market is not served
        """
        return self._market(market_id).account_market

    @contextmanager
    def _unexpected_errors(self, operation: str) -> Iterator[None]:
        """Let classified errors through; wrap anything else."""
        try:
            yield
        except (ExchangeTimeoutError, TradingApiError, ContractError):
            raise
        except Exception as e:
            logger.error(f"{UNEXPECTED_ERROR_MSG} Operation: {operation}", exc_info=True)
            raise TradingApiError(UNEXPECTED_ERROR_MSG, EXCHANGE_NAME) from e

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._rest.aclose()

    async def create_order(
        self,
        market_id: str,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> str:
        """Place a limit order on Huobi.

        Price and quantity are rounded before sending.

        Args:
            market_id: Public market id
            order_type: BUY or SELL
            quantity: BTC amount
            price: Limit price

        Returns:
            Huobi order id

        Raises:
            ContractError: If price or quantity is not a finite positive
                number within Huobi's precision
        """
        market = self._market(market_id)
        if not isinstance(order_type, OrderType):
            message = f"Invalid order type: '{order_type}' - Can only be {[t.value for t in OrderType]}"
            logger.error(message)
            raise ContractError(message)

        try:
            rounded_price = round_price(order_decimal("price", price))
            rounded_quantity = round_quantity(order_decimal("quantity", quantity))
        except InvalidOperation as e:
            message = f"Price or quantity out of range: price={price!r}, quantity={quantity!r}"
            logger.error(message)
            raise ContractError(message) from e
        if rounded_price <= 0 or rounded_quantity <= 0:
            raise ContractError(
                f"Price and quantity must be positive after rounding: "
                f"price={rounded_price}, quantity={rounded_quantity}"
            )

        with self._unexpected_errors("create_order"):
            body = await self._rest.place_order(
                self._normalizer.denormalize_order_type(order_type),
                market.account_market,
                price=format(rounded_price, "f"),
                amount=format(rounded_quantity, "f"),
            )
            logger.debug(f"create_order() response: {body}")
            return self._normalizer.parse_create_order(body)

    async def cancel_order(self, order_id: str, market_id: str) -> bool:
        """Cancel an order.

        Args:
            order_id: Huobi order id
            market_id: Public market id

        Returns:
            True if cancelled, False if Huobi refused (e.g. already filled)
        """
        market = self._market(market_id)

        with self._unexpected_errors("cancel_order"):
            body = await self._rest.cancel_order(order_id, market.account_market)
            logger.debug(f"cancel_order() response: {body}")
            return self._normalizer.parse_cancel_order(body)

    async def get_your_open_orders(self, market_id: str) -> list[OpenOrder]:
        """Get resting orders for a market.

        Args:
            market_id: Public market id

        Returns:
            List of open orders
        """
        market = self._market(market_id)

        with self._unexpected_errors("get_your_open_orders"):
            body = await self._rest.get_orders(market.account_market)
            logger.debug(f"get_your_open_orders() response: {body}")
            return self._normalizer.parse_open_orders(body, market_id)

    async def get_market_orders(self, market_id: str) -> MarketOrderBook:
        """Get the public order book.

        Args:
            market_id: Public market id

        Returns:
            Order book snapshot
        """
        market = self._market(market_id)

        with self._unexpected_errors("get_market_orders"):
            body = await self._rest.get_depth(market.depth_path)
            logger.debug(f"get_market_orders() response: {body}")
            return self._normalizer.parse_order_book(body, market_id)

    async def get_balance_info(self) -> BalanceInfo:
        """Get wallet balances for the configured account market.

        Returns:
            Balance information
        """
        with self._unexpected_errors("get_balance_info"):
            body = await self._rest.get_account_info(self._config.account_info_market)
            logger.debug(f"get_balance_info() response: {body}")
            return self._normalizer.parse_balance_info(body)

    async def get_latest_market_price(self, market_id: str) -> Decimal:
        """Get the last traded price.

        Args:
            market_id: Public market id

        Returns:
            Last price
        """
        market = self._market(market_id)

        with self._unexpected_errors("get_latest_market_price"):
            body = await self._rest.get_ticker(market.ticker_path)
            logger.debug(f"get_latest_market_price() response: {body}")
            return self._normalizer.parse_latest_price(body)

    async def get_percentage_of_buy_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        """Return the configured buy fee; same for every market."""
        self._market(market_id)
        return self._buy_fee

    async def get_percentage_of_sell_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        """Return the configured sell fee; same for every market."""
        self._market(market_id)
        return self._sell_fee

    def get_impl_name(self) -> str:
        """Return the adapter name."""
        return IMPL_NAME
