"""Huobi data normalizer.

Parses Huobi REST API v3 responses into intermediate pydantic models and
converts those to domain models.

Huobi uses:
- Decimal strings or bare JSON numbers for prices and amounts
- 1/2 for buy/sell on open orders
- Unix seconds for order timestamps
- A {code, message, msg} status block on authenticated responses, where
  code 0 (or an absent code) means success

get_orders returns either a JSON array of orders (success) or a JSON
object carrying only the status block (failure) for the same call.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from tradebot.domain.balances import BalanceInfo
from tradebot.domain.errors import TradingApiError
from tradebot.domain.market_data import MarketOrder, MarketOrderBook
from tradebot.domain.orders import OpenOrder
from tradebot.domain.types import OrderType

logger = logging.getLogger(__name__)

EXCHANGE_NAME = "huobi"

STATUS_FIELDS = frozenset({"code", "message", "msg"})

ORDER_TYPE_BUY = 1
ORDER_TYPE_SELL = 2

RESULT_SUCCESS = "success"

_FROZEN = ConfigDict(frozen=True)


class HuobiStatus(BaseModel):
    """Status block embedded in every authenticated response.

    See https://github.com/huobiapi/API_Docs_en/wiki/REST-Error-Code
    """

    model_config = _FROZEN

    code: int = 0
    message: str | None = None
    msg: str | None = None  # older field name, still sent

    @property
    def is_success(self) -> bool:
        """Return True if the exchange reported success."""
        return self.code == 0

    @property
    def error_message(self) -> str:
        """Return whichever message field the exchange filled in."""
        return self.message or self.msg or ""


class HuobiOrderResponse(BaseModel):
    """Response to buy/sell."""

    model_config = _FROZEN

    status: HuobiStatus
    result: str | None = None
    id: int | None = None


class HuobiCancelOrderResponse(BaseModel):
    """Response to cancel_order."""

    model_config = _FROZEN

    status: HuobiStatus
    result: str | None = None


class HuobiOpenOrder(BaseModel):
    """One element of the get_orders array."""

    model_config = _FROZEN

    id: int
    type: int  # 1=buy 2=sell
    order_price: Decimal
    order_amount: Decimal
    processed_amount: Decimal
    order_time: int  # unix seconds


class HuobiAccountInfo(BaseModel):
    """Response to get_account_info."""

    model_config = _FROZEN

    status: HuobiStatus
    total: Decimal | None = None
    net_asset: Decimal | None = None
    available_cny_display: Decimal | None = None
    available_btc_display: Decimal | None = None
    available_usd_display: Decimal | None = None
    frozen_cny_display: Decimal | None = None
    frozen_btc_display: Decimal | None = None
    frozen_usd_display: Decimal | None = None
    loan_cny_display: Decimal | None = None
    loan_btc_display: Decimal | None = None
    loan_usd_display: Decimal | None = None


class HuobiMarketLevel(BaseModel):
    """A price level in the public depth feed."""

    model_config = _FROZEN

    price: Decimal
    amount: Decimal
    level: Decimal | None = None
    accu: Decimal | None = None  # only on top_buy/top_sell


class HuobiTrade(BaseModel):
    """A recent trade in the public depth feed."""

    model_config = _FROZEN

    amount: Decimal | None = None
    price: Decimal | None = None
    time: str | None = None
    en_type: str | None = None  # e.g. "bid"
    type: str | None = None  # localized label


class HuobiOrderBook(BaseModel):
    """Public depth feed (detail_btc_json.js)."""

    model_config = _FROZEN

    buys: list[HuobiMarketLevel]
    sells: list[HuobiMarketLevel]
    top_buy: list[HuobiMarketLevel] = []
    top_sell: list[HuobiMarketLevel] = []
    trades: list[HuobiTrade] = []
    total: Decimal | None = None
    amount: Decimal | None = None
    level: Decimal | None = None
    amp: Decimal | None = None
    p_high: Decimal | None = None
    p_open: Decimal | None = None
    p_new: Decimal | None = None
    p_low: Decimal | None = None
    p_last: Decimal | None = None


class HuobiTicker(BaseModel):
    """Ticker block of ticker_btc_json.js."""

    model_config = _FROZEN

    last: Decimal
    buy: Decimal | None = None
    sell: Decimal | None = None
    high: Decimal | None = None
    low: Decimal | None = None
    vol: Decimal | None = None


class HuobiTickerWrapper(BaseModel):
    """Public ticker feed (ticker_btc_json.js)."""

    model_config = _FROZEN

    time: int | None = None
    ticker: HuobiTicker


# Built once and shared; never mutated.
_OPEN_ORDERS_ADAPTER: TypeAdapter[list[HuobiOpenOrder]] = TypeAdapter(
    list[HuobiOpenOrder]
)


def _with_status(data: dict[str, Any]) -> dict[str, Any]:
    """Move the flat status fields into a nested status block."""
    fields = {name: value for name, value in data.items() if name not in STATUS_FIELDS}
    fields["status"] = {name: data[name] for name in STATUS_FIELDS if name in data}
    return fields


class HuobiNormalizer:
    """Converts Huobi response bodies to domain models.

    Stateless; one instance is built per adapter and shared by reference.
    Every parse failure surfaces as TradingApiError carrying the raw
    response so the exchange's own message is never lost.
    """

    @staticmethod
    def normalize_order_type(order_type: int) -> OrderType:
        """Convert Huobi's numeric order type to OrderType.

        Args:
            order_type: 1 (buy) or 2 (sell)

        Returns:
            OrderType enum

        Raises:
            TradingApiError: For any other value
        """
        if order_type == ORDER_TYPE_BUY:
            return OrderType.BUY
        if order_type == ORDER_TYPE_SELL:
            return OrderType.SELL
        raise TradingApiError(
            f"Unrecognised order type received in open orders. Value: {order_type}",
            EXCHANGE_NAME,
        )

    @staticmethod
    def denormalize_order_type(order_type: OrderType) -> str:
        """Convert OrderType to the Huobi API method that places it.

        Args:
            order_type: OrderType enum

        Returns:
            "buy" or "sell"
        """
        return "buy" if order_type == OrderType.BUY else "sell"

    @staticmethod
    def normalize_timestamp(ts: int) -> datetime:
        """Convert Huobi unix seconds to a UTC datetime."""
        return datetime.fromtimestamp(ts, tz=UTC)

    @staticmethod
    def parse_json(body: str) -> Any:
        """Decode a response body, keeping decimals exact.

        Args:
            body: Raw response text

        Returns:
            Decoded JSON value

        Raises:
            TradingApiError: If the body is not valid JSON
        """
        try:
            return json.loads(body, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise TradingApiError(
                f"Failed to parse response from exchange as JSON: {body!r}",
                EXCHANGE_NAME,
            ) from e

    @staticmethod
    def _validate(model: type[BaseModel], data: Any, body: str) -> Any:
        if not isinstance(data, dict):
            raise TradingApiError(
                f"Unexpected response shape from exchange for {model.__name__}: {body}",
                EXCHANGE_NAME,
            )
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TradingApiError(
                f"Failed to unmarshal {model.__name__} from exchange: {body}",
                EXCHANGE_NAME,
            ) from e

    @staticmethod
    def _api_error(what: str, status: HuobiStatus, body: str) -> TradingApiError:
        message = f"Failed to {what}. Error response: {body}"
        logger.error(message)
        return TradingApiError(
            message,
            EXCHANGE_NAME,
            code=status.code,
            exchange_message=status.error_message,
        )

    def parse_create_order(self, body: str) -> str:
        """Extract the new order id from a buy/sell response.

        Args:
            body: Raw response text

        Returns:
            Exchange-assigned order id

        Raises:
            TradingApiError: If the order was not placed
        """
        data = self.parse_json(body)
        response: HuobiOrderResponse = self._validate(
            HuobiOrderResponse, _with_status(data) if isinstance(data, dict) else data, body
        )

        if (
            response.result is not None
            and response.result.lower() == RESULT_SUCCESS
            and response.id is not None
        ):
            return str(response.id)

        raise self._api_error("place order on exchange", response.status, body)

    def parse_cancel_order(self, body: str) -> bool:
        """Interpret a cancel_order response.

        Args:
            body: Raw response text

        Returns:
            True if cancelled, False if the exchange refused

        Raises:
            TradingApiError: If the response cannot be parsed at all
        """
        data = self.parse_json(body)
        response: HuobiCancelOrderResponse = self._validate(
            HuobiCancelOrderResponse,
            _with_status(data) if isinstance(data, dict) else data,
            body,
        )

        if response.result is not None and response.result.lower() == RESULT_SUCCESS:
            return True

        logger.error(f"Failed to cancel order on exchange. Error response: {body}")
        return False

    def parse_open_orders(self, body: str, market_id: str) -> list[OpenOrder]:
        """Convert a get_orders response to OpenOrders.

        The top-level JSON kind decides the parse path:
        - array: one HuobiOpenOrder per element
        - object: a status block only; any other key means the exchange
          changed its contract

        Args:
            body: Raw response text
            market_id: Public market id to stamp on each order

        Returns:
            List of open orders

        Raises:
            TradingApiError: On an error status or unexpected schema
        """
        data = self.parse_json(body)

        if isinstance(data, dict):
            unknown = sorted(set(data) - STATUS_FIELDS)
            if unknown:
                raise TradingApiError(
                    "Failed to unmarshal get_orders response from exchange. "
                    f"Unexpected field(s) {unknown} in error response: {body}",
                    EXCHANGE_NAME,
                )
            status: HuobiStatus = self._validate(HuobiStatus, data, body)
            if not status.is_success:
                raise self._api_error("get open orders from exchange", status, body)
            return []

        if not isinstance(data, list):
            raise TradingApiError(
                f"Unexpected response shape from exchange for get_orders: {body}",
                EXCHANGE_NAME,
            )

        try:
            raw_orders = _OPEN_ORDERS_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise TradingApiError(
                f"Failed to unmarshal open orders from exchange: {body}",
                EXCHANGE_NAME,
            ) from e

        return [self.normalize_open_order(raw, market_id) for raw in raw_orders]

    def normalize_open_order(self, raw: HuobiOpenOrder, market_id: str) -> OpenOrder:
        """Convert one HuobiOpenOrder to an OpenOrder.

        Huobi does not send a total, so it is price * original amount.
        """
        try:
            return OpenOrder(
                id=str(raw.id),
                creation_date=self.normalize_timestamp(raw.order_time),
                market_id=market_id,
                order_type=self.normalize_order_type(raw.type),
                price=raw.order_price,
                quantity=raw.order_amount - raw.processed_amount,
                original_quantity=raw.order_amount,
                total=raw.order_price * raw.order_amount,
            )
        except ValidationError as e:
            raise TradingApiError(
                f"Inconsistent open order received from exchange: {raw}",
                EXCHANGE_NAME,
            ) from e

    def parse_order_book(self, body: str, market_id: str) -> MarketOrderBook:
        """Convert a depth feed to a MarketOrderBook.

        Levels are mapped 1:1 in the exchange's order.

        Args:
            body: Raw response text
            market_id: Public market id

        Returns:
            Order book snapshot
        """
        book: HuobiOrderBook = self._validate(HuobiOrderBook, self.parse_json(body), body)

        return MarketOrderBook(
            market_id=market_id,
            sell_orders=[
                MarketOrder.from_level(OrderType.SELL, level.price, level.amount)
                for level in book.sells
            ],
            buy_orders=[
                MarketOrder.from_level(OrderType.BUY, level.price, level.amount)
                for level in book.buys
            ],
        )

    def parse_latest_price(self, body: str) -> Decimal:
        """Extract the last traded price from a ticker feed."""
        wrapper: HuobiTickerWrapper = self._validate(
            HuobiTickerWrapper, self.parse_json(body), body
        )
        return wrapper.ticker.last

    def parse_balance_info(self, body: str) -> BalanceInfo:
        """Convert a get_account_info response to BalanceInfo.

        Args:
            body: Raw response text

        Returns:
            Available and frozen balances for BTC, CNY and USD

        Raises:
            TradingApiError: On an error status or unexpected schema
        """
        data = self.parse_json(body)
        info: HuobiAccountInfo = self._validate(
            HuobiAccountInfo, _with_status(data) if isinstance(data, dict) else data, body
        )

        if not info.status.is_success:
            raise self._api_error("get balance info from exchange", info.status, body)

        available = {
            "BTC": info.available_btc_display,
            "CNY": info.available_cny_display,
            "USD": info.available_usd_display,
        }
        on_order = {
            "BTC": info.frozen_btc_display,
            "CNY": info.frozen_cny_display,
            "USD": info.frozen_usd_display,
        }

        return BalanceInfo(
            available={k: v for k, v in available.items() if v is not None},
            on_order={k: v for k, v in on_order.items() if v is not None},
        )
