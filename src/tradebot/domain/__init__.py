"""Domain models for the trading bot.

This package contains all domain models that are exchange-agnostic.
All models are immutable and use Decimal for prices and amounts.
"""

from tradebot.domain.balances import BalanceInfo
from tradebot.domain.errors import (
    ConfigurationError,
    ContractError,
    ExchangeTimeoutError,
    TradingApiError,
    TradingError,
    UnsupportedMarketError,
)
from tradebot.domain.market_data import MarketOrder, MarketOrderBook
from tradebot.domain.orders import OpenOrder
from tradebot.domain.types import OrderType

__all__ = [
    # Types
    "OrderType",
    # Market Data
    "MarketOrder",
    "MarketOrderBook",
    # Orders
    "OpenOrder",
    # Balances
    "BalanceInfo",
    # Errors
    "ConfigurationError",
    "ContractError",
    "ExchangeTimeoutError",
    "TradingApiError",
    "TradingError",
    "UnsupportedMarketError",
]
