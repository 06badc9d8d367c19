"""Exchange adapters for the trading bot.

This package contains the exchange abstraction layer and concrete
implementations for supported exchanges.
"""

from tradebot.exchange.base import RequestSigner, TradingApi
from tradebot.exchange.factory import create_adapter, register_adapter
from tradebot.exchange.worker import TradingApiWorker

__all__ = [
    "RequestSigner",
    "TradingApi",
    "TradingApiWorker",
    "create_adapter",
    "register_adapter",
]
