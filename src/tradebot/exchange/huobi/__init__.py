"""Huobi exchange integration.

Provides the REST client, request signer and normalizer behind the
Huobi implementation of TradingApi.
"""

from tradebot.exchange.huobi.adapter import SUPPORTED_MARKETS, HuobiExchangeAdapter
from tradebot.exchange.huobi.auth import HuobiAuth
from tradebot.exchange.huobi.normalizer import HuobiNormalizer
from tradebot.exchange.huobi.rest import HuobiRestClient

__all__ = [
    "SUPPORTED_MARKETS",
    "HuobiAuth",
    "HuobiExchangeAdapter",
    "HuobiNormalizer",
    "HuobiRestClient",
]
