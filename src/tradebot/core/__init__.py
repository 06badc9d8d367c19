"""Core application wiring: configuration loading."""

from tradebot.core.config import (
    AdapterConfig,
    BotConfig,
    ExchangeConfig,
    ExchangeType,
    MarketConfig,
    NetworkConfig,
    load_config,
)

__all__ = [
    "AdapterConfig",
    "BotConfig",
    "ExchangeConfig",
    "ExchangeType",
    "MarketConfig",
    "NetworkConfig",
    "load_config",
]
