"""Exchange adapter factory.

Provides configuration-driven adapter instantiation, allowing the
exchange to be selected via configuration rather than code changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from tradebot.core.config import AdapterConfig, ExchangeConfig, ExchangeType
from tradebot.domain.errors import ConfigurationError
from tradebot.exchange.base import TradingApi

logger = logging.getLogger(__name__)

# Registry of adapter factories
_adapter_factories: dict[ExchangeType, Callable[[ExchangeConfig], TradingApi]] = {}


def register_adapter(
    exchange_type: ExchangeType,
    factory: Callable[[ExchangeConfig], TradingApi],
) -> None:
    """Register an adapter factory for an exchange type.

    Args:
        exchange_type: The type of exchange
        factory: Function that creates an adapter from config
    """
    _adapter_factories[exchange_type] = factory


def create_adapter(config: ExchangeConfig) -> TradingApi:
    """Create an exchange adapter from configuration.

    Args:
        config: Exchange configuration

    Returns:
        Configured exchange adapter

    Raises:
        ConfigurationError: If no adapter registered for exchange type,
            or the exchange config is incomplete
    """
    factory = _adapter_factories.get(config.adapter)
    if factory is None:
        raise ConfigurationError(
            f"No adapter registered for exchange type: {config.adapter.value}",
            field="adapter",
        )

    adapter = factory(config)
    logger.info(f"Created {adapter.get_impl_name()} adapter for {config.name}")
    return adapter


def _create_huobi_adapter(config: ExchangeConfig) -> TradingApi:
    from tradebot.exchange.huobi import HuobiExchangeAdapter

    return HuobiExchangeAdapter(AdapterConfig.from_exchange_config(config))


def _create_mock_adapter(config: ExchangeConfig) -> TradingApi:
    from tradebot.exchange.mock import MockExchangeAdapter

    return MockExchangeAdapter(config)


register_adapter(ExchangeType.HUOBI, _create_huobi_adapter)
register_adapter(ExchangeType.MOCK, _create_mock_adapter)
