"""Configuration models for the trading bot.

Loads and validates configuration from YAML files using pydantic.
AdapterConfig is the immutable, already-validated settings object an
exchange adapter is built from.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tradebot.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_NON_FATAL_ERROR_CODES = [502, 503, 504]

# Exchange-side resets seen mid-session; not necessarily a network outage.
DEFAULT_NON_FATAL_ERROR_MESSAGES = [
    "Connection reset",
    "Remote host closed connection during handshake",
    "Unexpected end of file from server",
    "Connection refused",
]


class ExchangeType(str, Enum):
    """Supported exchanges."""

    HUOBI = "huobi"
    MOCK = "mock"


class NetworkConfig(BaseModel):
    """Network settings shared by all adapter requests."""

    model_config = ConfigDict(frozen=True)

    connection_timeout: int = Field(default=30, gt=0)  # seconds
    non_fatal_error_codes: list[int] = Field(
        default_factory=lambda: list(DEFAULT_NON_FATAL_ERROR_CODES)
    )
    non_fatal_error_messages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NON_FATAL_ERROR_MESSAGES)
    )


class ExchangeConfig(BaseModel):
    """Exchange connection configuration."""

    name: str = "Huobi"
    adapter: ExchangeType = ExchangeType.HUOBI

    # Credentials, e.g. {"key": ..., "secret": ...}
    authentication_config: dict[str, str] = Field(default_factory=dict, repr=False)
    network_config: NetworkConfig = Field(default_factory=NetworkConfig)

    # Adapter-specific extras, e.g. {"buy-fee": "0.2", "account-info-market": "cny"}
    other_config: dict[str, str] = Field(default_factory=dict)


class MarketConfig(BaseModel):
    """Market the bot trades on."""

    id: str
    name: str | None = None
    base_currency: str | None = None
    counter_currency: str | None = None
    enabled: bool = True
    trading_strategy_id: str | None = None


class BotConfig(BaseModel):
    """Root configuration for the trading bot."""

    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    markets: list[MarketConfig] = Field(default_factory=list)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> BotConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Validated BotConfig

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValidationError: If the config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BotConfig:
        """Load configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Validated BotConfig
        """
        return cls.model_validate(data)

    def enabled_markets(self) -> list[MarketConfig]:
        """Return only the markets switched on for trading."""
        return [market for market in self.markets if market.enabled]


class AdapterConfig(BaseModel):
    """Immutable per-adapter settings captured at construction.

    Fee percentages are as configured, e.g. 0.2 means 0.2%. Adapters
    convert them to fractions themselves.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1, repr=False)
    buy_fee_percentage: Decimal = Field(ge=0, le=100)
    sell_fee_percentage: Decimal = Field(ge=0, le=100)
    connection_timeout: int = Field(gt=0)  # seconds
    account_info_market: str = Field(min_length=1)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    @classmethod
    def from_exchange_config(cls, config: ExchangeConfig) -> AdapterConfig:
        """Build adapter settings from the exchange section of the config.

        Args:
            config: Exchange configuration

        Returns:
            Validated AdapterConfig

        Raises:
            ConfigurationError: If a required field is missing, empty or zero
        """
        auth = config.authentication_config
        other = config.other_config

        values = {
            "api_key": _required(auth, "key"),
            "api_secret": _required(auth, "secret"),
            "buy_fee_percentage": _required(other, "buy-fee"),
            "sell_fee_percentage": _required(other, "sell-fee"),
            "connection_timeout": config.network_config.connection_timeout,
            "account_info_market": _required(other, "account-info-market"),
            "network": config.network_config,
        }

        try:
            adapter_config = cls.model_validate(values)
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else None
            raise ConfigurationError(
                f"Invalid exchange config value for {field}: {error['msg']}",
                field=field,
            ) from e

        logger.info(
            f"Loaded {config.name} adapter config: buy-fee={adapter_config.buy_fee_percentage}%, "
            f"sell-fee={adapter_config.sell_fee_percentage}%, "
            f"connection-timeout={adapter_config.connection_timeout}s, "
            f"account-info-market={adapter_config.account_info_market}"
        )
        return adapter_config


def _required(section: dict[str, str], name: str) -> str:
    value = section.get(name)
    if value is None or len(value.strip()) == 0:
        raise ConfigurationError(
            f"{name} cannot be null or zero length in the exchange config",
            field=name,
        )
    return value.strip()


def load_config(path: str | Path | None = None) -> BotConfig:
    """Load bot configuration.

    Looks for config in the following order:
    1. Provided path argument
    2. ./config/exchange.yaml
    3. ./config/config.yaml
    4. Default configuration

    Args:
        path: Optional explicit path to config file

    Returns:
        Validated BotConfig
    """
    if path:
        return BotConfig.from_yaml(path)

    default_paths = [
        Path("./config/exchange.yaml"),
        Path("./config/config.yaml"),
    ]

    for default_path in default_paths:
        if default_path.exists():
            return BotConfig.from_yaml(default_path)

    return BotConfig()
