"""Tests for the exchange adapter error hierarchy."""

import pytest

from tradebot.domain.errors import (
    ConfigurationError,
    ContractError,
    ExchangeTimeoutError,
    TradingApiError,
    TradingError,
    UnsupportedMarketError,
)


class TestTradingError:
    """Tests for TradingError base class."""

    def test_message_and_exchange(self) -> None:
        """TradingError keeps message and exchange."""
        error = TradingError("boom", exchange="huobi")
        assert str(error) == "boom"
        assert error.exchange == "huobi"
        assert error.context == {}

    def test_context(self) -> None:
        """TradingError keeps structured context."""
        error = TradingError("boom", context={"status_code": 418})
        assert error.context["status_code"] == 418


class TestExchangeTimeoutError:
    """Tests for ExchangeTimeoutError."""

    def test_is_trading_error(self) -> None:
        """ExchangeTimeoutError is a TradingError."""
        assert isinstance(ExchangeTimeoutError("slow"), TradingError)

    def test_status_code(self) -> None:
        """ExchangeTimeoutError carries the 50x status."""
        error = ExchangeTimeoutError("gateway", "huobi", status_code=503)
        assert error.status_code == 503

    def test_status_code_defaults_to_none(self) -> None:
        """Socket timeouts have no status code."""
        assert ExchangeTimeoutError("slow").status_code is None


class TestTradingApiError:
    """Tests for TradingApiError."""

    def test_is_trading_error(self) -> None:
        """TradingApiError is a TradingError."""
        assert isinstance(TradingApiError("bad"), TradingError)

    def test_is_not_timeout(self) -> None:
        """Fatal and transient errors are distinct."""
        assert not isinstance(TradingApiError("bad"), ExchangeTimeoutError)

    def test_exchange_code_and_message(self) -> None:
        """TradingApiError carries the exchange's own code and message."""
        error = TradingApiError("rejected", "huobi", code=78, exchange_message="no such order")
        assert error.code == 78
        assert error.exchange_message == "no such order"


class TestContractErrors:
    """Tests for ContractError and subclasses."""

    def test_contract_error_is_value_error(self) -> None:
        """ContractError is a ValueError."""
        assert issubclass(ContractError, ValueError)

    def test_contract_error_is_not_trading_error(self) -> None:
        """A retry loop catching TradingError never catches contract faults."""
        assert not issubclass(ContractError, TradingError)

    def test_configuration_error_field(self) -> None:
        """ConfigurationError names the offending field."""
        error = ConfigurationError("missing", field="key")
        assert isinstance(error, ContractError)
        assert error.field == "key"

    def test_unsupported_market_message(self) -> None:
        """UnsupportedMarketError lists the supported markets."""
        error = UnsupportedMarketError("LTC-USD", ["BTC-USD", "BTC-CNY"])
        assert error.market_id == "LTC-USD"
        assert error.supported == ["BTC-USD", "BTC-CNY"]
        assert "LTC-USD" in str(error)
        assert "BTC-CNY" in str(error)

    def test_unsupported_market_catchable_as_contract_error(self) -> None:
        """UnsupportedMarketError can be caught as ContractError."""
        with pytest.raises(ContractError):
            raise UnsupportedMarketError("X", [])
