"""Tests for the balance domain model."""

from decimal import Decimal

from tradebot.domain.balances import BalanceInfo


class TestBalanceInfo:
    """Tests for BalanceInfo."""

    def test_currency_codes_uppercased(self) -> None:
        """Currency keys are normalized to upper case."""
        info = BalanceInfo(available={"btc": Decimal("1")}, on_order={"cny": Decimal("2")})
        assert set(info.available) == {"BTC"}
        assert set(info.on_order) == {"CNY"}

    def test_lookup_is_case_insensitive(self) -> None:
        """available_for() accepts any case."""
        info = BalanceInfo(available={"BTC": Decimal("1.5")}, on_order={})
        assert info.available_for("btc") == Decimal("1.5")

    def test_missing_currency_is_zero(self) -> None:
        """A currency with no entry has zero balance."""
        info = BalanceInfo(available={}, on_order={})
        assert info.available_for("USD") == Decimal(0)
        assert info.on_order_for("USD") == Decimal(0)
