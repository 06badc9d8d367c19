"""Tests for core value types."""

from tradebot.domain.types import OrderType


class TestOrderType:
    """Tests for OrderType enum."""

    def test_values(self) -> None:
        """OrderType values match the wire names."""
        assert OrderType.BUY.value == "buy"
        assert OrderType.SELL.value == "sell"

    def test_only_two_types(self) -> None:
        """There is no third direction."""
        assert {t.name for t in OrderType} == {"BUY", "SELL"}

    def test_opposite(self) -> None:
        """opposite() flips the direction."""
        assert OrderType.BUY.opposite() == OrderType.SELL
        assert OrderType.SELL.opposite() == OrderType.BUY

    def test_from_string(self) -> None:
        """OrderType can be built from its value."""
        assert OrderType("sell") is OrderType.SELL
