"""Tests for order domain models."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from tradebot.domain.orders import OpenOrder
from tradebot.domain.types import OrderType


def make_order(quantity: str = "0.5", original_quantity: str = "1.5") -> OpenOrder:
    """Build an OpenOrder with overridable quantities."""
    return OpenOrder(
        id="10001",
        creation_date=datetime(2015, 1, 12, 14, 43, 20, tzinfo=UTC),
        market_id="BTC-USD",
        order_type=OrderType.BUY,
        price=Decimal("250.10"),
        quantity=Decimal(quantity),
        original_quantity=Decimal(original_quantity),
        total=Decimal("375.15"),
    )


class TestOpenOrder:
    """Tests for OpenOrder."""

    def test_create_order(self) -> None:
        """OpenOrder stores its fields."""
        order = make_order()
        assert order.id == "10001"
        assert order.order_type == OrderType.BUY
        assert order.quantity == Decimal("0.5")
        assert order.original_quantity == Decimal("1.5")

    def test_filled_quantity(self) -> None:
        """filled_quantity() is original minus remaining."""
        assert make_order().filled_quantity() == Decimal("1.0")

    def test_fully_filled_quantity_zero_allowed(self) -> None:
        """Remaining quantity may be zero."""
        assert make_order(quantity="0").quantity == Decimal("0")

    def test_negative_quantity_rejected(self) -> None:
        """Remaining quantity cannot be negative."""
        with pytest.raises(ValueError):
            make_order(quantity="-0.1")

    def test_quantity_above_original_rejected(self) -> None:
        """Remaining quantity cannot exceed the original."""
        with pytest.raises(ValueError):
            make_order(quantity="2", original_quantity="1")

    def test_immutable(self) -> None:
        """OpenOrder is frozen."""
        order = make_order()
        with pytest.raises((AttributeError, TypeError)):
            order.quantity = Decimal("0")  # type: ignore[misc]
