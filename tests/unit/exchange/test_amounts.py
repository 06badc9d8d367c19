"""Tests for the shared decimal helpers."""

from decimal import Decimal

import pytest

from tradebot.domain.errors import ContractError
from tradebot.exchange.amounts import fee_fraction, order_decimal


class TestFeeFraction:
    """Tests for fee percentage conversion."""

    def test_percentage_to_fraction(self) -> None:
        """Fee percentages become fractions."""
        assert fee_fraction(Decimal("0.2")) == Decimal("0.002")

    def test_rounds_half_up(self) -> None:
        """Fractions round half-up to 8 places."""
        assert fee_fraction(Decimal("0.0000005")) == Decimal("0.00000001")


class TestOrderDecimal:
    """Tests for order amount coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (Decimal("1.5"), Decimal("1.5")),
            (250, Decimal("250")),
            ("0.25", Decimal("0.25")),
            (0.5, Decimal("0.5")),
        ],
    )
    def test_numeric_values(self, value, expected: Decimal) -> None:
        """Decimal, int, str and float values come back as Decimal."""
        result = order_decimal("price", value)
        assert isinstance(result, Decimal)
        assert result == expected

    @pytest.mark.parametrize(
        "value",
        [Decimal("NaN"), Decimal("sNaN"), Decimal("Infinity"), float("inf"), "abc", None, True, [1]],
    )
    def test_rejected_values(self, value) -> None:
        """Non-numeric and non-finite values raise ContractError."""
        with pytest.raises(ContractError, match="price"):
            order_decimal("price", value)
