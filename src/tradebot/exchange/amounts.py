"""Decimal helpers shared by all adapters."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from tradebot.domain.errors import ContractError

FEE_PRECISION = Decimal("0.00000001")


def fee_fraction(percentage: Decimal) -> Decimal:
    """Convert a fee percentage (0.2 = 0.2%) to a fraction (0.002)."""
    return (percentage / Decimal(100)).quantize(FEE_PRECISION, rounding=ROUND_HALF_UP)


def order_decimal(name: str, value: Decimal | int | float | str) -> Decimal:
    """Coerce an order price or quantity to a finite Decimal.

    Args:
        name: Field name, for the error message
        value: Caller-supplied value

    Returns:
        The value as a Decimal

    Raises:
        ContractError: If the value is not numeric, NaN or infinite
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise ContractError(f"Invalid {name}: {value!r} is not a decimal number")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ContractError(f"Invalid {name}: {value!r} is not a decimal number") from e
    if not number.is_finite():
        raise ContractError(f"Invalid {name}: {value!r} must be finite")
    return number
