"""Order domain models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import model_validator
from pydantic.dataclasses import dataclass

from tradebot.domain.types import OrderType


@dataclass(frozen=True)
class OpenOrder:
    """A resting order owned by the caller.

    quantity is what remains on the book; original_quantity is what was
    placed. The exchange may not report total, in which case adapters
    compute it as price * original_quantity.
    """

    id: str  # Exchange-assigned order ID
    creation_date: datetime
    market_id: str
    order_type: OrderType
    price: Decimal
    quantity: Decimal  # remaining
    original_quantity: Decimal
    total: Decimal

    @model_validator(mode="after")
    def validate_quantities(self) -> OpenOrder:
        """Ensure 0 <= quantity <= original_quantity."""
        if self.quantity < 0:
            raise ValueError("Remaining quantity cannot be negative")
        if self.quantity > self.original_quantity:
            raise ValueError("Remaining quantity cannot exceed original quantity")
        return self

    def filled_quantity(self) -> Decimal:
        """Return the quantity executed so far."""
        return self.original_quantity - self.quantity
