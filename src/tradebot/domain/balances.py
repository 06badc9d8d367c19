"""Account balance domain model."""

from __future__ import annotations

from decimal import Decimal

from pydantic import field_validator
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class BalanceInfo:
    """Wallet balances keyed by upper-case currency code.

    A currency missing from either mapping has a zero balance.
    """

    available: dict[str, Decimal]
    on_order: dict[str, Decimal]

    @field_validator("available", "on_order")
    @classmethod
    def uppercase_currencies(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        """Normalize currency codes to upper case."""
        return {currency.upper(): amount for currency, amount in v.items()}

    def available_for(self, currency: str) -> Decimal:
        """Return the available balance for a currency (zero if absent)."""
        return self.available.get(currency.upper(), Decimal(0))

    def on_order_for(self, currency: str) -> Decimal:
        """Return the balance locked in open orders (zero if absent)."""
        return self.on_order.get(currency.upper(), Decimal(0))
