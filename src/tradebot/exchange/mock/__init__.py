"""Mock exchange adapter for testing.

Provides a complete implementation of the TradingApi contract that
operates entirely in memory, useful for unit tests and dry runs.
"""

from tradebot.exchange.mock.adapter import MockExchangeAdapter

__all__ = ["MockExchangeAdapter"]
