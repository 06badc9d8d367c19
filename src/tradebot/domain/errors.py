"""Exception hierarchy for exchange adapter errors.

Runtime trading failures inherit from TradingError and split into two
classes the caller can act on:

- ExchangeTimeoutError: transient, safe to retry
- TradingApiError: non-transient, needs caller or operator attention

Contract errors (bad configuration, unsupported market or order type) are
programming faults rather than trading conditions. They inherit from
ContractError, which is a ValueError and deliberately not a TradingError,
so a retry loop catching TradingError never swallows them.
"""

from __future__ import annotations

from typing import Any


class TradingError(Exception):
    """Base exception for all runtime trading errors.

    Raised by adapter operations once a request has been attempted.
    """

    def __init__(
        self,
        message: str,
        exchange: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and optional context.

        Args:
            message: Human-readable error description
            exchange: Name of the exchange the error came from
            context: Additional structured data for logging/debugging
        """
        super().__init__(message)
        self.exchange = exchange
        self.context = context or {}


class ExchangeTimeoutError(TradingError):
    """Transient failure talking to the exchange.

    Raised when:
    - The socket connect/read timed out
    - The connection was reset, refused or closed mid-handshake
    - The exchange answered 502/503/504

    The adapter never retries; the caller may.
    """

    def __init__(
        self,
        message: str,
        exchange: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and optional HTTP status.

        Args:
            message: Human-readable error description
            exchange: Name of the exchange
            status_code: HTTP status code when the failure was a 50x
            context: Additional structured data
        """
        super().__init__(message, exchange, context)
        self.status_code = status_code


class TradingApiError(TradingError):
    """Non-transient failure.

    Raised when:
    - The request URL is malformed
    - An unexpected IO error occurs
    - The exchange returns a non-success status code
    - The response does not match the expected schema
    - The exchange rejects an order
    """

    def __init__(
        self,
        message: str,
        exchange: str | None = None,
        code: int | None = None,
        exchange_message: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the exchange's own error code and message.

        Args:
            message: Human-readable error description
            exchange: Name of the exchange
            code: Exchange-specific error code, if the exchange sent one
            exchange_message: Error message as sent by the exchange
            context: Additional structured data
        """
        super().__init__(message, exchange, context)
        self.code = code
        self.exchange_message = exchange_message


class ContractError(ValueError):
    """Caller broke the adapter contract.

    Always raised before any network request is made.
    """


class ConfigurationError(ContractError):
    """Invalid or missing adapter configuration.

    Raised when:
    - A credential is missing or empty
    - A fee or timeout value is missing, zero or malformed
    - No adapter is registered for the configured exchange type
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with field information.

        Args:
            message: Human-readable error description
            field: Name of the configuration field with the issue
        """
        super().__init__(message)
        self.field = field


class UnsupportedMarketError(ContractError):
    """Market id is not served by the adapter."""

    def __init__(self, market_id: str, supported: list[str]) -> None:
        """Initialize with the rejected id and the supported set.

        Args:
            market_id: The market id the caller passed
            supported: Every market id the adapter accepts
        """
        super().__init__(
            f"Unrecognised marketId: '{market_id}'. Supported markets are: {supported}"
        )
        self.market_id = market_id
        self.supported = supported
