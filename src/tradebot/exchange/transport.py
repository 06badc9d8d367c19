"""HTTP transport shared by REST exchange adapters.

Issues public GETs and signed form POSTs, reads the body fully, and
classifies every failure as transient (ExchangeTimeoutError) or fatal
(TradingApiError). It never parses JSON and never retries.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from tradebot.core.config import NetworkConfig
from tradebot.domain.errors import ExchangeTimeoutError, TradingApiError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

UNEXPECTED_IO_ERROR_MSG = "Failed to connect to exchange due to unexpected IO error."
MALFORMED_URL_ERROR_MSG = "Failed to connect to exchange due to malformed URL."
SOCKET_TIMEOUT_ERROR_MSG = "Failed to connect to exchange due to socket timeout."
CONNECTION_RESET_ERROR_MSG = "Failed to connect to exchange. Connection was reset by the server."
HTTP_50X_ERROR_MSG = "Failed to connect to exchange due to 50x timeout."

# Resets, refusals, closed handshakes and early EOFs.
TRANSIENT_NETWORK_ERRORS: tuple[type[httpx.TransportError], ...] = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


class HttpTransport:
    """Async HTTP transport for one adapter instance.

    Owns a single httpx.AsyncClient. Every response is read inside the
    client's stream context, so the connection is released whether the
    call succeeds, fails, or the calling task is cancelled.

    Not safe for concurrent use; the owning adapter is single-caller.
    """

    def __init__(
        self,
        exchange: str,
        timeout_seconds: float,
        network: NetworkConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            exchange: Exchange name, used in errors and logs
            timeout_seconds: Connect/read/write/pool timeout
            network: Non-fatal error codes and messages (defaults if None)
            transport: Optional httpx transport (e.g. httpx.MockTransport)
            headers: Default headers sent with every request
        """
        network = network or NetworkConfig()
        self._exchange = exchange
        self._non_fatal_codes = frozenset(network.non_fatal_error_codes)
        self._non_fatal_messages = tuple(network.non_fatal_error_messages)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(float(timeout_seconds)),
            transport=transport,
            headers=headers,
        )

    @property
    def is_closed(self) -> bool:
        """Return True once aclose() has been called."""
        return self._client.is_closed

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get(self, url: str) -> str:
        """Send an unauthenticated GET.

        Args:
            url: Full request URL

        Returns:
            Response body as text

        Raises:
            ExchangeTimeoutError: On a transient failure
            TradingApiError: On any other failure
        """
        return await self._send("GET", url)

    async def post_form(self, url: str, form: Mapping[str, str]) -> str:
        """Send a signed, form-encoded POST.

        Fields are URL-encoded in the mapping's insertion order.

        Args:
            url: Full request URL
            form: Form fields, already including the signature

        Returns:
            Response body as text

        Raises:
            ExchangeTimeoutError: On a transient failure
            TradingApiError: On any other failure
        """
        return await self._send(
            "POST",
            url,
            data=dict(form),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )

    async def _send(self, method: str, url: str, **kwargs: Any) -> str:
        # Only the URL is logged; signed bodies carry the access key and signature.
        logger.debug(f"Using following URL for API call: {method} {url}")

        try:
            async with self._client.stream(method, url, **kwargs) as response:
                await response.aread()
                status_code = response.status_code
                text = response.text

        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error(f"{MALFORMED_URL_ERROR_MSG} {url}: {e}")
            raise TradingApiError(MALFORMED_URL_ERROR_MSG, self._exchange) from e

        except httpx.TimeoutException as e:
            logger.error(f"{SOCKET_TIMEOUT_ERROR_MSG} {e!r}")
            raise ExchangeTimeoutError(SOCKET_TIMEOUT_ERROR_MSG, self._exchange) from e

        except TRANSIENT_NETWORK_ERRORS as e:
            logger.error(f"{CONNECTION_RESET_ERROR_MSG} {e!r}")
            raise ExchangeTimeoutError(CONNECTION_RESET_ERROR_MSG, self._exchange) from e

        except httpx.TransportError as e:
            if self._is_non_fatal_message(str(e)):
                logger.error(f"{CONNECTION_RESET_ERROR_MSG} {e!r}")
                raise ExchangeTimeoutError(
                    CONNECTION_RESET_ERROR_MSG, self._exchange
                ) from e
            logger.error(f"{UNEXPECTED_IO_ERROR_MSG} {e!r}")
            raise TradingApiError(UNEXPECTED_IO_ERROR_MSG, self._exchange) from e

        if status_code in self._non_fatal_codes:
            logger.error(f"{HTTP_50X_ERROR_MSG} Status: {status_code}")
            raise ExchangeTimeoutError(
                HTTP_50X_ERROR_MSG, self._exchange, status_code=status_code
            )

        if status_code >= 400:
            logger.error(f"{UNEXPECTED_IO_ERROR_MSG} Status: {status_code} Body: {text}")
            raise TradingApiError(
                f"{UNEXPECTED_IO_ERROR_MSG} HTTP {status_code}: {text}",
                self._exchange,
                context={"status_code": status_code},
            )

        return text

    def _is_non_fatal_message(self, message: str) -> bool:
        return any(marker in message for marker in self._non_fatal_messages)
