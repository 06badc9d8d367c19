"""Huobi authentication.

Huobi REST Trade API v3 signs every authenticated call with an MD5 digest:

1. Merge the call's params with method, access_key, created (unix seconds)
   and secret_key
2. Sort the names lexicographically and join as name=value with &
3. MD5 the result and render it as lowercase hex
4. Send it as ``sign``; secret_key is removed before transmission

Example string to sign for get_account_info:
    access_key=xxx&created=1386844119&method=get_account_info&secret_key=yyy
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from tradebot.domain.errors import ConfigurationError
from tradebot.exchange.base import RequestSigner

logger = logging.getLogger(__name__)


class HuobiAuth(RequestSigner):
    """Signs Huobi API v3 requests.

    The digest primitive is checked on construction so a missing MD5
    implementation (e.g. a FIPS-only OpenSSL build) fails at startup
    rather than on the first trade.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize with credentials.

        Args:
            access_key: Huobi access key (sent with every request)
            secret_key: Huobi secret key (used for signing only)
            clock: Source of the current unix time in seconds

        Raises:
            ConfigurationError: If a credential is empty or MD5 is unavailable
        """
        if not access_key:
            raise ConfigurationError("key cannot be null or zero length", field="key")
        if not secret_key:
            raise ConfigurationError(
                "secret cannot be null or zero length", field="secret"
            )

        self._access_key = access_key
        self._secret_key = secret_key
        self._clock = clock
        self._init_digest()

    def _init_digest(self) -> None:
        """Fail fast if MD5 cannot be used for signing."""
        try:
            hashes.Hash(hashes.MD5())
        except UnsupportedAlgorithm as e:
            logger.critical(f"Failed to set up MD5 digest for request signing: {e}")
            raise ConfigurationError(
                f"Failed to set up MD5 digest for request signing: {e}"
            ) from e

    @property
    def access_key(self) -> str:
        """Return the access key."""
        return self._access_key

    def __repr__(self) -> str:
        return f"HuobiAuth(access_key={self._access_key!r})"

    @staticmethod
    def canonical_query(params: Mapping[str, str]) -> str:
        """Join params as name=value pairs in natural name order.

        Args:
            params: Parameters to canonicalize

        Returns:
            e.g. "access_key=abc&created=123&method=buy"
        """
        return "&".join(f"{name}={params[name]}" for name in sorted(params))

    @staticmethod
    def md5_hex(value: str) -> str:
        """Return the lowercase hex MD5 digest of a string."""
        digest = hashes.Hash(hashes.MD5())
        digest.update(value.encode("utf-8"))
        return digest.finalize().hex()

    def sign(self, params: Mapping[str, str]) -> str:
        """Sign params with the secret key merged in.

        Args:
            params: Request params including method, access_key and created

        Returns:
            Lowercase hex MD5 signature
        """
        to_sign = dict(params)
        to_sign["secret_key"] = self._secret_key
        return self.md5_hex(self.canonical_query(to_sign))

    def build_signed_params(
        self,
        method: str,
        params: Mapping[str, str] | None = None,
        created: int | None = None,
    ) -> dict[str, str]:
        """Build the full parameter set for an authenticated call.

        Args:
            method: Huobi API method, e.g. "buy" or "get_orders"
            params: Call-specific params
            created: Unix timestamp in seconds (optional, uses the clock)

        Returns:
            Params including method, access_key, created and sign.
            The secret is never included.
        """
        if created is None:
            created = int(self._clock())

        signed = dict(params or {})
        signed["method"] = method
        signed["access_key"] = self._access_key
        signed["created"] = str(created)
        signed["sign"] = self.sign(signed)
        return signed
