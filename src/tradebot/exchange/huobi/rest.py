"""Huobi REST API client.

Knows Huobi's URLs, method names and payload layout. Returns raw
response bodies; parsing is the normalizer's job.

Public calls:
    GET http://api.huobi.com/{path}
Authenticated calls:
    POST https://api.huobi.com/apiv3/
    body: method, access_key, created, sign[, market], <call params>
"""

from __future__ import annotations

import logging

from tradebot.exchange.huobi.auth import HuobiAuth
from tradebot.exchange.transport import HttpTransport

logger = logging.getLogger(__name__)

HUOBI_API_VERSION = "v3"
PUBLIC_API_BASE_URL = "http://api.huobi.com/"
AUTHENTICATED_API_URL = f"https://api.huobi.com/api{HUOBI_API_VERSION}/"

COIN_TYPE_BTC = "1"


class HuobiRestClient:
    """REST client for Huobi Trade API v3.

    Handles:
    - Order placement and cancellation
    - Open order queries
    - Account info queries
    - Public depth and ticker feeds
    """

    def __init__(
        self,
        auth: HuobiAuth,
        transport: HttpTransport,
        public_base_url: str = PUBLIC_API_BASE_URL,
        authenticated_url: str = AUTHENTICATED_API_URL,
    ) -> None:
        """Initialize the REST client.

        Args:
            auth: Request signer
            transport: HTTP transport
            public_base_url: Base URL for public feeds
            authenticated_url: Endpoint for signed calls
        """
        self._auth = auth
        self._transport = transport
        self._public_base_url = public_base_url
        self._authenticated_url = authenticated_url

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self._transport.aclose()

    async def _public_request(self, path: str) -> str:
        return await self._transport.get(f"{self._public_base_url}{path}")

    async def _authenticated_request(
        self,
        method: str,
        market: str | None,
        params: dict[str, str] | None = None,
    ) -> str:
        """Sign and send an authenticated call.

        Args:
            method: Huobi API method name
            market: Settlement-currency market ("cny"/"usd"), not signed
            params: Call-specific params, signed and sent

        Returns:
            Raw response body
        """
        params = params or {}
        signed = self._auth.build_signed_params(method, params)

        form = {
            "method": signed["method"],
            "access_key": signed["access_key"],
            "created": signed["created"],
            "sign": signed["sign"],
        }
        if market:
            form["market"] = market
        form.update(params)

        logger.debug(f"Sending {method} for market={market} params={params}")
        return await self._transport.post_form(self._authenticated_url, form)

    # Order operations

    async def place_order(
        self, method: str, market: str, price: str, amount: str
    ) -> str:
        """Place a BTC limit order.

        Args:
            method: "buy" or "sell"
            market: Settlement-currency market
            price: Price, already rounded and formatted
            amount: Amount, already rounded and formatted

        Returns:
            Raw response body
        """
        logger.info(f"Placing order: {method} {amount} BTC @ {price} on {market}")
        return await self._authenticated_request(
            method,
            market,
            {"coin_type": COIN_TYPE_BTC, "price": price, "amount": amount},
        )

    async def cancel_order(self, order_id: str, market: str) -> str:
        """Cancel an order.

        Args:
            order_id: Huobi order id
            market: Settlement-currency market

        Returns:
            Raw response body
        """
        logger.info(f"Cancelling order: {order_id} on {market}")
        return await self._authenticated_request(
            "cancel_order", market, {"coin_type": COIN_TYPE_BTC, "id": order_id}
        )

    async def get_orders(self, market: str) -> str:
        """Get resting BTC orders for a settlement-currency market."""
        return await self._authenticated_request(
            "get_orders", market, {"coin_type": COIN_TYPE_BTC}
        )

    # Account operations

    async def get_account_info(self, market: str) -> str:
        """Get wallet balances.

        Args:
            market: Settlement-currency namespace of the account
        """
        return await self._authenticated_request("get_account_info", market)

    # Market operations

    async def get_depth(self, path: str) -> str:
        """Get a public depth feed."""
        return await self._public_request(path)

    async def get_ticker(self, path: str) -> str:
        """Get a public ticker feed."""
        return await self._public_request(path)
