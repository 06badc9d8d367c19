"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable

import httpx
import pytest

from tradebot.core.config import AdapterConfig, ExchangeConfig, ExchangeType


@pytest.fixture
def adapter_config() -> AdapterConfig:
    """Valid Huobi adapter settings."""
    return AdapterConfig(
        api_key="test-access-key",
        api_secret="test-secret-key",
        buy_fee_percentage="0.2",
        sell_fee_percentage="0.25",
        connection_timeout=30,
        account_info_market="cny",
    )


@pytest.fixture
def exchange_config() -> ExchangeConfig:
    """Exchange section as loaded from YAML."""
    return ExchangeConfig(
        name="Huobi",
        adapter=ExchangeType.HUOBI,
        authentication_config={"key": "test-access-key", "secret": "test-secret-key"},
        other_config={
            "buy-fee": "0.2",
            "sell-fee": "0.25",
            "account-info-market": "cny",
        },
    )


@pytest.fixture
def sample_depth() -> dict:
    """Sample public depth feed from detail_btc_json.js."""
    return {
        "sells": [
            {"price": 251.5, "level": 0, "amount": 1.25},
            {"price": 252, "level": 0.2, "amount": 0.5},
        ],
        "buys": [
            {"price": 250.1, "level": 0, "amount": 2},
            {"price": 249.95, "level": 0.06, "amount": 0.1234},
        ],
        "trades": [
            {"time": "15:04:05", "price": 250.2, "amount": 0.1, "type": "买入", "en_type": "bid"}
        ],
        "p_new": 250.2,
        "p_last": 249.8,
        "total": 123456.78,
    }


@pytest.fixture
def sample_ticker() -> dict:
    """Sample public ticker feed from ticker_btc_json.js."""
    return {
        "time": "1421073800",
        "ticker": {
            "open": 1667.98,
            "vol": 5423.1,
            "symbol": "btccny",
            "last": 1687.43,
            "buy": 1687.41,
            "sell": 1687.44,
            "high": 1700.0,
            "low": 1650.12,
        },
    }


@pytest.fixture
def sample_open_orders() -> list:
    """Sample get_orders success response."""
    return [
        {
            "id": 10001,
            "type": 1,
            "order_price": "250.10",
            "order_amount": "1.5000",
            "processed_amount": "0.5000",
            "order_time": 1421073800,
        },
        {
            "id": 10002,
            "type": 2,
            "order_price": "260.00",
            "order_amount": "0.2500",
            "processed_amount": "0.0000",
            "order_time": 1421073900,
        },
    ]


@pytest.fixture
def sample_account_info() -> dict:
    """Sample get_account_info success response."""
    return {
        "total": "1000.00",
        "net_asset": "1000.00",
        "available_cny_display": "500.25",
        "available_btc_display": "1.2345",
        "frozen_cny_display": "100.00",
        "frozen_btc_display": "0.5000",
        "loan_cny_display": "0.00",
        "loan_btc_display": "0.0000",
    }


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays canned responses.

    Responses are matched by the Huobi ``method`` form field for POSTs and by
    URL path suffix for GETs.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response | Callable[[httpx.Request], httpx.Response]] = {}

    def reply(self, key: str, payload: object, status_code: int = 200) -> None:
        """Register a JSON payload for a method name or URL path suffix."""
        self.responses[key] = httpx.Response(status_code, text=json.dumps(payload))

    def reply_with(self, key: str, func: Callable[[httpx.Request], httpx.Response]) -> None:
        """Register a callable producing the response (or raising)."""
        self.responses[key] = func

    def forms(self) -> list[dict[str, str]]:
        """Return the decoded bodies of every POST seen so far."""
        return [form_of(r) for r in self.requests if r.method == "POST"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            key = form_of(request)["method"]
        else:
            key = next(k for k in self.responses if request.url.path.endswith(k))
        response = self.responses[key]
        if callable(response) and not isinstance(response, httpx.Response):
            return response(request)
        return response


def form_of(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    return dict(httpx.QueryParams(request.content.decode()))


@pytest.fixture
def handler() -> RecordingHandler:
    """Recording handler for httpx.MockTransport."""
    return RecordingHandler()


@pytest.fixture
def mock_transport(handler: RecordingHandler) -> httpx.MockTransport:
    """httpx transport that never touches the network."""
    return httpx.MockTransport(handler)
