"""Tests for Huobi authentication."""

import pytest

from tradebot.domain.errors import ConfigurationError
from tradebot.exchange.huobi.auth import HuobiAuth

CREATED = 1386844119


class TestHuobiAuthInit:
    """Tests for HuobiAuth construction."""

    def test_empty_access_key(self) -> None:
        """An empty access key is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            HuobiAuth("", "secret")
        assert exc_info.value.field == "key"

    def test_empty_secret(self) -> None:
        """An empty secret is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            HuobiAuth("access", "")
        assert exc_info.value.field == "secret"

    def test_repr_hides_secret(self) -> None:
        """repr() shows the access key only."""
        auth = HuobiAuth("access", "secret")
        assert "access" in repr(auth)
        assert "secret" not in repr(auth)


class TestCanonicalQuery:
    """Tests for parameter canonicalization."""

    def test_sorted_by_name(self) -> None:
        """Parameters are joined in name order."""
        query = HuobiAuth.canonical_query({"method": "buy", "created": "1", "access_key": "a"})
        assert query == "access_key=a&created=1&method=buy"

    def test_empty(self) -> None:
        """No parameters give an empty string."""
        assert HuobiAuth.canonical_query({}) == ""


class TestMd5Hex:
    """Tests for the digest helper."""

    def test_known_digest(self) -> None:
        """md5_hex() is lowercase hex MD5."""
        assert HuobiAuth.md5_hex("abc") == "900150983cd24fb0d6963f7d28e17f72"

    def test_empty_input_is_hashed(self) -> None:
        """An empty string still hashes to the MD5 of no bytes."""
        assert HuobiAuth.md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"


class TestSigning:
    """Tests for request signing."""

    @pytest.fixture
    def auth(self) -> HuobiAuth:
        """Signer with a fixed clock."""
        return HuobiAuth("access", "secret", clock=lambda: CREATED + 0.75)

    def test_sign_includes_secret(self, auth: HuobiAuth) -> None:
        """The secret is merged in before hashing."""
        params = {"method": "get_account_info", "access_key": "access", "created": str(CREATED)}
        assert auth.sign(params) == "b7b5c6c56f0e82868da10837600b9060"

    def test_sign_does_not_mutate_params(self, auth: HuobiAuth) -> None:
        """sign() works on a copy."""
        params = {"method": "buy"}
        auth.sign(params)
        assert params == {"method": "buy"}

    def test_build_signed_params(self, auth: HuobiAuth) -> None:
        """Signed params carry method, access_key, created and sign, but not the secret."""
        signed = auth.build_signed_params("get_account_info")
        assert signed == {
            "method": "get_account_info",
            "access_key": "access",
            "created": str(CREATED),
            "sign": "b7b5c6c56f0e82868da10837600b9060",
        }
        assert "secret_key" not in signed
        assert "secret" not in signed.values()

    def test_call_params_are_signed(self, auth: HuobiAuth) -> None:
        """Call-specific params are part of the signature."""
        signed = auth.build_signed_params(
            "buy", {"coin_type": "1", "price": "250.18", "amount": "0.5000"}
        )
        assert signed["sign"] == "9e88a135d6c8fc93e7366a5c658499a7"

    def test_signature_is_deterministic(self, auth: HuobiAuth) -> None:
        """Same inputs, same signature."""
        first = auth.build_signed_params("buy", {"price": "1"}, created=CREATED)
        second = auth.build_signed_params("buy", {"price": "1"}, created=CREATED)
        assert first["sign"] == second["sign"]

    def test_changing_any_param_changes_signature(self, auth: HuobiAuth) -> None:
        """Every signed field contributes to the signature."""
        base = auth.build_signed_params("buy", {"price": "1"}, created=CREATED)["sign"]
        assert auth.build_signed_params("buy", {"price": "2"}, created=CREATED)["sign"] != base
        assert auth.build_signed_params("sell", {"price": "1"}, created=CREATED)["sign"] != base
        assert auth.build_signed_params("buy", {"price": "1"}, created=CREATED + 1)["sign"] != base

    def test_different_secret_changes_signature(self) -> None:
        """The secret feeds the signature."""
        one = HuobiAuth("access", "secret").build_signed_params("buy", created=CREATED)
        two = HuobiAuth("access", "other").build_signed_params("buy", created=CREATED)
        assert one["sign"] != two["sign"]
