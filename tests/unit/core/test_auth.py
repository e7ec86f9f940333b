"""Unit tests for credentials and signed headers."""

import pytest

from ntapi.sdk.core import (
    Credentials,
    MissingKeypairError,
    build_signed_headers,
    current_timestamp,
    websocket_auth,
)
from ntapi.sdk.utils import sign


class TestCredentials:
    """Test the credential pair."""

    def test_complete(self):
        """Test complete requires both halves."""
        assert Credentials("pub", "priv").complete
        assert not Credentials("pub", None).complete
        assert not Credentials(None, "priv").complete
        assert not Credentials("", "priv").complete

    def test_require_raises_when_missing(self):
        """Test require() raises MissingKeypairError without both keys."""
        with pytest.raises(MissingKeypairError):
            Credentials("pub").require()

    def test_require_returns_pair(self):
        """Test require() returns (public, private)."""
        assert Credentials("pub", "priv").require() == ("pub", "priv")

    def test_repr_masks_private_key(self):
        """Test repr never shows the private key."""
        text = repr(Credentials("pub", "very-secret"))
        assert "very-secret" not in text
        assert "pub" in text


class TestSignedHeaders:
    """Test signed header construction."""

    def test_signs_payload_then_timestamp(self):
        """Test signature covers payload followed by timestamp."""
        headers = build_signed_headers(Credentials("pub", "priv"), "1700000000", '{"a":1}')
        assert headers["X-NtApi-PublicKey"] == "pub"
        assert headers["X-NtApi-Timestamp"] == "1700000000"
        assert headers["X-NtApi-Sig"] == sign("priv", '{"a":1}1700000000')

    def test_timestamp_only(self):
        """Test empty payload signs the timestamp alone."""
        headers = build_signed_headers(Credentials("pub", "priv"), "1700000000")
        assert headers["X-NtApi-Sig"] == sign("priv", "1700000000")

    def test_headers_are_read_only(self):
        """Test the returned mapping cannot be modified."""
        headers = build_signed_headers(Credentials("pub", "priv"), "1")
        with pytest.raises(TypeError):
            headers["X-NtApi-Sig"] = "forged"

    def test_missing_keypair(self):
        """Test signing without a private key fails."""
        with pytest.raises(MissingKeypairError):
            build_signed_headers(Credentials("pub"), "1")


class TestWebsocketAuth:
    """Test streaming authentication parameters."""

    def test_signs_timestamp(self):
        """Test websocket auth signs the timestamp only."""
        params = websocket_auth(Credentials("pub", "priv"), timestamp="1700000000")
        assert params == {
            "X-NtApi-PublicKey": "pub",
            "X-NtApi-Timestamp": "1700000000",
            "X-NtApi-Sig": sign("priv", "1700000000"),
        }

    def test_missing_keys_sent_empty(self):
        """Test absent keys become empty strings."""
        params = websocket_auth(Credentials(), timestamp="5")
        assert params["X-NtApi-PublicKey"] == ""
        assert params["X-NtApi-Sig"] == sign("", "5")


def test_current_timestamp_is_unix_seconds():
    """Test timestamp is a whole number of seconds."""
    value = current_timestamp()
    assert value.isdigit()
    assert len(value) >= 10
