"""Tests for Token and deferred results."""

import dataclasses

import pytest

from oauth_client import Token
from oauth_client.deferred import failed, run_deferred


class TestToken:
    """Tests for Token."""

    def test_defaults(self):
        """Test optional fields default to None."""
        token = Token("AT")
        assert token.secret is None
        assert token.refresh_token is None
        assert token.token_type is None
        assert token.expires_in is None
        assert not token.can_refresh

    def test_immutable(self):
        """Test tokens cannot be modified."""
        token = Token("AT", refresh_token="RT")
        with pytest.raises(dataclasses.FrozenInstanceError):
            token.access_token = "other"

    def test_repr_hides_credentials(self):
        """Test repr does not leak credentials."""
        text = repr(Token("secret-access", secret="secret-key", refresh_token="secret-refresh"))
        assert "secret-access" not in text
        assert "secret-key" not in text
        assert "secret-refresh" not in text


class TestDeferred:
    """Tests for deferred execution."""

    def test_inline_result(self):
        """Test inline work returns a resolved future."""
        future = run_deferred(None, lambda a, b: a + b, 1, 2)
        assert future.done()
        assert future.result() == 3

    def test_inline_exception(self):
        """Test inline failure is carried by the future."""

        def boom():
            raise RuntimeError("boom")

        future = run_deferred(None, boom)
        assert isinstance(future.exception(), RuntimeError)

    def test_failed(self):
        """Test pre-failed future."""
        with pytest.raises(KeyError):
            failed(KeyError("k")).result()
