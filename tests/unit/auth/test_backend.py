"""Unit tests for auth backend (bearer token handling)."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from sekolah.config import settings
from sekolah.core.auth.backend import create_access_token, decode_token


pytestmark = pytest.mark.unit


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_create_access_token_returns_string(self):
        """create_access_token should return a JWT string."""
        token = create_access_token("auth-123")

        assert isinstance(token, str)
        assert token.count(".") == 2

    def test_decode_token_returns_subject(self):
        """decode_token should expose the subject as auth_id."""
        token = create_access_token("auth-123")

        token_data = decode_token(token)

        assert token_data is not None
        assert token_data.auth_id == "auth-123"
        assert token_data.exp > datetime.now(UTC)

    def test_decode_token_reads_email_claim(self):
        token = create_access_token(
            "auth-123", additional_claims={"email": "guru@sekolah.sch.id"}
        )

        token_data = decode_token(token)

        assert token_data is not None
        assert token_data.email == "guru@sekolah.sch.id"

    def test_decode_token_custom_expiry(self):
        token = create_access_token("auth-123", expires_delta=timedelta(minutes=5))

        token_data = decode_token(token)

        assert token_data is not None
        assert token_data.exp < datetime.now(UTC) + timedelta(minutes=6)

    def test_decode_expired_token_returns_none(self):
        """Expired tokens are rejected."""
        token = create_access_token("auth-123", expires_delta=timedelta(seconds=-1))

        assert decode_token(token) is None

    def test_decode_invalid_token_returns_none(self):
        assert decode_token("not.a.token") is None

    def test_decode_token_wrong_secret_returns_none(self):
        token = jwt.encode(
            {"sub": "auth-123", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "x" * 40,
            algorithm=settings.jwt_algorithm,
        )

        assert decode_token(token) is None

    def test_decode_token_without_subject_returns_none(self):
        token = jwt.encode(
            {"exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        assert decode_token(token) is None
