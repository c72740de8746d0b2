"""
Unit tests per token JWT e hashing password.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestTokens:
    """Tests per emissione e verifica dei token."""

    def test_access_token_round_trip(self):
        user_id = str(uuid.uuid4())

        payload = decode_token(create_access_token(user_id, "staff1", "staff"))

        assert payload.sub == user_id
        assert payload.username == "staff1"
        assert payload.role == "staff"
        assert payload.type == ACCESS_TOKEN_TYPE

    def test_access_token_lasts_seven_days(self):
        now = datetime.now(timezone.utc).replace(microsecond=0)

        payload = decode_token(create_access_token("u", "admin", "admin", now=now))

        assert payload.exp == now + timedelta(minutes=settings.access_token_expire_minutes)
        assert settings.access_token_expire_minutes == 7 * 24 * 60

    def test_refresh_token_type(self):
        payload = decode_token(create_refresh_token("u", "admin", "admin"))
        assert payload.type == REFRESH_TOKEN_TYPE

    def test_expired_token(self):
        """Test token scaduto: 401 con codice TOKEN_EXPIRED."""
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = create_access_token("u", "staff1", "staff", now=issued)

        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.error_code == "TOKEN_EXPIRED"

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_malformed_token(self, token):
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)
        assert exc_info.value.error_code == "TOKEN_INVALID"

    def test_tampered_token(self):
        token = create_access_token("u", "staff1", "staff")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(AuthenticationError):
            decode_token(tampered)


class TestPasswords:
    """Tests per l'hashing delle password."""

    def test_hash_and_verify(self):
        hashed = hash_password("admin")

        assert hashed != "admin"
        assert verify_password("admin", hashed)
        assert not verify_password("wrong", hashed)
