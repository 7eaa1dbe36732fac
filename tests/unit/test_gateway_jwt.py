"""Tests for access-token verification."""

from datetime import timedelta

import pytest
from jose import jwt

from config.settings import settings
from src.yp_common.enums import UserRole
from src.yp_common.errors import InvalidCredentialsError
from src.yp_gateway.auth.jwt_handler import create_access_token, decode_access_token


class TestDecodeAccessToken:
    def test_round_trip_claims(self) -> None:
        payload = decode_access_token(create_access_token("user-1", UserRole.ADMIN))
        assert payload["sub"] == "user-1"
        assert payload["role"] == "admin"
        assert payload["type"] == "access"

    def test_expired(self) -> None:
        token = create_access_token("user-1", expires_in=timedelta(seconds=-5))
        with pytest.raises(InvalidCredentialsError):
            decode_access_token(token)

    def test_wrong_secret(self) -> None:
        token = jwt.encode({"sub": "user-1", "type": "access"}, "other", algorithm="HS256")
        with pytest.raises(InvalidCredentialsError):
            decode_access_token(token)

    def test_refresh_token_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "user-1", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256"
        )
        with pytest.raises(InvalidCredentialsError):
            decode_access_token(token)
