"""Unit tests for token verification and role guards."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from config.settings import settings
from src.wm_common.errors import ForbiddenError, InvalidCredentialsError
from src.wm_gateway.auth.dependencies import (
    Principal,
    get_current_user,
    require_retailer,
    require_wholesaler,
)
from src.wm_gateway.auth.jwt_handler import decode_token


def test_decode_valid_access_token(token_factory) -> None:  # type: ignore[no-untyped-def]
    payload = decode_token(token_factory("retailer-9", "retailer"))
    assert payload["sub"] == "retailer-9"
    assert payload["role"] == "retailer"


def test_refresh_token_rejected(token_factory) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(InvalidCredentialsError):
        decode_token(token_factory("retailer-9", "retailer", token_type="refresh"))


def test_expired_token_rejected(token_factory) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(InvalidCredentialsError):
        decode_token(token_factory("retailer-9", "retailer", expires_in=-60))


def test_wrong_secret_rejected() -> None:
    token = jwt.encode(
        {"sub": "x", "role": "retailer", "type": "access",
         "exp": datetime.now(UTC) + timedelta(minutes=5)},
        "some-other-secret",
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_garbage_rejected() -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token("not.a.jwt")


class TestGetCurrentUser:
    async def test_returns_principal(self, token_factory) -> None:  # type: ignore[no-untyped-def]
        principal = await get_current_user(token_factory("seller-3", "wholesaler"))
        assert principal == Principal(user_id="seller-3", role="wholesaler")

    async def test_unknown_role_is_401(self, token_factory) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(token_factory("admin-1", "admin"))
        assert exc_info.value.status_code == 401

    async def test_invalid_token_is_401(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user("garbage")
        assert exc_info.value.status_code == 401


class TestRoleGuards:
    async def test_retailer_allowed(self) -> None:
        p = Principal("r-1", "retailer")
        assert await require_retailer(p) is p

    async def test_wholesaler_blocked_from_retailer_routes(self) -> None:
        with pytest.raises(ForbiddenError):
            await require_retailer(Principal("s-1", "wholesaler"))

    async def test_retailer_blocked_from_seller_routes(self) -> None:
        with pytest.raises(ForbiddenError):
            await require_wholesaler(Principal("r-1", "retailer"))
