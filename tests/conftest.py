"""Shared test fixtures."""

import os

# Settings() requires JWT_SECRET at import time
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-only")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402

from config.settings import settings  # noqa: E402
from src.main import app  # noqa: E402


def make_token(user_id: str, role: str, token_type: str = "access", expires_in: int = 900) -> str:
    """Mint a token the way the identity provider does."""
    payload = {
        "sub": user_id,
        "role": role,
        "type": token_type,
        "exp": datetime.now(UTC) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def retailer_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('retailer-1', 'retailer')}"}


@pytest.fixture
def wholesaler_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('seller-1', 'wholesaler')}"}


@pytest.fixture
def token_factory():  # type: ignore[no-untyped-def]
    return make_token
