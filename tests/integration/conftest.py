"""Integration-test fixtures.

Needs PostgreSQL with migrations applied (alembic upgrade head). Skipped
unless RUN_INTEGRATION=1.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app
from src.wm_common.database import async_session_factory
from src.wm_payment.api.router import _service as payment_service
from src.wm_payment.infrastructure.gateway_client import GatewayConfirmation


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("RUN_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 to run against PostgreSQL")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncGenerator[AsyncClient, None]:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fake_gateway(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace the external gateway; everything else hits the real database."""

    async def confirm(payment_key: str, order_id: str, amount: int) -> GatewayConfirmation:
        return GatewayConfirmation(
            payment_key=payment_key,
            order_id=order_id,
            status="DONE",
            method="카드",
            total_amount=amount,
            approved_at=None,
        )

    gateway = AsyncMock()
    gateway.confirm.side_effect = confirm
    monkeypatch.setattr(payment_service, "_gateway", gateway)
    return gateway


async def seed_product(
    price: int = 32000, stock: int = 10, shipping_fee: int = 3000
) -> tuple[str, str]:
    """Insert a product and return (product_id, seller_id)."""
    product_id = str(uuid.uuid4())
    seller_id = f"seller-{uuid.uuid4().hex[:8]}"
    async with async_session_factory() as session:
        await session.execute(
            text("""
                INSERT INTO products (id, seller_id, name, price, stock_quantity, shipping_fee)
                VALUES (CAST(:id AS UUID), :seller_id, :name, :price, :stock, :fee)
            """),
            {
                "id": product_id,
                "seller_id": seller_id,
                "name": "통합테스트 사과",
                "price": price,
                "stock": stock,
                "fee": shipping_fee,
            },
        )
        await session.commit()
    return product_id, seller_id


async def read_stock(product_id: str) -> int:
    async with async_session_factory() as session:
        result = await session.execute(
            text("SELECT stock_quantity FROM products WHERE id = CAST(:id AS UUID)"),
            {"id": product_id},
        )
        return int(result.scalar_one())


async def set_order_status(order_id: str, status: str) -> None:
    async with async_session_factory() as session:
        await session.execute(
            text("UPDATE orders SET status = :status WHERE id = CAST(:id AS UUID)"),
            {"id": order_id, "status": status},
        )
        await session.commit()


@pytest.fixture
def db() -> SimpleNamespace:
    """Direct-SQL helpers for seeding and inspecting state."""
    return SimpleNamespace(
        seed_product=seed_product, read_stock=read_stock, set_order_status=set_order_status
    )
