# src/wm_order/domain/repository.py
"""OrderRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def insert(self, order: Order, db: AsyncSession) -> Order: ...

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None: ...

    async def list_by_payment_key(self, payment_key: str, db: AsyncSession) -> list[Order]: ...

    async def transition_status(
        self, order_id: str, from_statuses: list[str], to_status: str, db: AsyncSession
    ) -> Order | None: ...

    async def list_by_buyer(
        self,
        buyer_id: str,
        statuses: list[str] | None,
        limit: int,
        cursor_id: str | None,
        db: AsyncSession,
    ) -> list[Order]: ...
