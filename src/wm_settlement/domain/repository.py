"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_settlement.domain.models import Payment, Settlement


class SettlementRepositoryProtocol(Protocol):
    async def get_by_order_id(self, order_id: str, db: AsyncSession) -> Settlement | None: ...

    async def insert_settlement(
        self, settlement: Settlement, db: AsyncSession
    ) -> Settlement | None: ...

    async def get_payment_by_order_id(self, order_id: str, db: AsyncSession) -> Payment | None: ...

    async def insert_payment(self, payment: Payment, db: AsyncSession) -> Payment: ...
