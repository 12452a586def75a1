# src/wm_checkout/domain/repository.py
"""CartRepository Protocol: interface contract for persisted cart items."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_checkout.domain.models import CartItem


class CartRepositoryProtocol(Protocol):
    async def upsert_merge(
        self,
        buyer_id: str,
        product_id: str,
        variant_id: str | None,
        quantity: int,
        db: AsyncSession,
    ) -> CartItem: ...

    async def list_by_buyer(self, buyer_id: str, db: AsyncSession) -> list[CartItem]: ...

    async def set_quantity(
        self, item_id: str, buyer_id: str, quantity: int, db: AsyncSession
    ) -> CartItem | None: ...

    async def delete(self, item_id: str, buyer_id: str, db: AsyncSession) -> bool: ...

    async def clear(self, buyer_id: str, db: AsyncSession) -> int: ...
