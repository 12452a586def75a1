# src/wm_catalog/domain/repository.py
"""ProductRepository Protocol: read-only view of the catalog."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_catalog.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def get_by_id(self, product_id: str, db: AsyncSession) -> Product | None: ...

    async def get_many(self, product_ids: list[str], db: AsyncSession) -> list[Product]: ...
