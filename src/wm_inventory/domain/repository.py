"""StockRepository Protocol.

atomic_* raise StockProcedureUnavailable when the stored function is missing
and return None when the product row does not exist.
"""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class StockRepositoryProtocol(Protocol):
    async def atomic_increment(
        self, product_id: str, quantity: int, db: AsyncSession
    ) -> int | None: ...

    async def atomic_decrement(
        self, product_id: str, quantity: int, db: AsyncSession
    ) -> int | None: ...

    async def read_stock(self, product_id: str, db: AsyncSession) -> int | None: ...

    async def write_stock(self, product_id: str, new_stock: int, db: AsyncSession) -> None: ...
