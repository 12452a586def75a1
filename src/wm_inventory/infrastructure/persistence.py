"""StockRepository: the only code that writes products.stock_quantity.

Primary path: stored functions increment_stock / decrement_stock
(alembic 007), each a single atomic UPDATE ... RETURNING.

Fallback path: plain SELECT then UPDATE. Not race-free.

Transaction ownership: the CALLER commits. The stored-function call runs in a
SAVEPOINT so that a missing function does not abort the caller's transaction.
"""

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_inventory.domain.models import StockProcedureUnavailable

# PostgreSQL: 42883 undefined_function
_UNDEFINED_FUNCTION = "42883"

_INCREMENT_FN_SQL = text(
    "SELECT increment_stock(CAST(:product_id AS UUID), :quantity) AS new_stock"
)
_DECREMENT_FN_SQL = text(
    "SELECT decrement_stock(CAST(:product_id AS UUID), :quantity) AS new_stock"
)
_READ_STOCK_SQL = text(
    "SELECT stock_quantity FROM products WHERE id = CAST(:product_id AS UUID)"
)
_WRITE_STOCK_SQL = text(
    "UPDATE products SET stock_quantity = :new_stock, updated_at = NOW()"
    " WHERE id = CAST(:product_id AS UUID)"
)


def _is_undefined_function(exc: DBAPIError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _UNDEFINED_FUNCTION:
        return True
    return "does not exist" in str(orig) and "function" in str(orig)


class StockRepository:
    async def _call_function(
        self, sql: object, product_id: str, quantity: int, db: AsyncSession
    ) -> int | None:
        try:
            async with db.begin_nested():
                result = await db.execute(
                    sql, {"product_id": product_id, "quantity": quantity}
                )
                new_stock = result.scalar_one_or_none()
        except DBAPIError as exc:
            if _is_undefined_function(exc):
                raise StockProcedureUnavailable(str(exc.orig)) from exc
            raise
        return new_stock

    async def atomic_increment(
        self, product_id: str, quantity: int, db: AsyncSession
    ) -> int | None:
        return await self._call_function(_INCREMENT_FN_SQL, product_id, quantity, db)

    async def atomic_decrement(
        self, product_id: str, quantity: int, db: AsyncSession
    ) -> int | None:
        return await self._call_function(_DECREMENT_FN_SQL, product_id, quantity, db)

    async def read_stock(self, product_id: str, db: AsyncSession) -> int | None:
        result = await db.execute(_READ_STOCK_SQL, {"product_id": product_id})
        return result.scalar_one_or_none()

    async def write_stock(self, product_id: str, new_stock: int, db: AsyncSession) -> None:
        await db.execute(
            _WRITE_STOCK_SQL, {"product_id": product_id, "new_stock": new_stock}
        )
