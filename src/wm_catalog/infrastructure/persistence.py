# src/wm_catalog/infrastructure/persistence.py
"""ProductRepository: raw SQL reads of authoritative product rows.

Stock is never written here; see wm_inventory.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_catalog.domain.models import Product

_SELECT_COLUMNS = """
    id, name, price, stock_quantity, is_active, shipping_fee, seller_id, moq
"""

_GET_PRODUCT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products WHERE id = CAST(:id AS UUID)
""")

_GET_PRODUCTS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products WHERE id = ANY(CAST(:ids AS UUID[]))
""")


def _row_to_product(row: Any) -> Product:
    return Product(
        id=str(row.id),
        name=row.name,
        price=row.price,
        stock_quantity=row.stock_quantity,
        is_active=row.is_active,
        shipping_fee=row.shipping_fee,
        seller_id=str(row.seller_id),
        moq=row.moq,
    )


class ProductRepository:
    """Concrete implementation of ProductRepositoryProtocol using raw SQL."""

    async def get_by_id(self, product_id: str, db: AsyncSession) -> Product | None:
        result = await db.execute(_GET_PRODUCT_SQL, {"id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def get_many(self, product_ids: list[str], db: AsyncSession) -> list[Product]:
        if not product_ids:
            return []
        result = await db.execute(_GET_PRODUCTS_SQL, {"ids": product_ids})
        return [_row_to_product(row) for row in result.fetchall()]
