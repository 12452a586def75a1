# src/wm_checkout/infrastructure/persistence.py
"""CartRepository: raw SQL persistence for cart_items.

Adding a line that already exists (same buyer, product, variant) increases
its quantity instead of inserting a duplicate. The table's unique constraint
is NULLS NOT DISTINCT, so a NULL variant merges too.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_checkout.domain.models import CartItem
from src.wm_common.id_generator import generate_id

_RETURNING = "RETURNING id, buyer_id, product_id, variant_id, quantity, created_at, updated_at"

_UPSERT_MERGE_SQL = text(f"""
    INSERT INTO cart_items (id, buyer_id, product_id, variant_id, quantity)
    VALUES (CAST(:id AS UUID), :buyer_id, CAST(:product_id AS UUID),
            CAST(:variant_id AS UUID), :quantity)
    ON CONFLICT (buyer_id, product_id, variant_id) DO UPDATE
        SET quantity = cart_items.quantity + EXCLUDED.quantity,
            updated_at = NOW()
    {_RETURNING}
""")

_LIST_SQL = text("""
    SELECT id, buyer_id, product_id, variant_id, quantity, created_at, updated_at
    FROM cart_items
    WHERE buyer_id = :buyer_id
    ORDER BY created_at DESC
""")

_SET_QUANTITY_SQL = text(f"""
    UPDATE cart_items
    SET quantity = :quantity, updated_at = NOW()
    WHERE id = CAST(:id AS UUID) AND buyer_id = :buyer_id
    {_RETURNING}
""")

_DELETE_SQL = text(
    "DELETE FROM cart_items WHERE id = CAST(:id AS UUID) AND buyer_id = :buyer_id"
)

_CLEAR_SQL = text("DELETE FROM cart_items WHERE buyer_id = :buyer_id")


def _row_to_cart_item(row: Any) -> CartItem:
    return CartItem(
        id=str(row.id),
        buyer_id=row.buyer_id,
        product_id=str(row.product_id),
        variant_id=str(row.variant_id) if row.variant_id else None,
        quantity=row.quantity,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class CartRepository:
    async def upsert_merge(
        self,
        buyer_id: str,
        product_id: str,
        variant_id: str | None,
        quantity: int,
        db: AsyncSession,
    ) -> CartItem:
        result = await db.execute(
            _UPSERT_MERGE_SQL,
            {
                "id": generate_id(),
                "buyer_id": buyer_id,
                "product_id": product_id,
                "variant_id": variant_id,
                "quantity": quantity,
            },
        )
        return _row_to_cart_item(result.fetchone())

    async def list_by_buyer(self, buyer_id: str, db: AsyncSession) -> list[CartItem]:
        result = await db.execute(_LIST_SQL, {"buyer_id": buyer_id})
        return [_row_to_cart_item(row) for row in result.fetchall()]

    async def set_quantity(
        self, item_id: str, buyer_id: str, quantity: int, db: AsyncSession
    ) -> CartItem | None:
        result = await db.execute(
            _SET_QUANTITY_SQL, {"id": item_id, "buyer_id": buyer_id, "quantity": quantity}
        )
        row = result.fetchone()
        return _row_to_cart_item(row) if row else None

    async def delete(self, item_id: str, buyer_id: str, db: AsyncSession) -> bool:
        result = await db.execute(_DELETE_SQL, {"id": item_id, "buyer_id": buyer_id})
        return bool(result.rowcount)

    async def clear(self, buyer_id: str, db: AsyncSession) -> int:
        result = await db.execute(_CLEAR_SQL, {"buyer_id": buyer_id})
        return int(result.rowcount or 0)
