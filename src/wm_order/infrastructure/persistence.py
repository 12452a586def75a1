# src/wm_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence implementation.

Transaction ownership: the CALLER commits.
"""
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_order.domain.models import Order

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, order_number, order_group_id, buyer_id, seller_id, product_id,
    quantity, unit_price, shipping_fee, total_amount,
    delivery_address, delivery_option, delivery_time, delivery_note,
    payment_key, paid_at, status, created_at, updated_at
"""

# order_number is UNIQUE: a duplicate insert (retried saga step) is a no-op
_INSERT_ORDER_SQL = text(f"""
    INSERT INTO orders (id, order_number, order_group_id, buyer_id, seller_id,
        product_id, quantity, unit_price, shipping_fee, total_amount,
        delivery_address, delivery_option, delivery_time, delivery_note,
        payment_key, paid_at, status)
    VALUES (CAST(:id AS UUID), :order_number, :order_group_id, :buyer_id, :seller_id,
        CAST(:product_id AS UUID), :quantity, :unit_price, :shipping_fee, :total_amount,
        :delivery_address, :delivery_option, :delivery_time, :delivery_note,
        :payment_key, :paid_at, :status)
    ON CONFLICT (order_number) DO NOTHING
    RETURNING {_SELECT_COLUMNS}
""")

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = CAST(:id AS UUID)
""")

_GET_ORDER_BY_NUMBER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE order_number = :order_number
""")

# Numbers share the group prefix: length first keeps -10 after -9
_LIST_BY_PAYMENT_KEY_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE payment_key = :payment_key
    ORDER BY length(order_number), order_number
""")

# Compare-and-set: only moves the row if it is still in an allowed source status
_TRANSITION_STATUS_SQL = text(f"""
    UPDATE orders
    SET status = :to_status, updated_at = NOW()
    WHERE id = CAST(:id AS UUID) AND status IN :from_statuses
    RETURNING {_SELECT_COLUMNS}
""").bindparams(bindparam("from_statuses", expanding=True))

_LIST_BY_BUYER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE buyer_id = :buyer_id
      AND (CAST(:statuses_csv AS TEXT) IS NULL
           OR status = ANY(string_to_array(CAST(:statuses_csv AS TEXT), ',')))
      AND (CAST(:cursor_id AS TEXT) IS NULL
           OR (created_at, id) < (
               SELECT created_at, id FROM orders WHERE id = CAST(:cursor_id AS UUID)))
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    order = Order(
        id=str(row.id),
        order_number=row.order_number,
        order_group_id=row.order_group_id,
        buyer_id=row.buyer_id,
        seller_id=row.seller_id,
        product_id=str(row.product_id),
        quantity=row.quantity,
        unit_price=row.unit_price,
        shipping_fee=row.shipping_fee,
        delivery_address=row.delivery_address,
        delivery_option=row.delivery_option,
        delivery_time=row.delivery_time,
        delivery_note=row.delivery_note,
        payment_key=row.payment_key,
        paid_at=row.paid_at,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
    # Stored value is authoritative (CHECK constraint keeps it consistent)
    order.total_amount = row.total_amount
    return order


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def insert(self, order: Order, db: AsyncSession) -> Order:
        """Insert, or return the already-stored row with the same order_number."""
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "order_number": order.order_number,
                "order_group_id": order.order_group_id,
                "buyer_id": order.buyer_id,
                "seller_id": order.seller_id,
                "product_id": order.product_id,
                "quantity": order.quantity,
                "unit_price": order.unit_price,
                "shipping_fee": order.shipping_fee,
                "total_amount": order.total_amount,
                "delivery_address": order.delivery_address,
                "delivery_option": order.delivery_option,
                "delivery_time": order.delivery_time,
                "delivery_note": order.delivery_note,
                "payment_key": order.payment_key,
                "paid_at": order.paid_at,
                "status": order.status,
            },
        )
        row = result.fetchone()
        if row is None:
            existing = await db.execute(
                _GET_ORDER_BY_NUMBER_SQL, {"order_number": order.order_number}
            )
            row = existing.fetchone()
        return _row_to_order(row)

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_by_payment_key(self, payment_key: str, db: AsyncSession) -> list[Order]:
        result = await db.execute(_LIST_BY_PAYMENT_KEY_SQL, {"payment_key": payment_key})
        return [_row_to_order(row) for row in result.fetchall()]

    async def transition_status(
        self, order_id: str, from_statuses: list[str], to_status: str, db: AsyncSession
    ) -> Order | None:
        """Returns the updated order, or None if the status guard did not match."""
        result = await db.execute(
            _TRANSITION_STATUS_SQL,
            {"id": order_id, "from_statuses": from_statuses, "to_status": to_status},
        )
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_by_buyer(
        self,
        buyer_id: str,
        statuses: list[str] | None,
        limit: int,
        cursor_id: str | None,
        db: AsyncSession,
    ) -> list[Order]:
        statuses_csv = ",".join(statuses) if statuses else None
        result = await db.execute(
            _LIST_BY_BUYER_SQL,
            {
                "buyer_id": buyer_id,
                "statuses_csv": statuses_csv,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_order(row) for row in result.fetchall()]
