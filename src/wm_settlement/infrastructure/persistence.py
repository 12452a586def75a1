"""SettlementRepository: raw SQL for settlements and payments.

settlements.order_id is UNIQUE; insert_settlement uses ON CONFLICT DO NOTHING
and returns None when another writer created the row first.

Transaction ownership: the CALLER commits.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.wm_settlement.domain.models import Payment, Settlement

_SETTLEMENT_COLUMNS = """
    id, order_id, seller_id, order_amount, platform_fee_rate, platform_fee,
    seller_amount, status, scheduled_payout_at, completed_at, created_at
"""

_PAYMENT_COLUMNS = """
    id, order_id, settlement_id, payment_key, method, amount, status, paid_at, created_at
"""

_GET_SETTLEMENT_BY_ORDER_SQL = text(f"""
    SELECT {_SETTLEMENT_COLUMNS}
    FROM settlements WHERE order_id = CAST(:order_id AS UUID)
""")

_INSERT_SETTLEMENT_SQL = text(f"""
    INSERT INTO settlements
        (id, order_id, seller_id, order_amount, platform_fee_rate, platform_fee,
         seller_amount, status, scheduled_payout_at)
    VALUES
        (CAST(:id AS UUID), CAST(:order_id AS UUID), :seller_id, :order_amount,
         :platform_fee_rate, :platform_fee, :seller_amount, :status, :scheduled_payout_at)
    ON CONFLICT (order_id) DO NOTHING
    RETURNING {_SETTLEMENT_COLUMNS}
""")

_GET_PAYMENT_BY_ORDER_SQL = text(f"""
    SELECT {_PAYMENT_COLUMNS}
    FROM payments WHERE order_id = CAST(:order_id AS UUID)
    ORDER BY created_at
    LIMIT 1
""")

_INSERT_PAYMENT_SQL = text(f"""
    INSERT INTO payments
        (id, order_id, settlement_id, payment_key, method, amount, status, paid_at)
    VALUES
        (CAST(:id AS UUID), CAST(:order_id AS UUID), CAST(:settlement_id AS UUID),
         :payment_key, :method, :amount, :status, :paid_at)
    RETURNING {_PAYMENT_COLUMNS}
""")


def _row_to_settlement(row: Any) -> Settlement:
    return Settlement(
        id=str(row.id),
        order_id=str(row.order_id),
        seller_id=row.seller_id,
        order_amount=row.order_amount,
        platform_fee_rate=row.platform_fee_rate,
        platform_fee=row.platform_fee,
        seller_amount=row.seller_amount,
        status=row.status,
        scheduled_payout_at=row.scheduled_payout_at,
        completed_at=row.completed_at,
        created_at=row.created_at,
    )


def _row_to_payment(row: Any) -> Payment:
    return Payment(
        id=str(row.id),
        order_id=str(row.order_id),
        settlement_id=str(row.settlement_id),
        payment_key=row.payment_key,
        method=row.method,
        amount=row.amount,
        status=row.status,
        paid_at=row.paid_at,
        created_at=row.created_at,
    )


class SettlementRepository:
    async def get_by_order_id(self, order_id: str, db: AsyncSession) -> Settlement | None:
        result = await db.execute(_GET_SETTLEMENT_BY_ORDER_SQL, {"order_id": order_id})
        row = result.fetchone()
        return _row_to_settlement(row) if row else None

    async def insert_settlement(
        self, settlement: Settlement, db: AsyncSession
    ) -> Settlement | None:
        result = await db.execute(
            _INSERT_SETTLEMENT_SQL,
            {
                "id": settlement.id,
                "order_id": settlement.order_id,
                "seller_id": settlement.seller_id,
                "order_amount": settlement.order_amount,
                "platform_fee_rate": settlement.platform_fee_rate,
                "platform_fee": settlement.platform_fee,
                "seller_amount": settlement.seller_amount,
                "status": settlement.status,
                "scheduled_payout_at": settlement.scheduled_payout_at,
            },
        )
        row = result.fetchone()
        return _row_to_settlement(row) if row else None

    async def get_payment_by_order_id(self, order_id: str, db: AsyncSession) -> Payment | None:
        result = await db.execute(_GET_PAYMENT_BY_ORDER_SQL, {"order_id": order_id})
        row = result.fetchone()
        return _row_to_payment(row) if row else None

    async def insert_payment(self, payment: Payment, db: AsyncSession) -> Payment:
        result = await db.execute(
            _INSERT_PAYMENT_SQL,
            {
                "id": payment.id,
                "order_id": payment.order_id,
                "settlement_id": payment.settlement_id,
                "payment_key": payment.payment_key,
                "method": payment.method,
                "amount": payment.amount,
                "status": payment.status,
                "paid_at": payment.paid_at,
            },
        )
        return _row_to_payment(result.fetchone())
