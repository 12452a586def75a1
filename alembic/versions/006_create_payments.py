"""006: create payments table

Revision ID: 006
Revises: 005
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE payments (
            id              UUID            PRIMARY KEY,
            order_id        UUID            NOT NULL REFERENCES orders(id),
            settlement_id   UUID            NOT NULL REFERENCES settlements(id),
            payment_key     VARCHAR(200),
            method          VARCHAR(50)     NOT NULL DEFAULT 'card',
            amount          BIGINT          NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'paid',
            paid_at         TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_payments_amount_gte_0 CHECK (amount >= 0),
            CONSTRAINT ck_payments_status CHECK (status IN ('paid'))
        )
    """)
    op.execute("CREATE INDEX idx_payments_order ON payments (order_id, created_at)")
    op.execute("CREATE INDEX idx_payments_payment_key ON payments (payment_key)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payments CASCADE")
