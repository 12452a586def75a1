"""005: create settlements table

Revision ID: 005
Revises: 004
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE settlements (
            id                      UUID            PRIMARY KEY,
            order_id                UUID            NOT NULL REFERENCES orders(id),
            seller_id               VARCHAR(64)     NOT NULL,
            order_amount            BIGINT          NOT NULL,
            platform_fee_rate       NUMERIC(6, 4)   NOT NULL,
            platform_fee            BIGINT          NOT NULL,
            seller_amount           BIGINT          NOT NULL,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'pending',
            scheduled_payout_at     TIMESTAMPTZ     NOT NULL,
            completed_at            TIMESTAMPTZ,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_settlements_order UNIQUE (order_id),
            CONSTRAINT ck_settlements_split CHECK (platform_fee + seller_amount = order_amount),
            CONSTRAINT ck_settlements_fee_gte_0 CHECK (platform_fee >= 0),
            CONSTRAINT ck_settlements_rate CHECK (platform_fee_rate >= 0 AND platform_fee_rate <= 1),
            CONSTRAINT ck_settlements_status CHECK (status IN ('pending', 'completed'))
        )
    """)
    op.execute("CREATE INDEX idx_settlements_seller ON settlements (seller_id, status)")
    op.execute(
        "CREATE INDEX idx_settlements_payout ON settlements (scheduled_payout_at) "
        "WHERE status = 'pending'"
    )
    op.execute("""
        CREATE TRIGGER trg_settlements_updated_at
            BEFORE UPDATE ON settlements
            FOR EACH ROW EXECUTE FUNCTION wm_touch_updated_at()
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS settlements CASCADE")
