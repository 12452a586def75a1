"""004: create orders table

Revision ID: 004
Revises: 003
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                  UUID            PRIMARY KEY,
            order_number        VARCHAR(64)     NOT NULL,
            order_group_id      VARCHAR(64)     NOT NULL,
            buyer_id            VARCHAR(64)     NOT NULL,
            seller_id           VARCHAR(64)     NOT NULL,
            product_id          UUID            NOT NULL REFERENCES products(id),
            quantity            INT             NOT NULL,
            unit_price          BIGINT          NOT NULL,
            shipping_fee        BIGINT          NOT NULL DEFAULT 0,
            total_amount        BIGINT          NOT NULL,
            delivery_address    TEXT            NOT NULL DEFAULT '',
            delivery_option     VARCHAR(10)     NOT NULL DEFAULT 'normal',
            delivery_time       VARCHAR(64),
            delivery_note       TEXT,
            payment_key         VARCHAR(200),
            paid_at             TIMESTAMPTZ,
            status              VARCHAR(20)     NOT NULL DEFAULT 'pending',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_order_number UNIQUE (order_number),
            CONSTRAINT ck_orders_quantity_gt_0 CHECK (quantity > 0),
            CONSTRAINT ck_orders_total CHECK (total_amount = unit_price * quantity + shipping_fee),
            CONSTRAINT ck_orders_status CHECK (
                status IN ('pending', 'confirmed', 'shipped', 'completed', 'cancelled')
            ),
            CONSTRAINT ck_orders_delivery_option CHECK (delivery_option IN ('dawn', 'normal'))
        )
    """)
    op.execute("CREATE INDEX idx_orders_payment_key ON orders (payment_key)")
    op.execute("CREATE INDEX idx_orders_group ON orders (order_group_id)")
    op.execute("CREATE INDEX idx_orders_buyer ON orders (buyer_id, created_at DESC, id DESC)")
    op.execute("CREATE INDEX idx_orders_seller ON orders (seller_id, status)")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION wm_touch_updated_at()
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE")
