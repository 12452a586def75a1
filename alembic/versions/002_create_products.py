"""002: create products table

Revision ID: 002
Revises: 001
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              UUID            PRIMARY KEY,
            seller_id       VARCHAR(64)     NOT NULL,
            name            VARCHAR(200)    NOT NULL,
            price           BIGINT          NOT NULL,
            stock_quantity  INT             NOT NULL DEFAULT 0,
            shipping_fee    BIGINT          NOT NULL DEFAULT 0,
            moq             INT             NOT NULL DEFAULT 1,
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gte_0        CHECK (price >= 0),
            CONSTRAINT ck_products_stock_gte_0        CHECK (stock_quantity >= 0),
            CONSTRAINT ck_products_moq_gte_1          CHECK (moq >= 1),
            CONSTRAINT ck_products_shipping_fee_gte_0 CHECK (shipping_fee >= 0)
        )
    """)
    op.execute("CREATE INDEX idx_products_seller ON products (seller_id)")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION wm_touch_updated_at()
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE")
