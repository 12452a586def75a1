"""003: create cart_items table

Revision ID: 003
Revises: 002
Create Date: 2026-10-05

NULLS NOT DISTINCT (PostgreSQL 15+) makes a NULL variant_id count as a
value, so the ON CONFLICT merge also applies to items without a variant.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE cart_items (
            id          UUID            PRIMARY KEY,
            buyer_id    VARCHAR(64)     NOT NULL,
            product_id  UUID            NOT NULL REFERENCES products(id) ON DELETE CASCADE,
            variant_id  UUID,
            quantity    INT             NOT NULL,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_cart_items_quantity_gt_0 CHECK (quantity > 0),
            CONSTRAINT uq_cart_items_buyer_product_variant
                UNIQUE NULLS NOT DISTINCT (buyer_id, product_id, variant_id)
        )
    """)
    op.execute("CREATE INDEX idx_cart_items_buyer ON cart_items (buyer_id, created_at DESC)")
    op.execute("""
        CREATE TRIGGER trg_cart_items_updated_at
            BEFORE UPDATE ON cart_items
            FOR EACH ROW EXECUTE FUNCTION wm_touch_updated_at()
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS cart_items CASCADE")
