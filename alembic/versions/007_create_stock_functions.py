"""007: create stock adjustment functions

Revision ID: 007
Revises: 006
Create Date: 2026-10-05

Atomic primary path of the inventory adjuster. Each function is a single
UPDATE ... RETURNING; decrement clamps at zero. Both return NULL when the
product does not exist. Dropping them puts INVENTORY_MODE=auto into its
read-modify-write fallback.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION increment_stock(p_product_id UUID, p_quantity INT)
        RETURNS INT AS $$
        DECLARE
            v_new_stock INT;
        BEGIN
            UPDATE products
               SET stock_quantity = stock_quantity + p_quantity
             WHERE id = p_product_id
            RETURNING stock_quantity INTO v_new_stock;
            RETURN v_new_stock;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE OR REPLACE FUNCTION decrement_stock(p_product_id UUID, p_quantity INT)
        RETURNS INT AS $$
        DECLARE
            v_new_stock INT;
        BEGIN
            UPDATE products
               SET stock_quantity = GREATEST(stock_quantity - p_quantity, 0)
             WHERE id = p_product_id
            RETURNING stock_quantity INTO v_new_stock;
            RETURN v_new_stock;
        END;
        $$ LANGUAGE plpgsql;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS decrement_stock(UUID, INT);")
    op.execute("DROP FUNCTION IF EXISTS increment_stock(UUID, INT);")
