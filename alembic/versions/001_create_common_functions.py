"""001: shared trigger function for updated_at columns

Revision ID: 001
Revises:
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # A no-op UPDATE (same row values) keeps its previous updated_at.
    op.execute("""
        CREATE OR REPLACE FUNCTION wm_touch_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            IF ROW(NEW.*) IS DISTINCT FROM ROW(OLD.*) THEN
                NEW.updated_at := NOW();
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS wm_touch_updated_at();")
