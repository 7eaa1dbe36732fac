"""003: create products table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              UUID         PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(200) NOT NULL,
            description     TEXT,
            price           BIGINT       NOT NULL,
            daily_earning   BIGINT       NOT NULL,
            contract_days   INTEGER      NOT NULL,
            status          VARCHAR(20)  NOT NULL DEFAULT 'active',
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gt_0          CHECK (price > 0),
            CONSTRAINT ck_products_daily_earning_gte_0 CHECK (daily_earning >= 0),
            CONSTRAINT ck_products_contract_days_gt_0  CHECK (contract_days > 0),
            CONSTRAINT ck_products_status CHECK (status IN ('active', 'inactive'))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
