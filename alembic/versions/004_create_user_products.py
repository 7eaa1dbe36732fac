"""004: create user_products table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE user_products (
            id                 UUID        PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id            VARCHAR(64) NOT NULL REFERENCES wallets (user_id),
            product_id         UUID        NOT NULL REFERENCES products (id),
            purchase_price     BIGINT      NOT NULL,
            daily_earning      BIGINT      NOT NULL,
            contract_days      INTEGER     NOT NULL,
            days_remaining     INTEGER     NOT NULL,
            total_earned       BIGINT      NOT NULL DEFAULT 0,
            is_active          BOOLEAN     NOT NULL DEFAULT TRUE,
            last_earning_date  DATE,
            purchased_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            expires_at         TIMESTAMPTZ,
            CONSTRAINT ck_user_products_days_remaining_gte_0 CHECK (days_remaining >= 0),
            CONSTRAINT ck_user_products_total_earned_gte_0   CHECK (total_earned >= 0),
            CONSTRAINT ck_user_products_active_has_days
                CHECK (NOT is_active OR days_remaining > 0)
        );
    """)
    # Accrual scan: active positions with term left
    op.execute("""
        CREATE INDEX idx_user_products_accrual
        ON user_products (last_earning_date)
        WHERE is_active = TRUE AND days_remaining > 0;
    """)
    op.execute(
        "CREATE INDEX idx_user_products_user ON user_products (user_id, purchased_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_products CASCADE;")
