"""006: create transactions table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              BIGSERIAL    PRIMARY KEY,
            user_id         VARCHAR(64)  NOT NULL,
            type            VARCHAR(20)  NOT NULL,
            amount          BIGINT       NOT NULL,
            balance_after   BIGINT       NOT NULL,
            description     VARCHAR(500),
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type CHECK (
                type IN (
                    'recharge', 'withdrawal', 'purchase',
                    'earning', 'referral', 'lucky_draw'
                )
            ),
            CONSTRAINT ck_transactions_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_user_time ON transactions (user_id, created_at DESC);")
    op.execute("""
        CREATE INDEX idx_transactions_reference
        ON transactions (reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Wallet history: Append-Only, amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
