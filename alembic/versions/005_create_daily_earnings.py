"""005: create daily_earnings table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE daily_earnings (
            id               BIGSERIAL   PRIMARY KEY,
            user_id          VARCHAR(64) NOT NULL,
            user_product_id  UUID        NOT NULL REFERENCES user_products (id),
            amount           BIGINT      NOT NULL,
            earning_date     DATE        NOT NULL,
            created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_daily_earnings_position_day UNIQUE (user_product_id, earning_date)
        );
    """)
    op.execute(
        "CREATE INDEX idx_daily_earnings_user ON daily_earnings (user_id, earning_date DESC);"
    )
    op.execute("CREATE INDEX idx_daily_earnings_date ON daily_earnings (earning_date);")
    op.execute("COMMENT ON TABLE daily_earnings IS 'Accrual records: Append-Only, amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS daily_earnings CASCADE;")
