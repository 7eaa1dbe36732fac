"""EarningsRepository: daily_earnings persistence (append-only).

(user_product_id, earning_date) is UNIQUE in the schema: a second insert for
the same position and day fails instead of duplicating the record.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.errors import InternalError
from src.yp_earnings.domain.models import DailySummary, EarningRecord

_INSERT_EARNING_SQL = text("""
    INSERT INTO daily_earnings (user_id, user_product_id, amount, earning_date)
    VALUES (:user_id, :user_product_id, :amount, :earning_date)
    RETURNING id, user_id, user_product_id, amount, earning_date, created_at
""")

_LIST_BY_USER_SQL = text("""
    SELECT id, user_id, user_product_id, amount, earning_date, created_at
    FROM daily_earnings
    WHERE user_id = :user_id
      AND (
          CAST(:cursor_date AS DATE) IS NULL
          OR (earning_date, id) < (CAST(:cursor_date AS DATE), CAST(:cursor_id AS BIGINT))
      )
    ORDER BY earning_date DESC, id DESC
    LIMIT :limit
""")

_USER_TOTALS_SQL = text("""
    SELECT COALESCE(SUM(amount), 0) AS total_amount,
           COUNT(DISTINCT earning_date) AS days_credited
    FROM daily_earnings
    WHERE user_id = :user_id
""")

_DAILY_SUMMARY_SQL = text("""
    SELECT COUNT(*) AS records,
           COUNT(DISTINCT user_id) AS users,
           COALESCE(SUM(amount), 0) AS total_amount
    FROM daily_earnings
    WHERE earning_date = :earning_date
""")


def _row_to_earning(row: object) -> EarningRecord:
    return EarningRecord(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        user_product_id=str(row.user_product_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        earning_date=row.earning_date,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class EarningsRepository:
    async def insert_earning(
        self,
        db: AsyncSession,
        user_id: str,
        position_id: str,
        amount: int,
        earning_date: date,
    ) -> EarningRecord:
        result = await db.execute(
            _INSERT_EARNING_SQL,
            {
                "user_id": user_id,
                "user_product_id": position_id,
                "amount": amount,
                "earning_date": earning_date,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Earning insert returned no rows")
        return _row_to_earning(row)

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: tuple[date, int] | None,
        limit: int,
    ) -> list[EarningRecord]:
        """Newest earning_date first; cursor is the (earning_date, id) of the last row seen."""
        cursor_date, cursor_id = cursor if cursor else (None, None)
        result = await db.execute(
            _LIST_BY_USER_SQL,
            {
                "user_id": user_id,
                "cursor_date": cursor_date,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_earning(row) for row in result.fetchall()]

    async def user_totals(self, db: AsyncSession, user_id: str) -> tuple[int, int]:
        """Return (total_amount_cents, days_credited) for one user."""
        row = (await db.execute(_USER_TOTALS_SQL, {"user_id": user_id})).fetchone()
        if row is None:
            return 0, 0
        return int(row.total_amount), int(row.days_credited)

    async def daily_summary(self, db: AsyncSession, earning_date: date) -> DailySummary:
        row = (
            await db.execute(_DAILY_SUMMARY_SQL, {"earning_date": earning_date})
        ).fetchone()
        if row is None:
            return DailySummary(earning_date=earning_date)
        return DailySummary(
            earning_date=earning_date,
            records=int(row.records),
            users=int(row.users),
            total_amount=int(row.total_amount),
        )
