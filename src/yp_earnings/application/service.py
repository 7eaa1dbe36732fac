"""EarningsApplicationService: read side of the earnings ledger."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.cents import cents_to_display
from src.yp_common.pagination import date_cursor_decode, date_cursor_encode
from src.yp_earnings.application.schemas import (
    DailySummaryResponse,
    EarningItem,
    EarningListResponse,
    EarningsSummaryResponse,
)
from src.yp_earnings.domain.repository import EarningsRepositoryProtocol
from src.yp_earnings.infrastructure.earnings_repository import EarningsRepository


class EarningsApplicationService:
    def __init__(self, repo: EarningsRepositoryProtocol | None = None) -> None:
        self._repo: EarningsRepositoryProtocol = repo or EarningsRepository()

    async def list_earnings(
        self, db: AsyncSession, user_id: str, cursor: str | None, limit: int
    ) -> EarningListResponse:
        after = date_cursor_decode(cursor)
        records = await self._repo.list_by_user(db, user_id, after, limit + 1)
        has_more = len(records) > limit
        page = records[:limit]
        items = [
            EarningItem(
                id=r.id,
                user_product_id=r.user_product_id,
                amount_cents=r.amount,
                amount_display=cents_to_display(r.amount),
                earning_date=r.earning_date.isoformat(),
                created_at=r.created_at.isoformat() if r.created_at else "",
            )
            for r in page
        ]
        next_cursor = (
            date_cursor_encode(page[-1].earning_date, page[-1].id) if has_more and page else None
        )
        return EarningListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_summary(self, db: AsyncSession, user_id: str) -> EarningsSummaryResponse:
        total, days = await self._repo.user_totals(db, user_id)
        return EarningsSummaryResponse(
            user_id=user_id,
            total_cents=total,
            total_display=cents_to_display(total),
            days_credited=days,
        )

    async def get_daily_summary(
        self, db: AsyncSession, earning_date: date
    ) -> DailySummaryResponse:
        summary = await self._repo.daily_summary(db, earning_date)
        return DailySummaryResponse.from_domain(summary)
