"""Repository and lock Protocols for the accrual engine."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_earnings.domain.models import DailySummary, EarningRecord


class EarningsRepositoryProtocol(Protocol):
    async def insert_earning(
        self,
        db: AsyncSession,
        user_id: str,
        position_id: str,
        amount: int,
        earning_date: date,
    ) -> EarningRecord: ...

    async def list_by_user(
        self, db: AsyncSession, user_id: str, cursor: tuple[date, int] | None, limit: int
    ) -> list[EarningRecord]: ...

    async def user_totals(self, db: AsyncSession, user_id: str) -> tuple[int, int]: ...

    async def daily_summary(self, db: AsyncSession, earning_date: date) -> DailySummary: ...


class RunLockProtocol(Protocol):
    async def acquire(self, key: str) -> str | None: ...

    async def release(self, key: str, token: str) -> None: ...
