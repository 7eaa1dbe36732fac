"""Ledger Writer: earning record + transaction record for one accrual.

Best-effort mode (default): each insert is committed on its own. A failed
insert is rolled back, logged, and returned as an error string; the wallet
credit that came before it stays committed.

Strict mode (best_effort=False): nothing is committed or caught here. The
caller owns one transaction spanning position update, credit, and ledger.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.enums import TransactionType
from src.yp_earnings.domain.repository import EarningsRepositoryProtocol
from src.yp_product.domain.models import Position
from src.yp_wallet.domain.repository import WalletRepositoryProtocol

logger = logging.getLogger(__name__)

EARNING_DESCRIPTION = "Daily earnings from product investment"


def error_message(exc: BaseException) -> str:
    """AppError carries a clean message; everything else falls back to str()."""
    message = getattr(exc, "message", None)
    return str(message) if message else str(exc) or exc.__class__.__name__


class EarningsLedgerWriter:
    def __init__(
        self,
        earnings: EarningsRepositoryProtocol,
        wallets: WalletRepositoryProtocol,
    ) -> None:
        self._earnings = earnings
        self._wallets = wallets

    async def write(
        self,
        db: AsyncSession,
        position: Position,
        earning_date: date,
        balance_after: int,
        best_effort: bool = True,
    ) -> list[str]:
        if not best_effort:
            await self._insert_earning(db, position, earning_date)
            await self._insert_transaction(db, position, balance_after)
            return []

        errors: list[str] = []
        try:
            await self._insert_earning(db, position, earning_date)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(
                "Error creating daily earnings record for user %s: %s",
                position.user_id, e,
            )
            errors.append(f"Daily earnings {position.id}: {error_message(e)}")

        try:
            await self._insert_transaction(db, position, balance_after)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(
                "Error creating transaction for user %s: %s", position.user_id, e
            )
            errors.append(f"Transaction {position.id}: {error_message(e)}")
        return errors

    async def _insert_earning(
        self, db: AsyncSession, position: Position, earning_date: date
    ) -> None:
        await self._earnings.insert_earning(
            db,
            user_id=position.user_id,
            position_id=position.id,
            amount=position.daily_earning,
            earning_date=earning_date,
        )

    async def _insert_transaction(
        self, db: AsyncSession, position: Position, balance_after: int
    ) -> None:
        await self._wallets.insert_transaction(
            db,
            user_id=position.user_id,
            tx_type=TransactionType.EARNING.value,
            amount=position.daily_earning,
            balance_after=balance_after,
            description=EARNING_DESCRIPTION,
            reference_id=position.id,
        )
