"""Position Accrual Processor: one position, one day.

Order of steps:
  1-3. Position.accrue(today) computes the transition (pure)
  4.   persist the position (last_earning_date = today)
  5.   credit daily_earning to the owner's wallet
  6.   write earning + transaction records

Default mode commits after step 4 and again after step 5, so a position is
marked done for the day before its credit lands. A failure in 4 or 5 is
reported and ends this position's processing; a failure in 6 is reported but
the position still counts as processed.

Atomic mode runs 4-6 in one transaction: any failure rolls all of them back
and the position is picked up again by the next run.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_earnings.application.ledger_writer import EarningsLedgerWriter, error_message
from src.yp_earnings.domain.models import PositionOutcome
from src.yp_product.domain.models import Position
from src.yp_product.domain.repository import PositionRepositoryProtocol
from src.yp_wallet.domain.repository import WalletRepositoryProtocol

logger = logging.getLogger(__name__)


class PositionAccrualProcessor:
    def __init__(
        self,
        positions: PositionRepositoryProtocol,
        wallets: WalletRepositoryProtocol,
        ledger_writer: EarningsLedgerWriter,
        atomic: bool = False,
    ) -> None:
        self._positions = positions
        self._wallets = wallets
        self._ledger = ledger_writer
        self._atomic = atomic

    async def process(
        self, db: AsyncSession, position: Position, today: date
    ) -> PositionOutcome:
        logger.info("Processing product %s for user %s", position.id, position.user_id)
        if self._atomic:
            return await self._process_atomic(db, position, today)
        return await self._process_stepwise(db, position, today)

    async def _process_stepwise(
        self, db: AsyncSession, position: Position, today: date
    ) -> PositionOutcome:
        outcome = PositionOutcome(position_id=position.id)

        try:
            transition = position.accrue(today)
            await self._positions.update_after_accrual(db, transition)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Error updating product %s: %s", position.id, e)
            outcome.errors.append(f"Product {position.id}: {error_message(e)}")
            return outcome

        try:
            wallet = await self._wallets.credit(
                db, position.user_id, transition.amount, is_earning=True
            )
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Error updating balance for user %s: %s", position.user_id, e)
            outcome.errors.append(
                f"Product {position.id}: user {position.user_id} balance: {error_message(e)}"
            )
            return outcome

        outcome.errors.extend(
            await self._ledger.write(db, position, today, wallet.balance)
        )
        return self._finish(outcome, position, transition.deactivated)

    async def _process_atomic(
        self, db: AsyncSession, position: Position, today: date
    ) -> PositionOutcome:
        outcome = PositionOutcome(position_id=position.id)
        try:
            transition = position.accrue(today)
            await self._positions.update_after_accrual(db, transition)
            wallet = await self._wallets.credit(
                db, position.user_id, transition.amount, is_earning=True
            )
            await self._ledger.write(db, position, today, wallet.balance, best_effort=False)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Error processing product %s, rolled back: %s", position.id, e)
            outcome.errors.append(f"Product {position.id}: {error_message(e)}")
            return outcome
        return self._finish(outcome, position, transition.deactivated)

    @staticmethod
    def _finish(
        outcome: PositionOutcome, position: Position, deactivated: bool
    ) -> PositionOutcome:
        outcome.processed = True
        outcome.deactivated = deactivated
        if deactivated:
            logger.info("Product %s completed and deactivated", position.id)
        logger.info("Successfully processed product %s", position.id)
        return outcome
