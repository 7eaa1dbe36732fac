"""DailyAccrualService: the daily earnings batch.

    IDLE → SCANNING → PROCESSING → REPORTING → IDLE

The only state carried between runs is each position's last_earning_date,
so running twice on the same day credits nothing the second time.

A failed scan aborts the run with zero counts. Per-position failures are
collected and never stop the loop. When the run deadline passes, the loop
stops between positions; whatever is left stays eligible for the next run.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.yp_common.datetime_utils import utc_today
from src.yp_common.enums import AccrualPhase
from src.yp_common.errors import AccrualAlreadyRunningError, AccrualScanError
from src.yp_earnings.application.ledger_writer import EarningsLedgerWriter, error_message
from src.yp_earnings.application.processor import PositionAccrualProcessor
from src.yp_earnings.application.schemas import AccrualReport
from src.yp_earnings.domain.repository import EarningsRepositoryProtocol, RunLockProtocol
from src.yp_earnings.infrastructure.earnings_repository import EarningsRepository
from src.yp_earnings.infrastructure.run_lock import accrual_lock_key
from src.yp_product.domain.models import Position
from src.yp_product.domain.repository import PositionRepositoryProtocol
from src.yp_product.infrastructure.position_repository import PositionRepository
from src.yp_wallet.domain.repository import WalletRepositoryProtocol
from src.yp_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


async def _release(run_lock: RunLockProtocol, key: str, token: str) -> None:
    # The lock TTL frees the key if release fails.
    try:
        await run_lock.release(key, token)
    except Exception as e:
        logger.warning("Failed to release run lock %s: %s", key, e)


@dataclass
class AccrualRun:
    """State of one run. Each call to run() gets its own instance."""
    earning_date: date
    phase: AccrualPhase = AccrualPhase.IDLE

    def enter(self, phase: AccrualPhase) -> None:
        logger.debug(
            "Accrual run %s: %s -> %s",
            self.earning_date.isoformat(), self.phase.value, phase.value,
        )
        self.phase = phase


class DailyAccrualService:
    def __init__(
        self,
        positions: PositionRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
        earnings: EarningsRepositoryProtocol | None = None,
        run_lock: RunLockProtocol | None = None,
        atomic: bool | None = None,
        max_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._positions: PositionRepositoryProtocol = positions or PositionRepository()
        wallets = wallets or WalletRepository()
        earnings = earnings or EarningsRepository()
        self._processor = PositionAccrualProcessor(
            self._positions,
            wallets,
            EarningsLedgerWriter(earnings, wallets),
            atomic=settings.ACCRUAL_ATOMIC_PER_POSITION if atomic is None else atomic,
        )
        self._run_lock = run_lock
        self._max_seconds = (
            settings.ACCRUAL_MAX_SECONDS if max_seconds is None else max_seconds
        )
        self._clock = clock

    async def run(self, db: AsyncSession, as_of: date | None = None) -> AccrualReport:
        """Accrue one day of earnings for every eligible position.

        Args:
            db: session used for every read and write of the run.
            as_of: accrual day; defaults to today's UTC date.

        Raises:
            AccrualAlreadyRunningError: another run holds the lock for as_of.
        """
        today = as_of or utc_today()
        lock_key = accrual_lock_key(today.isoformat())
        token: str | None = None
        if self._run_lock is not None:
            token = await self._run_lock.acquire(lock_key)
            if token is None:
                raise AccrualAlreadyRunningError(today.isoformat())
        run = AccrualRun(earning_date=today)
        try:
            return await self._run(db, run)
        finally:
            run.enter(AccrualPhase.IDLE)
            if self._run_lock is not None and token is not None:
                await _release(self._run_lock, lock_key, token)

    async def _run(self, db: AsyncSession, run: AccrualRun) -> AccrualReport:
        today = run.earning_date
        logger.info("Starting daily earnings calculation for %s", today.isoformat())

        run.enter(AccrualPhase.SCANNING)
        try:
            eligible = await self._scan(db, today)
        except AccrualScanError as e:
            logger.exception("Fatal error in daily earnings run")
            return AccrualReport.failed(today.isoformat(), e)

        if not eligible:
            logger.info("No active products to process")
            run.enter(AccrualPhase.REPORTING)
            return AccrualReport(
                success=True,
                message="No active products to process",
                earning_date=today.isoformat(),
            )

        logger.info("Found %d active products to process", len(eligible))
        run.enter(AccrualPhase.PROCESSING)
        processed, deactivated, errors = await self._process_all(db, eligible, today)

        run.enter(AccrualPhase.REPORTING)
        logger.info(
            "Daily earnings calculation completed. Processed: %d, Deactivated: %d, Errors: %d",
            processed, deactivated, len(errors),
        )
        return AccrualReport(
            success=not errors,
            message=f"Processed {processed} products, deactivated {deactivated}",
            earning_date=today.isoformat(),
            processed=processed,
            deactivated=deactivated,
            errors=errors,
        )

    async def _scan(self, db: AsyncSession, today: date) -> list[Position]:
        try:
            return await self._positions.select_eligible(db, today)
        except Exception as e:
            await db.rollback()
            raise AccrualScanError(error_message(e)) from e

    async def _process_all(
        self, db: AsyncSession, eligible: list[Position], today: date
    ) -> tuple[int, int, list[str]]:
        processed = 0
        deactivated = 0
        errors: list[str] = []
        started = self._clock()

        for index, position in enumerate(eligible):
            if self._clock() - started > self._max_seconds:
                remaining = len(eligible) - index
                logger.warning(
                    "Run deadline of %ss exceeded, %d products left for the next run",
                    self._max_seconds, remaining,
                )
                errors.append(
                    f"Run deadline of {self._max_seconds}s exceeded; "
                    f"{remaining} products left for the next run"
                )
                break
            try:
                outcome = await self._processor.process(db, position, today)
            except Exception as e:
                await db.rollback()
                logger.error("Error processing product %s: %s", position.id, e)
                errors.append(f"Product {position.id}: {error_message(e)}")
                continue

            errors.extend(outcome.errors)
            if outcome.processed:
                processed += 1
                if outcome.deactivated:
                    deactivated += 1
        return processed, deactivated, errors
