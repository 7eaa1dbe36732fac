"""WalletApplicationService: read side of the wallet.

Balance mutations are not exposed here: they happen inside the purchase and
accrual workflows, which own their transactions.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.cents import cents_to_display
from src.yp_common.errors import WalletNotFoundError
from src.yp_common.pagination import cursor_decode, cursor_encode
from src.yp_wallet.application.schemas import (
    BalanceResponse,
    TransactionItem,
    TransactionListResponse,
)
from src.yp_wallet.domain.repository import WalletRepositoryProtocol
from src.yp_wallet.infrastructure.persistence import WalletRepository


class WalletApplicationService:
    def __init__(self, repo: WalletRepositoryProtocol | None = None) -> None:
        self._repo: WalletRepositoryProtocol = repo or WalletRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        wallet = await self._repo.get_wallet(db, user_id)
        if wallet is None:
            raise WalletNotFoundError(user_id)
        return BalanceResponse.from_cents(
            user_id=user_id,
            balance=wallet.balance,
            withdrawable=wallet.withdrawable_balance,
            total_earnings=wallet.total_earnings,
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        tx_type: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = await self._repo.list_transactions(db, user_id, cursor_id, limit + 1, tx_type)
        has_more = len(rows) > limit
        page = rows[:limit]

        items = [
            TransactionItem(
                id=t.id,
                type=t.type,
                amount_cents=t.amount,
                amount_display=cents_to_display(t.amount),
                balance_after_cents=t.balance_after,
                balance_after_display=cents_to_display(t.balance_after),
                description=t.description,
                reference_id=t.reference_id,
                created_at=t.created_at.isoformat() if t.created_at else "",
            )
            for t in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(items=items, next_cursor=next_cursor, has_more=has_more)
