"""WalletRepository: concrete implementation of WalletRepositoryProtocol.

Every balance mutation in the platform goes through credit()/debit(): one
atomic UPDATE ... RETURNING, never a read-then-write in application code, so
concurrent credits for the same user cannot lose updates.
A result of 0 rows means the wallet is missing or a guard was violated.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.errors import InsufficientBalanceError, InternalError, WalletNotFoundError
from src.yp_wallet.domain.models import Transaction, Wallet

# ---------------------------------------------------------------------------
# SQL: wallets mutations
# ---------------------------------------------------------------------------

_CREDIT_SQL = text("""
    UPDATE wallets
    SET balance              = balance + :amount,
        withdrawable_balance = withdrawable_balance + :amount,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING user_id, balance, withdrawable_balance, total_earnings, updated_at
""")

_CREDIT_EARNING_SQL = text("""
    UPDATE wallets
    SET balance              = balance + :amount,
        withdrawable_balance = withdrawable_balance + :amount,
        total_earnings       = total_earnings + :amount,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING user_id, balance, withdrawable_balance, total_earnings, updated_at
""")

_DEBIT_SQL = text("""
    UPDATE wallets
    SET balance              = balance - :amount,
        withdrawable_balance = GREATEST(withdrawable_balance - :amount, 0),
        updated_at = NOW()
    WHERE user_id = :user_id AND balance >= :amount
    RETURNING user_id, balance, withdrawable_balance, total_earnings, updated_at
""")

_GET_WALLET_SQL = text("""
    SELECT user_id, balance, withdrawable_balance, total_earnings, updated_at
    FROM wallets
    WHERE user_id = :user_id
""")

# ---------------------------------------------------------------------------
# SQL: transactions (append-only)
# ---------------------------------------------------------------------------

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (user_id, type, amount, balance_after, description, reference_id)
    VALUES
        (:user_id, :type, :amount, :balance_after, :description, :reference_id)
    RETURNING id, user_id, type, amount, balance_after,
              description, reference_id, created_at
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT id, user_id, type, amount, balance_after,
           description, reference_id, created_at
    FROM transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < :cursor_id)
      AND (CAST(:tx_type AS VARCHAR) IS NULL OR type = :tx_type)
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_wallet(row: object) -> Wallet:
    return Wallet(
        user_id=row.user_id,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        withdrawable_balance=row.withdrawable_balance,  # type: ignore[attr-defined]
        total_earnings=row.total_earnings,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class WalletRepository:
    """Concrete repository: all balance operations atomic at the SQL level."""

    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None:
        result = await db.execute(_GET_WALLET_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def credit(
        self, db: AsyncSession, user_id: str, amount: int, is_earning: bool = False
    ) -> Wallet:
        """Add a signed amount to balance and withdrawable_balance; return the new wallet."""
        sql = _CREDIT_EARNING_SQL if is_earning else _CREDIT_SQL
        result = await db.execute(sql, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise WalletNotFoundError(user_id)
        return _row_to_wallet(row)

    async def debit(self, db: AsyncSession, user_id: str, amount: int) -> Wallet:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            wallet = await self.get_wallet(db, user_id)
            if wallet is None:
                raise WalletNotFoundError(user_id)
            raise InsufficientBalanceError(amount, wallet.balance)
        return _row_to_wallet(row)

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str,
        amount: int,
        balance_after: int,
        description: str | None,
        reference_id: str | None,
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": user_id,
                "type": tx_type,
                "amount": amount,
                "balance_after": balance_after,
                "description": description,
                "reference_id": reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_transaction(row)

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "tx_type": tx_type,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]
