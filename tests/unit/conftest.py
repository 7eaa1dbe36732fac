"""In-memory ledger store for accrual property tests.

The three adapters below satisfy the position, wallet, and earnings
repository Protocols against shared dicts/lists. They apply writes
immediately (the session passed in is a mock), and mirror the guards of the
real SQL: the eligibility predicate, the guarded accrual UPDATE, and the
UNIQUE (user_product_id, earning_date) constraint.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.yp_common.errors import (
    InternalError,
    InsufficientBalanceError,
    PositionNotEligibleError,
    WalletNotFoundError,
)
from src.yp_earnings.domain.models import DailySummary, EarningRecord
from src.yp_product.domain.models import AccrualTransition, Position, Product
from src.yp_wallet.domain.models import Transaction, Wallet


@dataclass
class LedgerStore:
    positions: dict[str, Position] = field(default_factory=dict)
    wallets: dict[str, Wallet] = field(default_factory=dict)
    earnings: list[EarningRecord] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    # fault injection
    fail_scan: bool = False
    fail_update_for: set[str] = field(default_factory=set)      # position ids
    fail_credit_for: set[str] = field(default_factory=set)      # user ids
    fail_earning_insert_for: set[str] = field(default_factory=set)  # position ids
    fail_transaction_insert_for: set[str] = field(default_factory=set)  # position ids

    def add_wallet(self, user_id: str, balance: int = 0) -> Wallet:
        wallet = Wallet(user_id=user_id, balance=balance, withdrawable_balance=balance)
        self.wallets[user_id] = wallet
        return wallet

    def add_position(self, **kwargs: object) -> Position:
        defaults: dict[str, object] = {
            "id": f"pos-{len(self.positions) + 1}",
            "user_id": "user-1",
            "product_id": "prod-1",
            "daily_earning": 500,
            "contract_days": 10,
            "days_remaining": 10,
        }
        defaults.update(kwargs)
        position = Position(**defaults)  # type: ignore[arg-type]
        self.positions[position.id] = position
        if position.user_id not in self.wallets:
            self.add_wallet(position.user_id)
        return position


class FakePositionRepository:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    async def create_position(self, db: object, user_id: str, product: Product) -> Position:
        return self.store.add_position(
            user_id=user_id,
            product_id=product.id,
            daily_earning=product.daily_earning,
            contract_days=product.contract_days,
            days_remaining=product.contract_days,
            purchase_price=product.price,
        )

    async def list_by_user(self, db: object, user_id: str, active_only: bool) -> list[Position]:
        return [
            p for p in self.store.positions.values()
            if p.user_id == user_id and (p.is_active or not active_only)
        ]

    async def select_eligible(self, db: object, today: date) -> list[Position]:
        if self.store.fail_scan:
            raise ConnectionError("connection refused")
        return [
            replace(p) for p in self.store.positions.values()
            if p.is_active and p.days_remaining > 0 and p.last_earning_date != today
        ]

    async def update_after_accrual(self, db: object, transition: AccrualTransition) -> None:
        if transition.position_id in self.store.fail_update_for:
            raise InternalError("update failed")
        current = self.store.positions[transition.position_id]
        if not current.is_active or current.last_earning_date == transition.last_earning_date:
            raise PositionNotEligibleError(current.id, "already credited or inactive")
        self.store.positions[current.id] = replace(
            current,
            days_remaining=transition.days_remaining,
            total_earned=transition.total_earned,
            is_active=transition.is_active,
            last_earning_date=transition.last_earning_date,
        )


class FakeWalletRepository:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    async def get_wallet(self, db: object, user_id: str) -> Wallet | None:
        return self.store.wallets.get(user_id)

    async def credit(
        self, db: object, user_id: str, amount: int, is_earning: bool = False
    ) -> Wallet:
        if user_id in self.store.fail_credit_for:
            raise InternalError("balance update failed")
        wallet = self.store.wallets.get(user_id)
        if wallet is None:
            raise WalletNotFoundError(user_id)
        wallet.balance += amount
        wallet.withdrawable_balance += amount
        if is_earning:
            wallet.total_earnings += amount
        return replace(wallet)

    async def debit(self, db: object, user_id: str, amount: int) -> Wallet:
        wallet = self.store.wallets.get(user_id)
        if wallet is None:
            raise WalletNotFoundError(user_id)
        if wallet.balance < amount:
            raise InsufficientBalanceError(amount, wallet.balance)
        wallet.balance -= amount
        wallet.withdrawable_balance = max(wallet.withdrawable_balance - amount, 0)
        return replace(wallet)

    async def insert_transaction(
        self,
        db: object,
        user_id: str,
        tx_type: str,
        amount: int,
        balance_after: int,
        description: str | None,
        reference_id: str | None,
    ) -> Transaction:
        if reference_id in self.store.fail_transaction_insert_for:
            raise InternalError("transaction insert failed")
        tx = Transaction(
            id=len(self.store.transactions) + 1,
            user_id=user_id,
            type=tx_type,
            amount=amount,
            balance_after=balance_after,
            description=description,
            reference_id=reference_id,
        )
        self.store.transactions.append(tx)
        return tx

    async def list_transactions(
        self,
        db: object,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]:
        rows = [t for t in reversed(self.store.transactions) if t.user_id == user_id]
        return rows[:limit]


class FakeEarningsRepository:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    async def insert_earning(
        self,
        db: object,
        user_id: str,
        position_id: str,
        amount: int,
        earning_date: date,
    ) -> EarningRecord:
        if position_id in self.store.fail_earning_insert_for:
            raise InternalError("earning insert failed")
        if any(
            e.user_product_id == position_id and e.earning_date == earning_date
            for e in self.store.earnings
        ):
            raise InternalError("duplicate key value violates uq_daily_earnings_position_day")
        record = EarningRecord(
            id=len(self.store.earnings) + 1,
            user_id=user_id,
            user_product_id=position_id,
            amount=amount,
            earning_date=earning_date,
        )
        self.store.earnings.append(record)
        return record

    async def list_by_user(
        self, db: object, user_id: str, cursor: tuple[date, int] | None, limit: int
    ) -> list[EarningRecord]:
        mine = sorted(
            (e for e in self.store.earnings if e.user_id == user_id),
            key=lambda e: (e.earning_date, e.id),
            reverse=True,
        )
        if cursor is not None:
            mine = [e for e in mine if (e.earning_date, e.id) < cursor]
        return mine[:limit]

    async def user_totals(self, db: object, user_id: str) -> tuple[int, int]:
        mine = [e for e in self.store.earnings if e.user_id == user_id]
        return sum(e.amount for e in mine), len({e.earning_date for e in mine})

    async def daily_summary(self, db: object, earning_date: date) -> DailySummary:
        day = [e for e in self.store.earnings if e.earning_date == earning_date]
        return DailySummary(
            earning_date=earning_date,
            records=len(day),
            users=len({e.user_id for e in day}),
            total_amount=sum(e.amount for e in day),
        )


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore()


@pytest.fixture
def repos(store: LedgerStore) -> tuple[FakePositionRepository, FakeWalletRepository, FakeEarningsRepository]:
    return (
        FakePositionRepository(store),
        FakeWalletRepository(store),
        FakeEarningsRepository(store),
    )


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()
