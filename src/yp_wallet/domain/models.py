"""Domain models for yp_wallet: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Wallet:
    user_id: str
    balance: int                 # cents
    withdrawable_balance: int    # cents, the part of balance the user may withdraw
    total_earnings: int = 0      # cents, lifetime accrual credits
    updated_at: datetime | None = None


@dataclass
class Transaction:
    id: int                      # BIGSERIAL
    user_id: str
    type: str                    # TransactionType value
    amount: int                  # cents, positive=income negative=expense
    balance_after: int           # cents, wallet balance snapshot after op
    description: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None
