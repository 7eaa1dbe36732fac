"""Pydantic response schemas for yp_wallet API."""

from pydantic import BaseModel

from src.yp_common.cents import cents_to_display


class BalanceResponse(BaseModel):
    user_id: str
    balance_cents: int
    balance_display: str
    withdrawable_balance_cents: int
    withdrawable_balance_display: str
    total_earnings_cents: int
    total_earnings_display: str

    @classmethod
    def from_cents(
        cls,
        user_id: str,
        balance: int,
        withdrawable: int,
        total_earnings: int,
    ) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            withdrawable_balance_cents=withdrawable,
            withdrawable_balance_display=cents_to_display(withdrawable),
            total_earnings_cents=total_earnings,
            total_earnings_display=cents_to_display(total_earnings),
        )


class TransactionItem(BaseModel):
    id: int
    type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    balance_after_display: str
    description: str | None
    reference_id: str | None
    created_at: str  # ISO8601 string


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool
