"""Domain models for yp_product: pure dataclasses, no SQLAlchemy dependency.

A Position is one user's purchase of a Product (table `user_products`). Its
terms (daily_earning, contract_days) are copied from the product at purchase
time so later catalogue edits never change a running contract.
"""

from dataclasses import dataclass
from datetime import date, datetime

from src.yp_common.errors import PositionNotEligibleError


@dataclass
class Product:
    id: str
    name: str
    price: int               # cents
    daily_earning: int       # cents per accrual day
    contract_days: int
    status: str              # ProductStatus value
    description: str | None = None
    created_at: datetime | None = None

    @property
    def total_return(self) -> int:
        return self.daily_earning * self.contract_days


@dataclass(frozen=True)
class AccrualTransition:
    """Result of crediting one day to a position, before it is persisted."""
    position_id: str
    days_remaining: int
    total_earned: int
    is_active: bool
    last_earning_date: date
    amount: int

    @property
    def deactivated(self) -> bool:
        return not self.is_active


@dataclass
class Position:
    id: str
    user_id: str
    product_id: str
    daily_earning: int       # cents, fixed at purchase
    contract_days: int
    days_remaining: int
    total_earned: int = 0    # cents, never decreases
    is_active: bool = True
    last_earning_date: date | None = None
    purchase_price: int = 0  # cents
    purchased_at: datetime | None = None
    expires_at: datetime | None = None

    def is_eligible(self, today: date) -> bool:
        return (
            self.is_active
            and self.days_remaining > 0
            and self.last_earning_date != today
        )

    def accrue(self, today: date) -> AccrualTransition:
        """Compute the state after one day's earning.

        Once days_remaining reaches 0 the position is terminal.
        """
        if not self.is_eligible(today):
            reason = (
                f"already credited on {today.isoformat()}"
                if self.last_earning_date == today
                else "inactive or term completed"
            )
            raise PositionNotEligibleError(self.id, reason)
        new_days_remaining = self.days_remaining - 1
        return AccrualTransition(
            position_id=self.id,
            days_remaining=new_days_remaining,
            total_earned=self.total_earned + self.daily_earning,
            is_active=new_days_remaining > 0,
            last_earning_date=today,
            amount=self.daily_earning,
        )
