"""Domain models for yp_earnings: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class EarningRecord:
    id: int                  # BIGSERIAL
    user_id: str
    user_product_id: str
    amount: int              # cents
    earning_date: date
    created_at: datetime | None = None


@dataclass
class PositionOutcome:
    """What happened to one position during a batch run."""
    position_id: str
    processed: bool = False
    deactivated: bool = False
    errors: list[str] = field(default_factory=list)


@dataclass
class DailySummary:
    earning_date: date
    records: int = 0
    users: int = 0
    total_amount: int = 0    # cents
