"""Pydantic schemas for yp_earnings API."""

from pydantic import BaseModel, Field

from src.yp_common.cents import cents_to_display
from src.yp_common.errors import AppError
from src.yp_earnings.domain.models import DailySummary

HTTP_OK = 200
HTTP_MULTI_STATUS = 207
HTTP_INTERNAL_ERROR = 500


class AccrualReport(BaseModel):
    """Result of one batch run, as shown to the admin who triggered it."""
    success: bool
    message: str
    earning_date: str                  # YYYY-MM-DD
    processed: int = 0
    deactivated: int = 0
    errors: list[str] = Field(default_factory=list)
    fatal: bool = False
    error_code: int = 0                # AppError code when fatal

    @property
    def http_status(self) -> int:
        if self.fatal:
            return HTTP_INTERNAL_ERROR
        return HTTP_OK if not self.errors else HTTP_MULTI_STATUS

    @classmethod
    def failed(cls, earning_date: str, error: AppError) -> "AccrualReport":
        return cls(
            success=False,
            message=f"Daily earnings run aborted: {error.message}",
            earning_date=earning_date,
            errors=[error.message],
            fatal=True,
            error_code=error.code,
        )


class EarningItem(BaseModel):
    id: int
    user_product_id: str
    amount_cents: int
    amount_display: str
    earning_date: str
    created_at: str


class EarningListResponse(BaseModel):
    items: list[EarningItem]
    next_cursor: str | None
    has_more: bool


class EarningsSummaryResponse(BaseModel):
    user_id: str
    total_cents: int
    total_display: str
    days_credited: int


class DailySummaryResponse(BaseModel):
    earning_date: str
    records: int
    users: int
    total_cents: int
    total_display: str

    @classmethod
    def from_domain(cls, s: DailySummary) -> "DailySummaryResponse":
        return cls(
            earning_date=s.earning_date.isoformat(),
            records=s.records,
            users=s.users,
            total_cents=s.total_amount,
            total_display=cents_to_display(s.total_amount),
        )
