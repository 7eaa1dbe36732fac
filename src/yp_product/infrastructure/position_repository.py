"""PositionRepository: user_products persistence.

The accrual update is a guarded UPDATE: it only matches a row that is still
active and not yet credited for the given day. 0 rows means another run got
there first, which is reported instead of silently crediting twice.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.errors import InternalError, PositionNotEligibleError
from src.yp_product.domain.models import AccrualTransition, Position, Product

_POSITION_COLUMNS = """
    id, user_id, product_id, purchase_price, daily_earning, contract_days,
    days_remaining, total_earned, is_active, last_earning_date,
    purchased_at, expires_at
"""

_INSERT_POSITION_SQL = text(f"""
    INSERT INTO user_products
        (user_id, product_id, purchase_price, daily_earning, contract_days,
         days_remaining, total_earned, is_active, expires_at)
    VALUES
        (:user_id, :product_id, :purchase_price, :daily_earning, :contract_days,
         :contract_days, 0, TRUE, NOW() + make_interval(days => :contract_days))
    RETURNING {_POSITION_COLUMNS}
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM user_products
    WHERE user_id = :user_id
      AND (:active_only = FALSE OR is_active = TRUE)
    ORDER BY purchased_at DESC
""")

# Eligibility predicate: the only guard against double-crediting within a day.
_SELECT_ELIGIBLE_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM user_products
    WHERE is_active = TRUE
      AND days_remaining > 0
      AND (last_earning_date IS NULL OR last_earning_date <> :today)
""")

_UPDATE_AFTER_ACCRUAL_SQL = text("""
    UPDATE user_products
    SET days_remaining    = :days_remaining,
        total_earned      = :total_earned,
        is_active         = :is_active,
        last_earning_date = :last_earning_date
    WHERE id = :position_id
      AND is_active = TRUE
      AND (last_earning_date IS NULL OR last_earning_date <> :last_earning_date)
    RETURNING id
""")


def _row_to_position(row: object) -> Position:
    return Position(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        product_id=str(row.product_id),  # type: ignore[attr-defined]
        purchase_price=row.purchase_price,  # type: ignore[attr-defined]
        daily_earning=row.daily_earning,  # type: ignore[attr-defined]
        contract_days=row.contract_days,  # type: ignore[attr-defined]
        days_remaining=row.days_remaining,  # type: ignore[attr-defined]
        total_earned=row.total_earned,  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        last_earning_date=row.last_earning_date,  # type: ignore[attr-defined]
        purchased_at=row.purchased_at,  # type: ignore[attr-defined]
        expires_at=row.expires_at,  # type: ignore[attr-defined]
    )


class PositionRepository:
    async def create_position(
        self, db: AsyncSession, user_id: str, product: Product
    ) -> Position:
        result = await db.execute(
            _INSERT_POSITION_SQL,
            {
                "user_id": user_id,
                "product_id": product.id,
                "purchase_price": product.price,
                "daily_earning": product.daily_earning,
                "contract_days": product.contract_days,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Position insert returned no rows")
        return _row_to_position(row)

    async def list_by_user(
        self, db: AsyncSession, user_id: str, active_only: bool
    ) -> list[Position]:
        result = await db.execute(
            _LIST_BY_USER_SQL, {"user_id": user_id, "active_only": active_only}
        )
        return [_row_to_position(row) for row in result.fetchall()]

    async def select_eligible(self, db: AsyncSession, today: date) -> list[Position]:
        result = await db.execute(_SELECT_ELIGIBLE_SQL, {"today": today})
        return [_row_to_position(row) for row in result.fetchall()]

    async def update_after_accrual(
        self, db: AsyncSession, transition: AccrualTransition
    ) -> None:
        result = await db.execute(
            _UPDATE_AFTER_ACCRUAL_SQL,
            {
                "position_id": transition.position_id,
                "days_remaining": transition.days_remaining,
                "total_earned": transition.total_earned,
                "is_active": transition.is_active,
                "last_earning_date": transition.last_earning_date,
            },
        )
        if result.fetchone() is None:
            raise PositionNotEligibleError(
                transition.position_id,
                f"already credited on {transition.last_earning_date.isoformat()} or inactive",
            )
