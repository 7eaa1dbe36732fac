"""Pydantic response schemas for yp_product API."""

from pydantic import BaseModel

from src.yp_common.cents import cents_to_display
from src.yp_product.domain.models import Position, Product


class ProductItem(BaseModel):
    id: str
    name: str
    description: str | None
    price_cents: int
    price_display: str
    daily_earning_cents: int
    daily_earning_display: str
    contract_days: int
    total_return_cents: int
    total_return_display: str

    @classmethod
    def from_domain(cls, p: Product) -> "ProductItem":
        return cls(
            id=p.id,
            name=p.name,
            description=p.description,
            price_cents=p.price,
            price_display=cents_to_display(p.price),
            daily_earning_cents=p.daily_earning,
            daily_earning_display=cents_to_display(p.daily_earning),
            contract_days=p.contract_days,
            total_return_cents=p.total_return,
            total_return_display=cents_to_display(p.total_return),
        )


class PositionItem(BaseModel):
    id: str
    product_id: str
    purchase_price_cents: int
    daily_earning_cents: int
    daily_earning_display: str
    contract_days: int
    days_remaining: int
    total_earned_cents: int
    total_earned_display: str
    is_active: bool
    last_earning_date: str | None   # YYYY-MM-DD
    purchased_at: str               # ISO8601 string
    expires_at: str | None

    @classmethod
    def from_domain(cls, p: Position) -> "PositionItem":
        return cls(
            id=p.id,
            product_id=p.product_id,
            purchase_price_cents=p.purchase_price,
            daily_earning_cents=p.daily_earning,
            daily_earning_display=cents_to_display(p.daily_earning),
            contract_days=p.contract_days,
            days_remaining=p.days_remaining,
            total_earned_cents=p.total_earned,
            total_earned_display=cents_to_display(p.total_earned),
            is_active=p.is_active,
            last_earning_date=p.last_earning_date.isoformat() if p.last_earning_date else None,
            purchased_at=p.purchased_at.isoformat() if p.purchased_at else "",
            expires_at=p.expires_at.isoformat() if p.expires_at else None,
        )


class PurchaseResponse(BaseModel):
    position: PositionItem
    balance_after_cents: int
    balance_after_display: str
    transaction_id: int

    @classmethod
    def from_result(
        cls, position: Position, balance_after: int, transaction_id: int
    ) -> "PurchaseResponse":
        return cls(
            position=PositionItem.from_domain(position),
            balance_after_cents=balance_after,
            balance_after_display=cents_to_display(balance_after),
            transaction_id=transaction_id,
        )
