"""Repository Protocols for products and positions."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_product.domain.models import AccrualTransition, Position, Product


class ProductRepositoryProtocol(Protocol):
    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None: ...

    async def list_active_products(self, db: AsyncSession) -> list[Product]: ...


class PositionRepositoryProtocol(Protocol):
    async def create_position(
        self, db: AsyncSession, user_id: str, product: Product
    ) -> Position: ...

    async def list_by_user(
        self, db: AsyncSession, user_id: str, active_only: bool
    ) -> list[Position]: ...

    async def select_eligible(self, db: AsyncSession, today: date) -> list[Position]: ...

    async def update_after_accrual(
        self, db: AsyncSession, transition: AccrualTransition
    ) -> None: ...
