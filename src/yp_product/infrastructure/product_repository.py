"""ProductRepository: read access to the product catalogue."""

import uuid

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.enums import ProductStatus
from src.yp_product.domain.models import Product

_PRODUCT_COLUMNS = """
    id, name, description, price, daily_earning, contract_days, status, created_at
"""

_GET_PRODUCT_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products
    WHERE id = :product_id
""")

_LIST_ACTIVE_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products
    WHERE status = :status
    ORDER BY price ASC, created_at ASC
""")


def _row_to_product(row: object) -> Product:
    return Product(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        daily_earning=row.daily_earning,  # type: ignore[attr-defined]
        contract_days=row.contract_days,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class ProductRepository:
    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None:
        try:
            key = uuid.UUID(product_id)
        except ValueError:
            return None  # products.id is UUID
        result = await db.execute(_GET_PRODUCT_SQL, {"product_id": key})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def list_active_products(self, db: AsyncSession) -> list[Product]:
        result = await db.execute(_LIST_ACTIVE_SQL, {"status": ProductStatus.ACTIVE.value})
        return [_row_to_product(row) for row in result.fetchall()]
