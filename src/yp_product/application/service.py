"""ProductApplicationService: catalogue, purchase, and position listing.

purchase() is the explicit form of the platform's purchase procedure: the
wallet debit, the new position, and the purchase transaction commit together
or not at all.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.enums import ProductStatus, TransactionType
from src.yp_common.errors import ProductNotActiveError, ProductNotFoundError
from src.yp_product.application.schemas import PositionItem, ProductItem, PurchaseResponse
from src.yp_product.domain.repository import (
    PositionRepositoryProtocol,
    ProductRepositoryProtocol,
)
from src.yp_product.infrastructure.position_repository import PositionRepository
from src.yp_product.infrastructure.product_repository import ProductRepository
from src.yp_wallet.domain.repository import WalletRepositoryProtocol
from src.yp_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class ProductApplicationService:
    def __init__(
        self,
        products: ProductRepositoryProtocol | None = None,
        positions: PositionRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
    ) -> None:
        self._products: ProductRepositoryProtocol = products or ProductRepository()
        self._positions: PositionRepositoryProtocol = positions or PositionRepository()
        self._wallets: WalletRepositoryProtocol = wallets or WalletRepository()

    async def list_products(self, db: AsyncSession) -> list[ProductItem]:
        products = await self._products.list_active_products(db)
        return [ProductItem.from_domain(p) for p in products]

    async def list_positions(
        self, db: AsyncSession, user_id: str, active_only: bool = False
    ) -> list[PositionItem]:
        positions = await self._positions.list_by_user(db, user_id, active_only)
        return [PositionItem.from_domain(p) for p in positions]

    async def purchase(
        self, db: AsyncSession, user_id: str, product_id: str
    ) -> PurchaseResponse:
        try:
            product = await self._products.get_product(db, product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if product.status != ProductStatus.ACTIVE:
                raise ProductNotActiveError(product_id)

            wallet = await self._wallets.debit(db, user_id, product.price)
            position = await self._positions.create_position(db, user_id, product)
            tx = await self._wallets.insert_transaction(
                db,
                user_id=user_id,
                tx_type=TransactionType.PURCHASE.value,
                amount=-product.price,
                balance_after=wallet.balance,
                description=f"Purchased {product.name}",
                reference_id=position.id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Position %s opened: user=%s product=%s price=%d",
            position.id, user_id, product_id, product.price,
        )
        return PurchaseResponse.from_result(position, wallet.balance, tx.id)
