"""
Commerce Domain Container.

Single Responsibility: Wire cart, coupon, order and checkout dependencies.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.async_db import get_outbox
from app.domains.commerce.application.services import CartService, CouponService, OrderService
from app.domains.commerce.application.use_cases import PlaceOrderUseCase, ShippingRates
from app.domains.commerce.infrastructure.repositories import (
    SQLAlchemyCartRepository,
    SQLAlchemyCouponRepository,
    SQLAlchemyOrderRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer
    from app.core.container.catalog import CatalogContainer
    from app.core.container.identity import IdentityContainer


class CommerceContainer:
    """
    Commerce domain container.

    Borrows product and user repositories from the catalog and identity
    containers.
    """

    def __init__(self, base: "BaseContainer", catalog: "CatalogContainer", identity: "IdentityContainer"):
        self._base = base
        self._catalog = catalog
        self._identity = identity

    # ==================== REPOSITORIES ====================

    def create_cart_repository(self, db: AsyncSession) -> SQLAlchemyCartRepository:
        return SQLAlchemyCartRepository(session=db)

    def create_coupon_repository(self, db: AsyncSession) -> SQLAlchemyCouponRepository:
        return SQLAlchemyCouponRepository(session=db)

    def create_order_repository(self, db: AsyncSession) -> SQLAlchemyOrderRepository:
        return SQLAlchemyOrderRepository(session=db)

    # ==================== SERVICES ====================

    def create_coupon_service(self, db: AsyncSession) -> CouponService:
        return CouponService(
            coupon_repository=self.create_coupon_repository(db),
            order_repository=self.create_order_repository(db),
            product_repository=self._catalog.create_product_repository(db),
        )

    def create_cart_service(self, db: AsyncSession) -> CartService:
        return CartService(
            cart_repository=self.create_cart_repository(db),
            product_repository=self._catalog.create_product_repository(db),
            coupon_service=self.create_coupon_service(db),
        )

    def create_order_service(self, db: AsyncSession) -> OrderService:
        return OrderService(
            order_repository=self.create_order_repository(db),
            product_repository=self._catalog.create_product_repository(db),
            outbox=get_outbox(db),
        )

    # ==================== USE CASES ====================

    def shipping_rates(self) -> ShippingRates:
        settings = self._base.settings
        return ShippingRates(
            free_threshold=settings.FREE_SHIPPING_THRESHOLD,
            standard=settings.STANDARD_SHIPPING_COST,
            express=settings.EXPRESS_SHIPPING_COST,
        )

    def create_place_order_use_case(self, db: AsyncSession) -> PlaceOrderUseCase:
        return PlaceOrderUseCase(
            cart_repository=self.create_cart_repository(db),
            order_repository=self.create_order_repository(db),
            product_repository=self._catalog.create_product_repository(db),
            coupon_repository=self.create_coupon_repository(db),
            user_repository=self._identity.create_user_repository(db),
            cart_service=self.create_cart_service(db),
            coupon_service=self.create_coupon_service(db),
            outbox=get_outbox(db),
            shipping_rates=self.shipping_rates(),
        )
