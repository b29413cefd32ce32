"""
Engagement Domain Container.

Single Responsibility: Wire reviews, wishlists and notifications.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.async_db import get_outbox
from app.domains.engagement.application.services import (
    NotificationService,
    ReviewService,
    WishlistService,
)
from app.domains.engagement.infrastructure.repositories import (
    SQLAlchemyNotificationRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyWishlistRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer
    from app.core.container.catalog import CatalogContainer
    from app.core.container.commerce import CommerceContainer
    from app.core.container.identity import IdentityContainer


class EngagementContainer:
    def __init__(
        self,
        base: "BaseContainer",
        catalog: "CatalogContainer",
        commerce: "CommerceContainer",
        identity: "IdentityContainer",
    ):
        self._base = base
        self._catalog = catalog
        self._commerce = commerce
        self._identity = identity

    # ==================== REPOSITORIES ====================

    def create_review_repository(self, db: AsyncSession) -> SQLAlchemyReviewRepository:
        return SQLAlchemyReviewRepository(session=db)

    def create_wishlist_repository(self, db: AsyncSession) -> SQLAlchemyWishlistRepository:
        return SQLAlchemyWishlistRepository(session=db)

    def create_notification_repository(self, db: AsyncSession) -> SQLAlchemyNotificationRepository:
        return SQLAlchemyNotificationRepository(session=db)

    # ==================== SERVICES ====================

    def create_review_service(self, db: AsyncSession) -> ReviewService:
        return ReviewService(
            review_repository=self.create_review_repository(db),
            product_repository=self._catalog.create_product_repository(db),
            order_repository=self._commerce.create_order_repository(db),
            outbox=get_outbox(db),
        )

    def create_wishlist_service(self, db: AsyncSession) -> WishlistService:
        return WishlistService(
            wishlist_repository=self.create_wishlist_repository(db),
            product_repository=self._catalog.create_product_repository(db),
            user_repository=self._identity.create_user_repository(db),
            cart_service=self._commerce.create_cart_service(db),
        )

    def create_notification_service(self, db: AsyncSession) -> NotificationService:
        return NotificationService(notification_repository=self.create_notification_repository(db))
