"""
Engagement API Dependencies
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.engagement.application.services import NotificationService, ReviewService, WishlistService


def get_review_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ReviewService:
    return container.engagement.create_review_service(db)


def get_wishlist_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> WishlistService:
    return container.engagement.create_wishlist_service(db)


def get_notification_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> NotificationService:
    return container.engagement.create_notification_service(db)


__all__ = ["get_review_service", "get_wishlist_service", "get_notification_service"]
