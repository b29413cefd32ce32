"""
Engagement Ports (Interfaces)
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.domain import PaginatedResult, Pagination
from app.domains.engagement.application.dto import RatingSummary
from app.domains.engagement.domain.entities import Notification, Review, Wishlist


@runtime_checkable
class IReviewRepository(Protocol):
    async def get_by_id(self, review_id: UUID) -> Review | None:
        ...

    async def get_by_user_and_product(self, user_id: UUID, product_id: UUID) -> Review | None:
        ...

    async def create(self, review: Review) -> Review:
        ...

    async def save(self, review: Review) -> Review:
        ...

    async def delete(self, review_id: UUID) -> None:
        ...

    async def list_for_product(
        self, product_id: UUID, pagination: Pagination, sort: str = "newest"
    ) -> PaginatedResult[Review]:
        """Approved reviews only."""
        ...

    async def list_for_user(self, user_id: UUID) -> list[Review]:
        ...

    async def list(self, pagination: Pagination, status: str | None = None) -> PaginatedResult[Review]:
        ...

    async def rating_summary(self, product_id: UUID) -> RatingSummary:
        ...

    async def get_stats(self) -> dict[str, Any]:
        ...


@runtime_checkable
class IWishlistRepository(Protocol):
    async def get_by_user(self, user_id: UUID) -> Wishlist | None:
        ...

    async def save(self, wishlist: Wishlist) -> Wishlist:
        """Insert or update the user's wishlist."""
        ...


@runtime_checkable
class INotificationRepository(Protocol):
    async def get_by_id(self, notification_id: UUID) -> Notification | None:
        ...

    async def create(self, notification: Notification) -> Notification:
        ...

    async def save(self, notification: Notification) -> Notification:
        ...

    async def delete(self, notification_id: UUID) -> None:
        ...

    async def list_for_admin(self, pagination: Pagination) -> PaginatedResult[Notification]:
        ...

    async def list_for_user(self, user_id: UUID, pagination: Pagination) -> PaginatedResult[Notification]:
        ...

    async def count_unread(self, user_id: UUID | None = None) -> int:
        """Unread in the user's feed, or in the admin feed when `user_id` is None."""
        ...

    async def mark_all_read(self, user_id: UUID | None = None) -> int:
        ...

    async def delete_read_before(self, cutoff: datetime) -> int:
        ...


__all__ = ["IReviewRepository", "IWishlistRepository", "INotificationRepository"]
