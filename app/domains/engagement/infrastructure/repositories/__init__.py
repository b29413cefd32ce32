from .notification_repository import SQLAlchemyNotificationRepository
from .review_repository import SQLAlchemyReviewRepository
from .wishlist_repository import SQLAlchemyWishlistRepository

__all__ = [
    "SQLAlchemyNotificationRepository",
    "SQLAlchemyReviewRepository",
    "SQLAlchemyWishlistRepository",
]
