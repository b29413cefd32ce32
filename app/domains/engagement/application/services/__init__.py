from .notification_service import NotificationService
from .review_service import ReviewService
from .wishlist_service import WishlistService

__all__ = ["NotificationService", "ReviewService", "WishlistService"]
