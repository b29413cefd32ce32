"""
Engagement value objects.
"""

from app.core.domain import StatusEnum


class ReviewStatus(StatusEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewSort(StatusEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST = "highest"
    LOWEST = "lowest"
    HELPFUL = "helpful"


class NotificationType(StatusEnum):
    ORDER = "order"
    ORDER_STATUS = "order_status"
    REVIEW = "review"
    USER = "user"
    PRODUCT = "product"
    SYSTEM = "system"
    WISHLIST = "wishlist"
    PROMOTION = "promotion"


__all__ = ["ReviewStatus", "ReviewSort", "NotificationType"]
