"""
Notification Service

Builds admin and customer notifications from domain events and serves the
two feeds.
"""

import logging
from datetime import timedelta
from uuid import UUID

from app.core.domain import EntityNotFoundException, PaginatedResult, Pagination, utcnow
from app.domains.commerce.domain.events import OrderPlaced, OrderStatusChanged
from app.domains.engagement.application.ports import INotificationRepository
from app.domains.engagement.domain.entities import Notification
from app.domains.engagement.domain.events import ReviewSubmitted
from app.domains.engagement.domain.value_objects import NotificationType
from app.domains.identity.domain.events import UserRegistered

logger = logging.getLogger(__name__)

READ_RETENTION_DAYS = 30

ORDER_STATUS_TEXTS = {
    "confirmed": ("Order confirmed", "Your order #{number} has been confirmed"),
    "processing": ("Order is being prepared", "Your order #{number} is being prepared"),
    "shipped": ("Order shipped", "Your order #{number} has been shipped"),
    "delivered": ("Order delivered", "Your order #{number} has been delivered"),
    "cancelled": ("Order cancelled", "Your order #{number} has been cancelled"),
    "returned": ("Order returned", "Your order #{number} has been returned"),
}
DEFAULT_STATUS_TEXT = ("Order update", "The status of your order #{number} has been updated")


class NotificationService:
    def __init__(self, notification_repository: INotificationRepository):
        self.notification_repository = notification_repository

    # ========================================================================
    # Producers
    # ========================================================================

    async def notify_order_placed(self, event: OrderPlaced) -> Notification:
        return await self.notification_repository.create(
            Notification.for_admins(
                NotificationType.ORDER,
                "New order",
                f'{event.customer_name} placed an order of ৳{event.total} - "{event.summary}"',
                orderId=event.order_id,
                userId=event.user_id,
                amount=event.total,
                link="/dashboard/admin/orders",
            )
        )

    async def notify_order_status(self, event: OrderStatusChanged) -> Notification | None:
        if event.user_id is None:
            return None
        title, message = ORDER_STATUS_TEXTS.get(event.new_status, DEFAULT_STATUS_TEXT)
        return await self.notification_repository.create(
            Notification.for_customer(
                event.user_id,
                NotificationType.ORDER_STATUS,
                title,
                message.format(number=event.order_number),
                orderId=event.order_id,
                link=f"/dashboard/orders/{event.order_id}",
            )
        )

    async def notify_review_submitted(self, event: ReviewSubmitted) -> Notification:
        return await self.notification_repository.create(
            Notification.for_admins(
                NotificationType.REVIEW,
                f"New {event.rating}-star review",
                f'{event.user_name or "A customer"} reviewed "{event.product_name}"',
                reviewId=event.review_id,
                userId=event.user_id,
                productId=event.product_id,
                link="/dashboard/admin/reviews",
            )
        )

    async def notify_user_registered(self, event: UserRegistered) -> Notification:
        return await self.notification_repository.create(
            Notification.for_admins(
                NotificationType.USER,
                "New user",
                f"{event.full_name} ({event.email}) registered",
                userId=event.user_id,
                link="/dashboard/admin/users",
            )
        )

    # ========================================================================
    # Feeds
    # ========================================================================

    async def list_admin(self, pagination: Pagination) -> PaginatedResult[Notification]:
        result = await self.notification_repository.list_for_admin(pagination)
        result.extra_meta["unreadCount"] = await self.notification_repository.count_unread()
        return result

    async def list_user(self, user_id: UUID, pagination: Pagination) -> PaginatedResult[Notification]:
        result = await self.notification_repository.list_for_user(user_id, pagination)
        result.extra_meta["unreadCount"] = await self.notification_repository.count_unread(user_id)
        return result

    async def unread_count(self, user_id: UUID | None = None) -> int:
        return await self.notification_repository.count_unread(user_id)

    async def _visible(self, notification_id: UUID, user_id: UUID, is_admin: bool) -> Notification:
        notification = await self.notification_repository.get_by_id(notification_id)
        if not notification or not (notification.for_user == user_id or (is_admin and notification.for_admin)):
            raise EntityNotFoundException("Notification", notification_id, "Notification not found")
        return notification

    async def mark_read(self, notification_id: UUID, user_id: UUID, is_admin: bool = False) -> Notification:
        notification = await self._visible(notification_id, user_id, is_admin)
        notification.mark_read()
        return await self.notification_repository.save(notification)

    async def mark_all_read(self, user_id: UUID | None = None) -> int:
        """Mark the user's feed read, or the admin feed when `user_id` is None."""
        return await self.notification_repository.mark_all_read(user_id)

    async def delete(self, notification_id: UUID, user_id: UUID, is_admin: bool = False) -> None:
        await self._visible(notification_id, user_id, is_admin)
        await self.notification_repository.delete(notification_id)

    async def sweep_read(self, older_than_days: int = READ_RETENTION_DAYS) -> int:
        """Delete read notifications created more than `older_than_days` ago."""
        removed = await self.notification_repository.delete_read_before(utcnow() - timedelta(days=older_than_days))
        if removed:
            logger.info(f"Swept {removed} read notifications older than {older_than_days} days")
        return removed


__all__ = ["NotificationService", "READ_RETENTION_DAYS"]
