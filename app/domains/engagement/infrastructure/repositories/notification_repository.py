"""
Notification Repository Implementation
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination
from app.domains.engagement.application.ports import INotificationRepository
from app.domains.engagement.domain.entities import Notification
from app.domains.engagement.domain.value_objects import NotificationType
from app.models.db import NotificationModel


def _feed(user_id: UUID | None):
    if user_id is None:
        return NotificationModel.for_admin.is_(True)
    return NotificationModel.for_user == user_id


class SQLAlchemyNotificationRepository(INotificationRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, notification_id: UUID) -> Notification | None:
        model = await self.session.get(NotificationModel, notification_id, populate_existing=True)
        return self._to_entity(model) if model else None

    async def create(self, notification: Notification) -> Notification:
        model = NotificationModel(id=notification.id)
        self._apply(model, notification)
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def save(self, notification: Notification) -> Notification:
        model = await self.session.get(NotificationModel, notification.id)
        if model is None:
            return await self.create(notification)
        self._apply(model, notification)
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, notification_id: UUID) -> None:
        await self.session.execute(delete(NotificationModel).where(NotificationModel.id == notification_id))

    async def _page(self, user_id: UUID | None, pagination: Pagination) -> PaginatedResult[Notification]:
        condition = _feed(user_id)
        total = (await self.session.execute(select(func.count(NotificationModel.id)).where(condition))).scalar_one()
        result = await self.session.execute(
            select(NotificationModel)
            .where(condition)
            .order_by(NotificationModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return PaginatedResult(
            items=[self._to_entity(m) for m in result.scalars().all()],
            total=total,
            pagination=pagination,
        )

    async def list_for_admin(self, pagination: Pagination) -> PaginatedResult[Notification]:
        return await self._page(None, pagination)

    async def list_for_user(self, user_id: UUID, pagination: Pagination) -> PaginatedResult[Notification]:
        return await self._page(user_id, pagination)

    async def count_unread(self, user_id: UUID | None = None) -> int:
        result = await self.session.execute(
            select(func.count(NotificationModel.id)).where(_feed(user_id), NotificationModel.is_read.is_(False))
        )
        return result.scalar_one()

    async def mark_all_read(self, user_id: UUID | None = None) -> int:
        result = await self.session.execute(
            update(NotificationModel)
            .where(_feed(user_id), NotificationModel.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def delete_read_before(self, cutoff: datetime) -> int:
        result = await self.session.execute(
            delete(NotificationModel)
            .where(NotificationModel.is_read.is_(True), NotificationModel.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    # Mapping methods

    def _apply(self, model: NotificationModel, notification: Notification) -> None:
        model.type = notification.type.value
        model.title = notification.title
        model.message = notification.message
        model.data = dict(notification.data)
        model.is_read = notification.is_read
        model.for_admin = notification.for_admin
        model.for_user = notification.for_user

    def _to_entity(self, model: NotificationModel) -> Notification:
        notification = Notification(
            id=model.id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            data=dict(model.data or {}),
            is_read=model.is_read,
            for_admin=model.for_admin,
            for_user=model.for_user,
        )
        if model.created_at is not None:
            notification.created_at = model.created_at
        if model.updated_at is not None:
            notification.updated_at = model.updated_at
        return notification
