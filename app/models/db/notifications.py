"""
In-app notifications for admins and customers.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID

from .base import Base, TimestampMixin, uuid_pk


class NotificationModel(Base, TimestampMixin):
    """
    Notification addressed either to the admin feed (`for_admin`) or to a
    single customer (`for_user`).
    """

    __tablename__ = "notifications"

    id = uuid_pk()
    type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSONB, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    for_admin = Column(Boolean, nullable=False, default=True)
    for_user = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"))

    __table_args__ = (
        Index("idx_notifications_admin_read", for_admin, is_read),
        Index("idx_notifications_user_read", for_user, is_read),
        Index("idx_notifications_created_at", "created_at"),
    )
