"""
Notification entity.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import Entity, iso, sid
from app.domains.engagement.domain.value_objects import NotificationType


@dataclass
class Notification(Entity[UUID]):
    """Addressed to the admin feed, or to one user when `for_user` is set."""

    type: NotificationType = NotificationType.SYSTEM
    title: str = ""
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    for_admin: bool = True
    for_user: UUID | None = None

    @classmethod
    def for_admins(cls, type: NotificationType, title: str, message: str, **data: Any) -> "Notification":
        return cls(id=uuid4(), type=type, title=title, message=message, data=_clean(data))

    @classmethod
    def for_customer(
        cls, user_id: UUID, type: NotificationType, title: str, message: str, **data: Any
    ) -> "Notification":
        return cls(
            id=uuid4(),
            type=type,
            title=title,
            message=message,
            data=_clean(data),
            for_admin=False,
            for_user=user_id,
        )

    def mark_read(self) -> None:
        self.is_read = True
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "data": dict(self.data),
            "isRead": self.is_read,
            "forAdmin": self.for_admin,
            "forUser": sid(self.for_user),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


def _clean(data: dict[str, Any]) -> dict[str, Any]:
    """Drop empty values and stringify ids so the payload is JSON-safe."""
    return {key: str(value) if isinstance(value, UUID) else value for key, value in data.items() if value is not None}
