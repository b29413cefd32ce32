"""
Identity value objects.
"""

from app.core.domain import StatusEnum


class UserRole(StatusEnum):
    """Role gating API access."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    CUSTOMER = "customer"

    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.SUPER_ADMIN)


class UserStatus(StatusEnum):
    """Account status."""

    ACTIVE = "active"
    BLOCKED = "blocked"
    PENDING = "pending"


class Gender(StatusEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


STAFF_ROLES = (UserRole.ADMIN, UserRole.SUPER_ADMIN)

__all__ = ["UserRole", "UserStatus", "Gender", "STAFF_ROLES"]
