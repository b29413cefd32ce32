"""
Identity Domain Layer
"""

from .entities import User, UserAddress
from .events import UserRegistered
from .value_objects import STAFF_ROLES, Gender, UserRole, UserStatus

__all__ = [
    "User",
    "UserAddress",
    "UserRegistered",
    "UserRole",
    "UserStatus",
    "Gender",
    "STAFF_ROLES",
]
