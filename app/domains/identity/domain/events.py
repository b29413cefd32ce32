"""
Identity domain events.
"""

from dataclasses import dataclass
from uuid import UUID

from app.core.domain import DomainEvent


@dataclass(frozen=True)
class UserRegistered(DomainEvent):
    user_id: UUID | None = None
    email: str = ""
    full_name: str = ""
