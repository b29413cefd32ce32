"""
Identity Application Ports

Interface definitions (ports) for the identity domain.
Uses Protocol for structural typing.
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.domain import PaginatedResult, Pagination
from app.domains.identity.domain.entities import User


@runtime_checkable
class IUserRepository(Protocol):
    """
    Interface for user repository.
    """

    async def get_by_id(self, user_id: UUID) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def email_exists(self, email: str) -> bool:
        ...

    async def create(self, user: User) -> User:
        ...

    async def save(self, user: User) -> User:
        ...

    async def list(
        self,
        pagination: Pagination,
        search: str | None = None,
        role: str | None = None,
        status: str | None = None,
    ) -> PaginatedResult[User]:
        ...

    async def get_stats(self, month_start: datetime) -> dict[str, int]:
        """Counts: total, customers, admins, active, blocked, newThisMonth."""
        ...

    async def record_purchase(self, user_id: UUID, amount: float) -> None:
        """Increment totalOrders by one and totalSpent by amount."""
        ...

    async def set_wishlist_total(self, user_id: UUID, total: int) -> None:
        ...


@runtime_checkable
class ICredentialService(Protocol):
    """Password hashing and token issuing."""

    def get_password_hash(self, password: str) -> str:
        ...

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        ...

    def create_token_pair(self, user_id: str, email: str, role: str) -> dict[str, str]:
        ...

    def create_access_token(self, data: dict[str, Any]) -> str:
        ...

    def decode_token(self, token: str, token_type: str = "access") -> dict[str, Any]:
        ...


__all__ = ["IUserRepository", "ICredentialService"]
