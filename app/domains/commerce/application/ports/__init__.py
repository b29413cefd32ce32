"""
Commerce Application Ports

Interface definitions (ports) for carts, coupons and orders.
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.domain import PaginatedResult, Pagination
from app.domains.commerce.application.dto import OrderFilters
from app.domains.commerce.domain.entities import Cart, Coupon, Order


@runtime_checkable
class ICartRepository(Protocol):
    """
    Interface for cart repository (one cart per user).
    """

    async def get_by_user(self, user_id: UUID) -> Cart | None:
        ...

    async def save(self, cart: Cart) -> Cart:
        """Insert or update."""
        ...


@runtime_checkable
class ICouponRepository(Protocol):
    """
    Interface for coupon repository.
    """

    async def get_by_id(self, coupon_id: UUID) -> Coupon | None:
        ...

    async def get_by_code(self, code: str) -> Coupon | None:
        ...

    async def code_exists(self, code: str, exclude_id: UUID | None = None) -> bool:
        ...

    async def list(self, pagination: Pagination, is_active: bool | None = None) -> PaginatedResult[Coupon]:
        ...

    async def create(self, coupon: Coupon) -> Coupon:
        ...

    async def save(self, coupon: Coupon) -> Coupon:
        ...

    async def delete(self, coupon_id: UUID) -> None:
        ...

    async def increment_usage(self, coupon_id: UUID) -> bool:
        """Atomically bump used_count while it stays below usage_limit."""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interface for order repository.
    """

    async def get_by_id(self, order_id: UUID) -> Order | None:
        ...

    async def get_for_user(self, order_id: UUID, user_id: UUID) -> Order | None:
        ...

    async def get_by_number(self, order_number: str) -> Order | None:
        ...

    async def create(self, order: Order) -> Order:
        ...

    async def save(self, order: Order) -> Order:
        ...

    async def list_for_user(
        self, user_id: UUID, pagination: Pagination, status: str | None = None
    ) -> PaginatedResult[Order]:
        ...

    async def list(self, pagination: Pagination, filters: OrderFilters) -> PaginatedResult[Order]:
        ...

    async def get_stats(self, today_start: datetime) -> dict[str, Any]:
        ...

    async def count_coupon_uses(self, user_id: UUID, coupon_code: str) -> int:
        ...

    async def has_delivered_product(self, user_id: UUID, product_id: UUID) -> bool:
        ...


__all__ = ["ICartRepository", "ICouponRepository", "IOrderRepository"]
