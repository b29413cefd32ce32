"""
Catalog Application Ports

Interface definitions (ports) for the catalog domain.
Uses Protocol for structural typing.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.domain import PaginatedResult, Pagination
from app.domains.catalog.application.dto import ProductFilters
from app.domains.catalog.domain.entities import Category, Product


@runtime_checkable
class ICategoryRepository(Protocol):
    """
    Interface for category repository.
    """

    async def get_by_id(self, category_id: UUID) -> Category | None:
        ...

    async def get_by_slug(self, slug: str) -> Category | None:
        ...

    async def get_many(self, category_ids: list[UUID]) -> list[Category]:
        ...

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        ...

    async def list(
        self,
        include_inactive: bool = False,
        parent_id: UUID | None = None,
        roots_only: bool = False,
        featured: bool | None = None,
        show_in_menu: bool | None = None,
        show_in_home: bool | None = None,
        limit: int | None = None,
    ) -> list[Category]:
        """Categories ordered by display order then name."""
        ...

    async def get_descendants(self, category_id: UUID) -> list[Category]:
        ...

    async def has_children(self, category_id: UUID) -> bool:
        ...

    async def create(self, category: Category) -> Category:
        ...

    async def save(self, category: Category) -> Category:
        ...

    async def delete(self, category_id: UUID) -> None:
        ...

    async def update_display_order(self, orders: list[tuple[UUID, int]]) -> int:
        ...

    async def refresh_product_count(self, category_id: UUID) -> int:
        ...

    async def count_active(self) -> int:
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interface for product repository.
    """

    async def get_by_id(self, product_id: UUID) -> Product | None:
        ...

    async def get_by_slug(self, slug: str) -> Product | None:
        ...

    async def get_many(self, product_ids: list[UUID]) -> list[Product]:
        ...

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        ...

    async def sku_exists(self, sku: str, exclude_id: UUID | None = None) -> bool:
        ...

    async def search(self, filters: ProductFilters, pagination: Pagination) -> PaginatedResult[Product]:
        ...

    async def list_flagged(self, flag: str, limit: int) -> list[Product]:
        """Active products for a storefront shelf: featured, new, bestseller, on_sale."""
        ...

    async def list_related(self, product: Product, limit: int) -> list[Product]:
        ...

    async def create(self, product: Product) -> Product:
        ...

    async def save(self, product: Product) -> Product:
        ...

    async def delete(self, product_id: UUID) -> None:
        ...

    async def bulk_update_status(self, product_ids: list[UUID], status: str) -> int:
        ...

    async def bulk_delete(self, product_ids: list[UUID]) -> int:
        ...

    async def increment_view_count(self, product_id: UUID) -> None:
        ...

    async def adjust_stock(self, product_id: UUID, delta: int, variant_id: UUID | None = None) -> bool:
        """
        Atomically add `delta` to stock.

        A negative delta only applies when stock stays non-negative, or when
        the product allows backorder or does not track quantity. Returns
        False when the guarded update matched no row.
        """
        ...

    async def increment_sales(self, product_id: UUID, quantity: int) -> None:
        ...

    async def adjust_wishlist_count(self, product_id: UUID, delta: int) -> None:
        ...

    async def update_rating(self, product_id: UUID, rating: float, review_count: int) -> None:
        ...

    async def get_stats(self) -> dict[str, int]:
        ...


@runtime_checkable
class ICacheService(Protocol):
    """Best-effort cache; all methods are safe to call when the cache is down."""

    async def get(self, key: str) -> Any | None:
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        ...

    async def delete(self, key: str) -> bool:
        ...

    async def delete_pattern(self, pattern: str) -> int:
        ...


__all__ = ["ICategoryRepository", "IProductRepository", "ICacheService"]
