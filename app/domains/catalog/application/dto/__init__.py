"""
Catalog DTOs
"""

from dataclasses import dataclass, field
from uuid import UUID

from app.domains.catalog.domain.value_objects import ProductSort


@dataclass
class ProductFilters:
    """Optional listing filters; unset fields do not constrain the query."""

    category_id: UUID | None = None
    brand: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    status: str | None = "active"
    visibility: str | None = None
    is_featured: bool | None = None
    is_on_sale: bool | None = None
    is_new_product: bool | None = None
    tags: list[str] = field(default_factory=list)
    in_stock: bool | None = None
    search: str | None = None
    sort: ProductSort = ProductSort.NEWEST


__all__ = ["ProductFilters"]
