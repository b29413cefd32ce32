"""
Catalog value objects.
"""

from app.core.domain import StatusEnum


class ProductStatus(StatusEnum):
    """Product lifecycle status."""

    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"
    DISCONTINUED = "discontinued"

    def is_available_for_sale(self) -> bool:
        return self == ProductStatus.ACTIVE


class ProductVisibility(StatusEnum):
    VISIBLE = "visible"
    HIDDEN = "hidden"
    FEATURED = "featured"


class DiscountType(StatusEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class ProductSort(StatusEnum):
    """The fixed sort orders of product listings."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    BESTSELLING = "bestselling"
    RATING = "rating"


class StockOperation(StatusEnum):
    ADD = "add"
    SUBTRACT = "subtract"


__all__ = ["ProductStatus", "ProductVisibility", "DiscountType", "ProductSort", "StockOperation"]
