"""
Catalog Domain Layer
"""

from .entities import MAX_CATEGORY_LEVEL, Category, Product, ProductVariant
from .events import CategoryChanged, ProductChanged
from .value_objects import DiscountType, ProductSort, ProductStatus, ProductVisibility, StockOperation

__all__ = [
    "Category",
    "MAX_CATEGORY_LEVEL",
    "Product",
    "ProductVariant",
    "CategoryChanged",
    "ProductChanged",
    "DiscountType",
    "ProductSort",
    "ProductStatus",
    "ProductVisibility",
    "StockOperation",
]
