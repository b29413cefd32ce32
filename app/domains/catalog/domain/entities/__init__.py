from .category import MAX_CATEGORY_LEVEL, Category
from .product import Product, ProductVariant

__all__ = ["Category", "MAX_CATEGORY_LEVEL", "Product", "ProductVariant"]
