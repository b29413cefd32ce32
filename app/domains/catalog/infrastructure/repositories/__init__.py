from .category_repository import SQLAlchemyCategoryRepository
from .product_repository import SQLAlchemyProductRepository

__all__ = ["SQLAlchemyCategoryRepository", "SQLAlchemyProductRepository"]
