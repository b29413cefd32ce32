"""
Catalog Domain Container.

Single Responsibility: Wire category and product dependencies.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.async_db import get_outbox
from app.domains.catalog.application.services import CategoryService, ProductService
from app.domains.catalog.infrastructure.repositories import (
    SQLAlchemyCategoryRepository,
    SQLAlchemyProductRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer


class CatalogContainer:
    """
    Catalog domain container.

    Services share the base container's cache; repositories are
    request-scoped.
    """

    def __init__(self, base: "BaseContainer"):
        self._base = base

    # ==================== REPOSITORIES ====================

    def create_category_repository(self, db: AsyncSession) -> SQLAlchemyCategoryRepository:
        return SQLAlchemyCategoryRepository(session=db)

    def create_product_repository(self, db: AsyncSession) -> SQLAlchemyProductRepository:
        return SQLAlchemyProductRepository(session=db)

    # ==================== SERVICES ====================

    def create_category_service(self, db: AsyncSession) -> CategoryService:
        return CategoryService(
            category_repository=self.create_category_repository(db),
            cache=self._base.get_cache(),
            outbox=get_outbox(db),
        )

    def create_product_service(self, db: AsyncSession) -> ProductService:
        return ProductService(
            product_repository=self.create_product_repository(db),
            category_repository=self.create_category_repository(db),
            cache=self._base.get_cache(),
            outbox=get_outbox(db),
        )
