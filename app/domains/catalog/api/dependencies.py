"""
Catalog API Dependencies
"""

from uuid import UUID

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.catalog.application.dto import ProductFilters
from app.domains.catalog.application.services import CategoryService, ProductService
from app.domains.catalog.domain.value_objects import ProductSort


def get_category_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CategoryService:
    return container.catalog.create_category_service(db)


def get_product_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ProductService:
    return container.catalog.create_product_service(db)


def get_product_filters(
    category: UUID | None = Query(None, description="Category or sub-category id"),  # noqa: B008
    brand: str | None = Query(None),  # noqa: B008
    min_price: float | None = Query(None, alias="minPrice", ge=0),  # noqa: B008
    max_price: float | None = Query(None, alias="maxPrice", ge=0),  # noqa: B008
    status: str | None = Query("active"),  # noqa: B008
    visibility: str | None = Query(None),  # noqa: B008
    is_featured: bool | None = Query(None, alias="isFeatured"),  # noqa: B008
    is_on_sale: bool | None = Query(None, alias="isOnSale"),  # noqa: B008
    is_new_product: bool | None = Query(None, alias="isNewProduct"),  # noqa: B008
    tags: str | None = Query(None, description="Comma separated; any match"),  # noqa: B008
    in_stock: bool | None = Query(None, alias="inStock"),  # noqa: B008
    search: str | None = Query(None),  # noqa: B008
    sort: ProductSort = Query(ProductSort.NEWEST),  # noqa: B008
) -> ProductFilters:
    return ProductFilters(
        category_id=category,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        status=status or None,
        visibility=visibility,
        is_featured=is_featured,
        is_on_sale=is_on_sale,
        is_new_product=is_new_product,
        tags=[t.strip() for t in tags.split(",") if t.strip()] if tags else [],
        in_stock=in_stock,
        search=search,
        sort=sort,
    )


__all__ = ["get_category_service", "get_product_service", "get_product_filters"]
