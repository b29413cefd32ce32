"""
Catalog API Routes

Public catalog reads plus admin management of categories and products.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_pagination, require_admin
from app.api.responses import paginated_response, success_response
from app.core.domain import Pagination
from app.domains.catalog.api.dependencies import (
    get_category_service,
    get_product_filters,
    get_product_service,
)
from app.domains.catalog.api.schemas import (
    BulkDeleteBody,
    BulkStatusBody,
    CategoryCreate,
    CategoryReorderBody,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
    StockUpdateBody,
)
from app.domains.catalog.application.dto import ProductFilters
from app.domains.catalog.application.services import CategoryService, ProductService

logger = logging.getLogger(__name__)

categories_router = APIRouter(prefix="/categories", tags=["Categories"])
products_router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Category Endpoints
# ============================================================================


@categories_router.get("")
async def list_categories(
    include_inactive: bool = Query(False, alias="includeInactive"),  # noqa: B008
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    return success_response(await service.list_categories(include_inactive), "Categories retrieved successfully")


@categories_router.get("/tree")
async def category_tree(service: CategoryService = Depends(get_category_service)):  # noqa: B008
    return success_response(await service.get_tree(), "Category tree retrieved successfully")


@categories_router.get("/root")
async def root_categories(service: CategoryService = Depends(get_category_service)):  # noqa: B008
    categories = await service.get_roots()
    return success_response([c.to_dict() for c in categories], "Root categories retrieved successfully")


@categories_router.get("/featured")
async def featured_categories(
    limit: int = Query(6, ge=1, le=50),  # noqa: B008
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    categories = await service.get_featured(limit)
    return success_response([c.to_dict() for c in categories], "Featured categories retrieved successfully")


@categories_router.get("/menu")
async def menu_categories(service: CategoryService = Depends(get_category_service)):  # noqa: B008
    return success_response(await service.get_menu(), "Menu categories retrieved successfully")


@categories_router.get("/home")
async def home_categories(service: CategoryService = Depends(get_category_service)):  # noqa: B008
    categories = await service.get_home()
    return success_response([c.to_dict() for c in categories], "Home categories retrieved successfully")


@categories_router.get("/slug/{slug}")
async def category_by_slug(slug: str, service: CategoryService = Depends(get_category_service)):  # noqa: B008
    category = await service.get_by_slug(slug)
    return success_response(category.to_dict(), "Category retrieved successfully")


@categories_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_category(
    body: CategoryCreate,
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    category = await service.create_category(body.model_dump())
    return success_response(category.to_dict(), "Category created successfully")


@categories_router.patch("/reorder", dependencies=[Depends(require_admin)])
async def reorder_categories(
    body: CategoryReorderBody,
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    updated = await service.reorder([(c.id, c.order) for c in body.categories])
    return success_response({"updated": updated}, "Categories reordered successfully")


@categories_router.get("/{category_id}")
async def get_category(category_id: UUID, service: CategoryService = Depends(get_category_service)):  # noqa: B008
    category = await service.get_category(category_id)
    return success_response(category.to_dict(), "Category retrieved successfully")


@categories_router.get("/{category_id}/children")
async def category_children(category_id: UUID, service: CategoryService = Depends(get_category_service)):  # noqa: B008
    children = await service.get_children(category_id)
    return success_response([c.to_dict() for c in children], "Child categories retrieved successfully")


@categories_router.get("/{category_id}/with-children")
async def category_with_children(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    return success_response(await service.get_with_children(category_id), "Category retrieved successfully")


@categories_router.get("/{category_id}/breadcrumbs")
async def category_breadcrumbs(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    return success_response(await service.get_breadcrumbs(category_id), "Breadcrumbs retrieved successfully")


@categories_router.patch("/{category_id}", dependencies=[Depends(require_admin)])
async def update_category(
    category_id: UUID,
    body: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    category = await service.update_category(category_id, body.model_dump(exclude_unset=True))
    return success_response(category.to_dict(), "Category updated successfully")


@categories_router.patch("/{category_id}/product-count", dependencies=[Depends(require_admin)])
async def refresh_category_product_count(
    category_id: UUID,
    service: CategoryService = Depends(get_category_service),  # noqa: B008
):
    count = await service.refresh_product_count(category_id)
    return success_response({"productCount": count}, "Product count updated successfully")


@categories_router.delete("/{category_id}", dependencies=[Depends(require_admin)])
async def delete_category(category_id: UUID, service: CategoryService = Depends(get_category_service)):  # noqa: B008
    await service.delete_category(category_id)
    return success_response(None, "Category deleted successfully")


# ============================================================================
# Product Endpoints
# ============================================================================


@products_router.get("")
async def list_products(
    filters: ProductFilters = Depends(get_product_filters),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    result = await service.list_products(filters, pagination)
    return paginated_response(result, "Products retrieved successfully")


@products_router.get("/search")
async def search_products(
    q: str = Query(..., min_length=1, description="Search text"),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    result = await service.search_products(q, pagination)
    return paginated_response(result, "Search results retrieved successfully")


@products_router.get("/featured")
async def featured_products(
    limit: int = Query(8, ge=1, le=50),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    return success_response(await service.get_shelf("featured", limit), "Featured products retrieved successfully")


@products_router.get("/new-arrivals")
async def new_arrivals(
    limit: int = Query(8, ge=1, le=50),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    return success_response(await service.get_shelf("new", limit), "New arrivals retrieved successfully")


@products_router.get("/best-sellers")
async def best_sellers(
    limit: int = Query(8, ge=1, le=50),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    return success_response(await service.get_shelf("bestseller", limit), "Best sellers retrieved successfully")


@products_router.get("/on-sale")
async def on_sale_products(
    limit: int = Query(8, ge=1, le=50),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    return success_response(await service.get_shelf("on_sale", limit), "Sale products retrieved successfully")


@products_router.get("/stats", dependencies=[Depends(require_admin)])
async def product_stats(service: ProductService = Depends(get_product_service)):  # noqa: B008
    return success_response(await service.get_stats(), "Product statistics retrieved successfully")


@products_router.get("/category/{category_id}")
async def products_by_category(
    category_id: UUID,
    filters: ProductFilters = Depends(get_product_filters),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    result = await service.get_by_category(category_id, pagination, filters)
    return paginated_response(result, "Products retrieved successfully")


@products_router.get("/slug/{slug}")
async def product_by_slug(slug: str, service: ProductService = Depends(get_product_service)):  # noqa: B008
    product = await service.get_by_slug(slug)
    return success_response(product.to_dict(), "Product retrieved successfully")


@products_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_product(
    body: ProductCreate,
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    product = await service.create_product(body.to_data())
    return success_response(product.to_dict(), "Product created successfully")


@products_router.patch("/bulk/status", dependencies=[Depends(require_admin)])
async def bulk_update_status(
    body: BulkStatusBody,
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    updated = await service.bulk_update_status(body.product_ids, body.status)
    return success_response({"modifiedCount": updated}, f"{updated} products updated successfully")


@products_router.post("/bulk/delete", dependencies=[Depends(require_admin)])
async def bulk_delete(
    body: BulkDeleteBody,
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    deleted = await service.bulk_delete(body.product_ids)
    return success_response({"deletedCount": deleted}, f"{deleted} products deleted successfully")


@products_router.get("/{product_id}")
async def get_product(product_id: UUID, service: ProductService = Depends(get_product_service)):  # noqa: B008
    product = await service.get_product(product_id, track_view=True)
    return success_response(product.to_dict(), "Product retrieved successfully")


@products_router.get("/{product_id}/related")
async def related_products(
    product_id: UUID,
    limit: int = Query(4, ge=1, le=20),  # noqa: B008
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    products = await service.get_related(product_id, limit)
    return success_response([p.to_dict() for p in products], "Related products retrieved successfully")


@products_router.patch("/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    product = await service.update_product(product_id, body.to_data(exclude_unset=True))
    return success_response(product.to_dict(), "Product updated successfully")


@products_router.patch("/{product_id}/stock", dependencies=[Depends(require_admin)])
async def update_stock(
    product_id: UUID,
    body: StockUpdateBody,
    service: ProductService = Depends(get_product_service),  # noqa: B008
):
    product = await service.update_stock(product_id, body.quantity, body.operation, body.variant_id)
    return success_response(product.to_dict(), "Stock updated successfully")


@products_router.delete("/{product_id}", dependencies=[Depends(require_admin)])
async def delete_product(product_id: UUID, service: ProductService = Depends(get_product_service)):  # noqa: B008
    await service.delete_product(product_id)
    return success_response(None, "Product deleted successfully")


__all__ = ["categories_router", "products_router"]
