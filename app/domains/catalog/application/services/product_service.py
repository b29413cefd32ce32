"""
Product Service

Product listing, storefront shelves, admin CRUD and stock updates.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.cache import CacheKeys
from app.core.domain import (
    BusinessRuleViolationException,
    DuplicateEntityException,
    EntityNotFoundException,
    EventOutbox,
    PaginatedResult,
    Pagination,
    Slug,
    ValidationException,
)
from app.domains.catalog.application.dto import ProductFilters
from app.domains.catalog.application.ports import ICacheService, ICategoryRepository, IProductRepository
from app.domains.catalog.domain.entities import Product, ProductVariant
from app.domains.catalog.domain.events import ProductChanged
from app.domains.catalog.domain.value_objects import (
    DiscountType,
    ProductStatus,
    ProductVisibility,
    StockOperation,
)

logger = logging.getLogger(__name__)

SHELF_LIMIT = 8
RELATED_LIMIT = 4
SHELF_TTL = 300

EDITABLE_FIELDS = (
    "name",
    "description",
    "short_description",
    "images",
    "thumbnail",
    "price",
    "compare_price",
    "cost_price",
    "discount_value",
    "sale_start_date",
    "sale_end_date",
    "barcode",
    "quantity",
    "low_stock_threshold",
    "track_quantity",
    "allow_backorder",
    "category_id",
    "sub_category_id",
    "brand",
    "tags",
    "attributes",
    "weight",
    "dimensions",
    "is_featured",
    "is_new_product",
    "meta_title",
    "meta_description",
    "meta_keywords",
)


class ProductService:
    def __init__(
        self,
        product_repository: IProductRepository,
        category_repository: ICategoryRepository,
        cache: ICacheService,
        outbox: EventOutbox,
    ):
        self.product_repository = product_repository
        self.category_repository = category_repository
        self.cache = cache
        self.outbox = outbox

    # Reads

    async def list_products(self, filters: ProductFilters, pagination: Pagination) -> PaginatedResult[Product]:
        return await self.product_repository.search(filters, pagination)

    async def search_products(self, query: str, pagination: Pagination) -> PaginatedResult[Product]:
        return await self.product_repository.search(ProductFilters(search=query), pagination)

    async def get_by_category(
        self, category_id: UUID, pagination: Pagination, filters: ProductFilters | None = None
    ) -> PaginatedResult[Product]:
        filters = filters or ProductFilters()
        filters.category_id = category_id
        return await self.product_repository.search(filters, pagination)

    async def get_product(self, product_id: UUID, track_view: bool = False) -> Product:
        product = await self.product_repository.get_by_id(product_id)
        if not product:
            raise EntityNotFoundException("Product", product_id, "Product not found")
        if track_view:
            await self.product_repository.increment_view_count(product_id)
            product.view_count += 1
        return product

    async def get_by_slug(self, slug: str, track_view: bool = True) -> Product:
        product = await self.product_repository.get_by_slug(slug)
        if not product:
            raise EntityNotFoundException("Product", slug, "Product not found")
        if track_view:
            await self.product_repository.increment_view_count(product.id)  # type: ignore[arg-type]
            product.view_count += 1
        return product

    async def get_shelf(self, flag: str, limit: int = SHELF_LIMIT) -> list[dict[str, Any]]:
        """Storefront shelf (featured, new, bestseller, on_sale), cached briefly."""
        key = CacheKeys.build(CacheKeys.PRODUCTS, flag, limit)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        products = [p.to_dict() for p in await self.product_repository.list_flagged(flag, limit)]
        await self.cache.set(key, products, ttl=SHELF_TTL)
        return products

    async def get_related(self, product_id: UUID, limit: int = RELATED_LIMIT) -> list[Product]:
        product = await self.get_product(product_id)
        if not product.category_id:
            return []
        return await self.product_repository.list_related(product, limit)

    async def get_stats(self) -> dict[str, int]:
        return await self.product_repository.get_stats()

    # Writes

    async def _ensure_unique(self, slug: str | None, sku: str | None, exclude_id: UUID | None = None) -> None:
        if slug and await self.product_repository.slug_exists(slug, exclude_id=exclude_id):
            raise DuplicateEntityException("Product", "slug", slug, "Product with this slug already exists")
        if sku and await self.product_repository.sku_exists(sku, exclude_id=exclude_id):
            raise DuplicateEntityException("Product", "sku", sku, "Product with this SKU already exists")

    async def _ensure_category(self, category_id: UUID | None) -> None:
        if category_id and not await self.category_repository.get_by_id(category_id):
            raise EntityNotFoundException("Category", category_id, "Category not found")

    @staticmethod
    def _build_variants(raw: list[dict[str, Any]]) -> list[ProductVariant]:
        skus = [v["sku"] for v in raw]
        if len(skus) != len(set(skus)):
            raise ValidationException("Variant SKUs must be unique within a product", field="variants")
        return [ProductVariant(**v) for v in raw]

    @staticmethod
    def _apply_enums(product: Product, data: dict[str, Any]) -> None:
        if data.get("status") is not None:
            product.status = ProductStatus(data["status"])
        if data.get("visibility") is not None:
            product.visibility = ProductVisibility(data["visibility"])
        if "discount_type" in data:
            product.discount_type = DiscountType(data["discount_type"]) if data["discount_type"] else None

    async def create_product(self, data: dict[str, Any]) -> Product:
        slug = Slug.normalize(data["slug"]) if data.get("slug") else Slug.from_name(data["name"]).value
        await self._ensure_unique(slug, data.get("sku"))
        await self._ensure_category(data.get("category_id"))

        product = Product.new(
            slug=slug,
            sku=data.get("sku"),
            variants=self._build_variants(data.get("variants") or []),
            **{key: data[key] for key in EDITABLE_FIELDS if data.get(key) is not None},
        )
        self._apply_enums(product, data)
        product.refresh_derived_flags()

        product = await self.product_repository.create(product)
        if product.category_id:
            await self.category_repository.refresh_product_count(product.category_id)
        self.outbox.record(ProductChanged(product_id=product.id, action="created"))
        logger.info(f"Product created: {product.slug} ({product.status.value})")
        return product

    async def update_product(self, product_id: UUID, changes: dict[str, Any]) -> Product:
        product = await self.get_product(product_id)
        previous_category = product.category_id

        slug = Slug.normalize(changes["slug"]) if changes.get("slug") else None
        sku = changes.get("sku")
        await self._ensure_unique(
            slug if slug != product.slug else None,
            sku if sku != product.sku else None,
            exclude_id=product.id,
        )
        if "category_id" in changes and changes["category_id"] != product.category_id:
            await self._ensure_category(changes["category_id"])

        if slug:
            product.slug = slug
        if "sku" in changes:
            product.sku = sku
        for key in EDITABLE_FIELDS:
            if key in changes:
                setattr(product, key, changes[key])
        if changes.get("variants") is not None:
            product.variants = self._build_variants(changes["variants"])
        self._apply_enums(product, changes)
        product.refresh_derived_flags()

        product = await self.product_repository.save(product)
        for category_id in {previous_category, product.category_id} - {None}:
            await self.category_repository.refresh_product_count(category_id)  # type: ignore[arg-type]
        self.outbox.record(ProductChanged(product_id=product.id, action="updated"))
        return product

    async def delete_product(self, product_id: UUID) -> None:
        product = await self.get_product(product_id)
        await self.product_repository.delete(product_id)
        if product.category_id:
            await self.category_repository.refresh_product_count(product.category_id)
        self.outbox.record(ProductChanged(product_id=product_id, action="deleted"))
        logger.info(f"Product deleted: {product.slug}")

    async def bulk_update_status(self, product_ids: list[UUID], status: str) -> int:
        updated = await self.product_repository.bulk_update_status(product_ids, ProductStatus(status).value)
        self.outbox.record(ProductChanged(action="bulk_status"))
        logger.info(f"Bulk status {status}: {updated} of {len(product_ids)} products")
        return updated

    async def bulk_delete(self, product_ids: list[UUID]) -> int:
        deleted = await self.product_repository.bulk_delete(product_ids)
        self.outbox.record(ProductChanged(action="bulk_delete"))
        logger.info(f"Bulk delete: {deleted} of {len(product_ids)} products")
        return deleted

    async def update_stock(
        self,
        product_id: UUID,
        quantity: int,
        operation: str = StockOperation.ADD.value,
        variant_id: UUID | None = None,
    ) -> Product:
        """
        Add or subtract stock atomically.

        Raises:
            BusinessRuleViolationException: Subtracting below zero without backorder
        """
        product = await self.get_product(product_id)
        if variant_id and not product.find_variant(variant_id=variant_id):
            raise EntityNotFoundException("ProductVariant", variant_id, "Invalid product variant")

        delta = -quantity if StockOperation(operation) == StockOperation.SUBTRACT else quantity
        if not await self.product_repository.adjust_stock(product_id, delta, variant_id=variant_id):
            raise BusinessRuleViolationException("insufficient_stock", "Insufficient stock")

        self.outbox.record(ProductChanged(product_id=product_id, action="stock"))
        return await self.get_product(product_id)


__all__ = ["ProductService"]
