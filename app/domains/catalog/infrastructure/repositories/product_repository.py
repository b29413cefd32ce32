"""
Product Repository Implementation

SQLAlchemy implementation of IProductRepository. Stock changes go through a
guarded UPDATE so concurrent orders cannot oversell.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, exists, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination, utcnow
from app.domains.catalog.application.dto import ProductFilters
from app.domains.catalog.application.ports import IProductRepository
from app.domains.catalog.domain.entities import Product, ProductVariant
from app.domains.catalog.domain.entities.product import BEST_SELLER_SALES, TOP_RATED_RATING, TOP_RATED_REVIEWS
from app.domains.catalog.domain.value_objects import (
    DiscountType,
    ProductSort,
    ProductStatus,
    ProductVisibility,
)
from app.models.db import ProductModel, ProductVariantModel

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    ProductSort.NEWEST: [ProductModel.created_at.desc()],
    ProductSort.OLDEST: [ProductModel.created_at.asc()],
    ProductSort.PRICE_LOW: [ProductModel.price.asc()],
    ProductSort.PRICE_HIGH: [ProductModel.price.desc()],
    ProductSort.NAME_ASC: [ProductModel.name.asc()],
    ProductSort.NAME_DESC: [ProductModel.name.desc()],
    ProductSort.BESTSELLING: [ProductModel.sales_count.desc()],
    ProductSort.RATING: [ProductModel.rating.desc(), ProductModel.review_count.desc()],
}

SHELF_CONDITIONS = {
    "featured": ProductModel.is_featured.is_(True),
    "new": ProductModel.is_new_product.is_(True),
    "on_sale": ProductModel.is_on_sale.is_(True),
}


class SQLAlchemyProductRepository(IProductRepository):
    """
    SQLAlchemy implementation of product repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, product_id: UUID) -> ProductModel | None:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, product_id: UUID) -> Product | None:
        model = await self._get_model(product_id)
        return self._to_entity(model) if model else None

    async def get_by_slug(self, slug: str) -> Product | None:
        result = await self.session.execute(select(ProductModel).where(ProductModel.slug == slug))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, product_ids: list[UUID]) -> list[Product]:
        if not product_ids:
            return []
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.id.in_(product_ids))
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(ProductModel.id).where(ProductModel.slug == slug)
        if exclude_id:
            stmt = stmt.where(ProductModel.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    async def sku_exists(self, sku: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(ProductModel.id).where(ProductModel.sku == sku)
        if exclude_id:
            stmt = stmt.where(ProductModel.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    def _build_conditions(self, filters: ProductFilters) -> list:
        conditions = []
        if filters.status:
            conditions.append(ProductModel.status == filters.status)
        if filters.category_id:
            conditions.append(
                or_(
                    ProductModel.category_id == filters.category_id,
                    ProductModel.sub_category_id == filters.category_id,
                )
            )
        if filters.brand:
            conditions.append(ProductModel.brand.ilike(f"%{filters.brand}%"))
        if filters.min_price is not None:
            conditions.append(ProductModel.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(ProductModel.price <= filters.max_price)
        if filters.visibility:
            conditions.append(ProductModel.visibility == filters.visibility)
        if filters.is_featured is not None:
            conditions.append(ProductModel.is_featured.is_(filters.is_featured))
        if filters.is_on_sale is not None:
            conditions.append(ProductModel.is_on_sale.is_(filters.is_on_sale))
        if filters.is_new_product is not None:
            conditions.append(ProductModel.is_new_product.is_(filters.is_new_product))
        if filters.tags:
            conditions.append(ProductModel.tags.overlap(filters.tags))
        if filters.in_stock:
            conditions.append(
                or_(
                    ProductModel.track_quantity.is_(False),
                    ProductModel.quantity > 0,
                    ProductModel.allow_backorder.is_(True),
                )
            )
        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(
                or_(
                    ProductModel.name.ilike(pattern),
                    ProductModel.description.ilike(pattern),
                    ProductModel.brand.ilike(pattern),
                    func.array_to_string(ProductModel.tags, " ").ilike(pattern),
                )
            )
        return conditions

    async def search(self, filters: ProductFilters, pagination: Pagination) -> PaginatedResult[Product]:
        conditions = self._build_conditions(filters)
        total = (await self.session.execute(select(func.count(ProductModel.id)).where(*conditions))).scalar_one()

        order_by = SORT_ORDERS.get(ProductSort(filters.sort), SORT_ORDERS[ProductSort.NEWEST])
        result = await self.session.execute(
            select(ProductModel)
            .where(*conditions)
            .order_by(*order_by)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        products = [self._to_entity(m) for m in result.scalars().all()]
        return PaginatedResult(items=products, total=total, pagination=pagination)

    async def list_flagged(self, flag: str, limit: int) -> list[Product]:
        stmt = select(ProductModel).where(ProductModel.status == ProductStatus.ACTIVE.value)
        if flag == "bestseller":
            stmt = stmt.order_by(ProductModel.sales_count.desc())
        else:
            stmt = stmt.where(SHELF_CONDITIONS[flag]).order_by(ProductModel.created_at.desc())
        result = await self.session.execute(stmt.limit(limit))
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_related(self, product: Product, limit: int) -> list[Product]:
        result = await self.session.execute(
            select(ProductModel)
            .where(
                ProductModel.category_id == product.category_id,
                ProductModel.id != product.id,
                ProductModel.status == ProductStatus.ACTIVE.value,
            )
            .order_by(ProductModel.sales_count.desc())
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, product: Product) -> Product:
        try:
            model = ProductModel(id=product.id)
            self._apply(model, product)
            self.session.add(model)
            await self.session.flush()
            return self._to_entity(model)
        except Exception as e:
            logger.error(f"Error creating product {product.slug}: {e}")
            raise

    async def save(self, product: Product) -> Product:
        model = await self._get_model(product.id)  # type: ignore[arg-type]
        if model is None:
            return await self.create(product)
        self._apply(model, product)
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, product_id: UUID) -> None:
        model = await self._get_model(product_id)
        if model is not None:
            await self.session.delete(model)
            await self.session.flush()

    async def bulk_update_status(self, product_ids: list[UUID], status: str) -> int:
        values: dict = {"status": status, "updated_at": utcnow()}
        if status == ProductStatus.ACTIVE.value:
            values["published_at"] = func.coalesce(ProductModel.published_at, utcnow())
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id.in_(product_ids))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def bulk_delete(self, product_ids: list[UUID]) -> int:
        result = await self.session.execute(
            delete(ProductModel)
            .where(ProductModel.id.in_(product_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def increment_view_count(self, product_id: UUID) -> None:
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(view_count=ProductModel.view_count + 1)
            .execution_options(synchronize_session=False)
        )

    async def adjust_stock(self, product_id: UUID, delta: int, variant_id: UUID | None = None) -> bool:
        unguarded = or_(ProductModel.allow_backorder.is_(True), ProductModel.track_quantity.is_(False))

        if variant_id:
            stmt = update(ProductVariantModel).where(
                ProductVariantModel.id == variant_id,
                ProductVariantModel.product_id == product_id,
            )
            if delta < 0:
                stmt = stmt.where(
                    or_(
                        ProductVariantModel.quantity + delta >= 0,
                        exists().where(ProductModel.id == product_id, unguarded),
                    )
                )
            stmt = stmt.values(quantity=ProductVariantModel.quantity + delta)
        else:
            stmt = update(ProductModel).where(ProductModel.id == product_id)
            if delta < 0:
                stmt = stmt.where(or_(ProductModel.quantity + delta >= 0, unguarded))
            stmt = stmt.values(quantity=ProductModel.quantity + delta, updated_at=utcnow())

        result = await self.session.execute(stmt.execution_options(synchronize_session=False))
        applied = bool(result.rowcount)
        if not applied:
            logger.warning(f"Stock change of {delta} refused for product {product_id} (variant {variant_id})")
        return applied

    async def increment_sales(self, product_id: UUID, quantity: int) -> None:
        new_count = ProductModel.sales_count + quantity
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(sales_count=new_count, is_best_seller=new_count >= BEST_SELLER_SALES)
            .execution_options(synchronize_session=False)
        )

    async def adjust_wishlist_count(self, product_id: UUID, delta: int) -> None:
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(wishlist_count=func.greatest(ProductModel.wishlist_count + delta, 0))
            .execution_options(synchronize_session=False)
        )

    async def update_rating(self, product_id: UUID, rating: float, review_count: int) -> None:
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                rating=rating,
                review_count=review_count,
                is_top_rated=rating >= TOP_RATED_RATING and review_count >= TOP_RATED_REVIEWS,
            )
            .execution_options(synchronize_session=False)
        )

    async def get_stats(self) -> dict[str, int]:
        async def count(*conditions) -> int:
            stmt = select(func.count(ProductModel.id)).where(*conditions)
            return (await self.session.execute(stmt)).scalar_one()

        tracked = ProductModel.track_quantity.is_(True)
        return {
            "total": await count(),
            "active": await count(ProductModel.status == ProductStatus.ACTIVE.value),
            "draft": await count(ProductModel.status == ProductStatus.DRAFT.value),
            "archived": await count(ProductModel.status == ProductStatus.ARCHIVED.value),
            "outOfStock": await count(tracked, ProductModel.quantity <= 0),
            "lowStock": await count(
                tracked,
                ProductModel.quantity > 0,
                ProductModel.quantity <= ProductModel.low_stock_threshold,
            ),
        }

    # Mapping methods

    def _apply(self, model: ProductModel, product: Product) -> None:
        model.name = product.name
        model.slug = product.slug
        model.description = product.description
        model.short_description = product.short_description
        model.images = list(product.images)
        model.thumbnail = product.thumbnail
        model.price = product.price
        model.compare_price = product.compare_price
        model.cost_price = product.cost_price
        model.discount_type = product.discount_type.value if product.discount_type else None
        model.discount_value = product.discount_value
        model.sale_start_date = product.sale_start_date
        model.sale_end_date = product.sale_end_date
        model.is_on_sale = product.is_on_sale
        model.sku = product.sku
        model.barcode = product.barcode
        model.quantity = product.quantity
        model.low_stock_threshold = product.low_stock_threshold
        model.track_quantity = product.track_quantity
        model.allow_backorder = product.allow_backorder
        model.category_id = product.category_id
        model.sub_category_id = product.sub_category_id
        model.brand = product.brand
        model.tags = list(product.tags)
        model.attributes = list(product.attributes)
        model.has_variants = product.has_variants
        model.weight = product.weight
        model.dimensions = product.dimensions
        model.status = product.status.value
        model.visibility = product.visibility.value
        model.is_featured = product.is_featured
        model.is_new_product = product.is_new_product
        model.is_best_seller = product.is_best_seller
        model.is_top_rated = product.is_top_rated
        model.meta_title = product.meta_title
        model.meta_description = product.meta_description
        model.meta_keywords = list(product.meta_keywords)
        model.published_at = product.published_at
        self._apply_variants(model, product.variants)

    def _apply_variants(self, model: ProductModel, variants: list[ProductVariant]) -> None:
        existing = {v.id: v for v in (model.variants or [])}
        rows = []
        for variant in variants:
            row = existing.get(variant.id) or ProductVariantModel(id=variant.id)
            row.name = variant.name
            row.sku = variant.sku
            row.price = variant.price
            row.compare_price = variant.compare_price
            row.quantity = variant.quantity
            row.attributes = dict(variant.attributes)
            row.image = variant.image
            row.is_active = variant.is_active
            rows.append(row)
        model.variants = rows

    def _to_entity(self, model: ProductModel) -> Product:
        product = Product(
            id=model.id,
            name=model.name,
            slug=model.slug,
            description=model.description or "",
            short_description=model.short_description,
            images=list(model.images or []),
            thumbnail=model.thumbnail,
            price=float(model.price or 0),
            compare_price=model.compare_price,
            cost_price=model.cost_price,
            discount_type=DiscountType(model.discount_type) if model.discount_type else None,
            discount_value=float(model.discount_value or 0),
            sale_start_date=model.sale_start_date,
            sale_end_date=model.sale_end_date,
            is_on_sale=bool(model.is_on_sale),
            sku=model.sku,
            barcode=model.barcode,
            quantity=model.quantity or 0,
            low_stock_threshold=model.low_stock_threshold if model.low_stock_threshold is not None else 5,
            track_quantity=bool(model.track_quantity),
            allow_backorder=bool(model.allow_backorder),
            category_id=model.category_id,
            sub_category_id=model.sub_category_id,
            brand=model.brand,
            tags=list(model.tags or []),
            attributes=list(model.attributes or []),
            has_variants=bool(model.has_variants),
            variants=[
                ProductVariant(
                    id=v.id,
                    name=v.name,
                    sku=v.sku,
                    price=float(v.price),
                    compare_price=v.compare_price,
                    quantity=v.quantity or 0,
                    attributes=dict(v.attributes or {}),
                    image=v.image,
                    is_active=bool(v.is_active),
                )
                for v in (model.variants or [])
            ],
            weight=model.weight,
            dimensions=model.dimensions,
            status=ProductStatus(model.status or "draft"),
            visibility=ProductVisibility(model.visibility or "visible"),
            is_featured=bool(model.is_featured),
            is_new_product=bool(model.is_new_product),
            is_best_seller=bool(model.is_best_seller),
            is_top_rated=bool(model.is_top_rated),
            rating=float(model.rating or 0),
            review_count=model.review_count or 0,
            sales_count=model.sales_count or 0,
            view_count=model.view_count or 0,
            wishlist_count=model.wishlist_count or 0,
            meta_title=model.meta_title,
            meta_description=model.meta_description,
            meta_keywords=list(model.meta_keywords or []),
            published_at=model.published_at,
        )
        if model.created_at is not None:
            product.created_at = model.created_at
        if model.updated_at is not None:
            product.updated_at = model.updated_at
        return product
