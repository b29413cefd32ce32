"""
Product Entity for the catalog.

Stock and price virtuals (`is_in_stock`, `is_low_stock`,
`discount_percentage`, `final_price`) are computed, never stored.
`refresh_derived_flags()` runs before every save.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import (
    AggregateRoot,
    BusinessRuleViolationException,
    iso,
    round_money,
    sid,
    utcnow,
)

from ..value_objects import DiscountType, ProductStatus, ProductVisibility

BEST_SELLER_SALES = 100
TOP_RATED_RATING = 4.5
TOP_RATED_REVIEWS = 10
NEW_PRODUCT_DAYS = 30


@dataclass
class ProductVariant:
    """SKU-level combination with its own price and stock."""

    name: str
    sku: str
    price: float
    quantity: int = 0
    compare_price: float | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    image: str | None = None
    is_active: bool = True
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "sku": self.sku,
            "price": self.price,
            "comparePrice": self.compare_price,
            "quantity": self.quantity,
            "attributes": self.attributes,
            "image": self.image,
            "isActive": self.is_active,
        }


@dataclass
class Product(AggregateRoot[UUID]):
    """
    Product aggregate root.

    Variants belong to the aggregate but are persisted in their own table so
    stock updates on a single variant stay atomic.
    """

    name: str = ""
    slug: str = ""
    description: str = ""
    short_description: str | None = None
    images: list[dict[str, Any]] = field(default_factory=list)
    thumbnail: str | None = None

    price: float = 0.0
    compare_price: float | None = None
    cost_price: float | None = None
    discount_type: DiscountType | None = None
    discount_value: float = 0.0
    sale_start_date: datetime | None = None
    sale_end_date: datetime | None = None
    is_on_sale: bool = False

    sku: str | None = None
    barcode: str | None = None
    quantity: int = 0
    low_stock_threshold: int = 5
    track_quantity: bool = True
    allow_backorder: bool = False

    category_id: UUID | None = None
    sub_category_id: UUID | None = None
    brand: str | None = None
    tags: list[str] = field(default_factory=list)
    attributes: list[dict[str, Any]] = field(default_factory=list)
    has_variants: bool = False
    variants: list[ProductVariant] = field(default_factory=list)

    weight: float | None = None
    dimensions: dict[str, float] | None = None

    status: ProductStatus = ProductStatus.DRAFT
    visibility: ProductVisibility = ProductVisibility.VISIBLE
    is_featured: bool = False
    is_new_product: bool = True
    is_best_seller: bool = False
    is_top_rated: bool = False

    rating: float = 0.0
    review_count: int = 0
    sales_count: int = 0
    view_count: int = 0
    wishlist_count: int = 0

    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: list[str] = field(default_factory=list)
    published_at: datetime | None = None

    @classmethod
    def new(cls, **kwargs: Any) -> "Product":
        return cls(id=uuid4(), **kwargs)

    # Virtuals

    @property
    def is_in_stock(self) -> bool:
        if not self.track_quantity:
            return True
        if self.has_variants and self.variants:
            return any(v.is_active and v.quantity > 0 for v in self.variants)
        return self.quantity > 0 or self.allow_backorder

    @property
    def is_low_stock(self) -> bool:
        return self.track_quantity and 0 < self.quantity <= self.low_stock_threshold

    @property
    def discount_percentage(self) -> int:
        if self.compare_price and self.compare_price > self.price:
            return round((self.compare_price - self.price) / self.compare_price * 100)
        return 0

    @property
    def final_price(self) -> float:
        if not self.is_on_sale or not self.discount_type or self.discount_value <= 0:
            return self.price
        if self.discount_type == DiscountType.PERCENTAGE:
            return round_money(self.price * (1 - self.discount_value / 100))
        return round_money(max(0.0, self.price - self.discount_value))

    @property
    def total_stock(self) -> int:
        if self.has_variants and self.variants:
            return sum(v.quantity for v in self.variants)
        return self.quantity

    def find_variant(self, variant_id: UUID | None = None, sku: str | None = None) -> ProductVariant | None:
        for variant in self.variants:
            if (variant_id and variant.id == variant_id) or (sku and variant.sku == sku):
                return variant
        return None

    def is_purchasable(self) -> bool:
        return self.status.is_available_for_sale()

    def available_quantity(self, variant: ProductVariant | None = None) -> int:
        return variant.quantity if variant else self.quantity

    def can_fulfil(self, requested: int, variant: ProductVariant | None = None) -> bool:
        """Whether `requested` units can be sold given stock tracking and backorder rules."""
        if not self.track_quantity or self.allow_backorder:
            return True
        return requested <= self.available_quantity(variant)

    # Mutations

    def refresh_derived_flags(self, now: datetime | None = None) -> None:
        """Recompute the flags a save derives from other fields."""
        now = now or utcnow()
        if self.status == ProductStatus.ACTIVE and self.published_at is None:
            self.published_at = now
        if self.sale_start_date and self.sale_end_date:
            self.is_on_sale = self.sale_start_date <= now <= self.sale_end_date
        self.is_best_seller = self.sales_count >= BEST_SELLER_SALES
        self.is_top_rated = self.rating >= TOP_RATED_RATING and self.review_count >= TOP_RATED_REVIEWS
        if self.is_new_product and self.created_at and now - self.created_at > timedelta(days=NEW_PRODUCT_DAYS):
            self.is_new_product = False
        self.has_variants = bool(self.variants)
        self.touch()

    def apply_stock_change(self, quantity: int, subtract: bool) -> None:
        """
        In-memory stock change (the repository applies the same rule atomically).

        Raises:
            BusinessRuleViolationException: Subtracting below zero without backorder
        """
        new_quantity = self.quantity - quantity if subtract else self.quantity + quantity
        if new_quantity < 0 and not self.allow_backorder:
            raise BusinessRuleViolationException("insufficient_stock", "Insufficient stock")
        self.quantity = new_quantity
        self.touch()

    def to_summary(self) -> dict[str, Any]:
        """Compact representation embedded in carts, wishlists and listings."""
        return {
            "id": sid(self.id),
            "name": self.name,
            "slug": self.slug,
            "price": self.price,
            "comparePrice": self.compare_price,
            "finalPrice": self.final_price,
            "thumbnail": self.thumbnail,
            "quantity": self.quantity,
            "status": self.status.value,
            "isInStock": self.is_in_stock,
            "rating": self.rating,
            "reviewCount": self.review_count,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "shortDescription": self.short_description,
            "images": self.images,
            "thumbnail": self.thumbnail,
            "price": self.price,
            "comparePrice": self.compare_price,
            "costPrice": self.cost_price,
            "discountType": self.discount_type.value if self.discount_type else None,
            "discountValue": self.discount_value,
            "saleStartDate": iso(self.sale_start_date),
            "saleEndDate": iso(self.sale_end_date),
            "isOnSale": self.is_on_sale,
            "sku": self.sku,
            "barcode": self.barcode,
            "quantity": self.quantity,
            "lowStockThreshold": self.low_stock_threshold,
            "trackQuantity": self.track_quantity,
            "allowBackorder": self.allow_backorder,
            "category": sid(self.category_id),
            "subCategory": sid(self.sub_category_id),
            "brand": self.brand,
            "tags": self.tags,
            "attributes": self.attributes,
            "hasVariants": self.has_variants,
            "variants": [v.to_dict() for v in self.variants],
            "weight": self.weight,
            "dimensions": self.dimensions,
            "status": self.status.value,
            "visibility": self.visibility.value,
            "isFeatured": self.is_featured,
            "isNewProduct": self.is_new_product,
            "isBestSeller": self.is_best_seller,
            "isTopRated": self.is_top_rated,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "salesCount": self.sales_count,
            "viewCount": self.view_count,
            "wishlistCount": self.wishlist_count,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "metaKeywords": self.meta_keywords,
            "publishedAt": iso(self.published_at),
            "isInStock": self.is_in_stock,
            "isLowStock": self.is_low_stock,
            "discountPercentage": self.discount_percentage,
            "finalPrice": self.final_price,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
