"""
Catalog API Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from app.api.schemas.common import CamelModel
from app.domains.catalog.domain.value_objects import (
    DiscountType,
    ProductSort,
    ProductStatus,
    ProductVisibility,
    StockOperation,
)

# ============================================================================
# Category Schemas
# ============================================================================


class CategoryBase(CamelModel):
    description: str | None = Field(None, max_length=500)
    icon: str | None = None
    image: str | None = None
    banner: str | None = None
    parent_id: UUID | None = Field(None, alias="parentCategory")
    is_active: bool | None = None
    is_featured: bool | None = None
    display_order: int | None = Field(None, alias="order")
    show_in_menu: bool | None = None
    show_in_home: bool | None = None
    meta_title: str | None = Field(None, max_length=200)
    meta_description: str | None = Field(None, max_length=500)
    meta_keywords: list[str] | None = None


class CategoryCreate(CategoryBase):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = Field(None, max_length=200)


class CategoryUpdate(CategoryBase):
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, max_length=200)


class CategoryOrder(CamelModel):
    id: UUID
    order: int


class CategoryReorderBody(CamelModel):
    categories: list[CategoryOrder] = Field(..., min_length=1)


# ============================================================================
# Product Schemas
# ============================================================================


class VariantBody(CamelModel):
    id: UUID | None = None
    name: str = Field(..., min_length=1, max_length=200)
    sku: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    compare_price: float | None = Field(None, ge=0)
    quantity: int = Field(0, ge=0)
    attributes: dict[str, str] = Field(default_factory=dict)
    image: str | None = None
    is_active: bool = True

    def to_variant_data(self) -> dict:
        data = self.model_dump()
        if data["id"] is None:
            data.pop("id")
        return data


class ProductBase(CamelModel):
    description: str | None = None
    short_description: str | None = Field(None, max_length=500)
    images: list[dict] | None = None
    thumbnail: str | None = None
    compare_price: float | None = Field(None, ge=0)
    cost_price: float | None = Field(None, ge=0)
    discount_type: DiscountType | None = None
    discount_value: float | None = Field(None, ge=0)
    sale_start_date: datetime | None = None
    sale_end_date: datetime | None = None
    sku: str | None = Field(None, max_length=100)
    barcode: str | None = Field(None, max_length=100)
    quantity: int | None = Field(None, ge=0)
    low_stock_threshold: int | None = Field(None, ge=0)
    track_quantity: bool | None = None
    allow_backorder: bool | None = None
    sub_category_id: UUID | None = Field(None, alias="subCategory")
    brand: str | None = Field(None, max_length=100)
    tags: list[str] | None = None
    attributes: list[dict] | None = None
    variants: list[VariantBody] | None = None
    weight: float | None = Field(None, ge=0)
    dimensions: dict[str, float] | None = None
    status: ProductStatus | None = None
    visibility: ProductVisibility | None = None
    is_featured: bool | None = None
    is_new_product: bool | None = None
    meta_title: str | None = Field(None, max_length=200)
    meta_description: str | None = Field(None, max_length=500)
    meta_keywords: list[str] | None = None

    @model_validator(mode="after")
    def check_sale_window(self):
        if self.sale_start_date and self.sale_end_date and self.sale_end_date < self.sale_start_date:
            raise ValueError("Sale end date must be after sale start date")
        return self

    def to_data(self, exclude_unset: bool = False) -> dict:
        data = self.model_dump(exclude_unset=exclude_unset, exclude={"variants"})
        if self.variants is not None:
            data["variants"] = [v.to_variant_data() for v in self.variants]
        return data


class ProductCreate(ProductBase):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=250)
    price: float = Field(..., ge=0)
    category_id: UUID = Field(..., alias="category")


class ProductUpdate(ProductBase):
    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=250)
    price: float | None = Field(None, ge=0)
    category_id: UUID | None = Field(None, alias="category")


class StockUpdateBody(CamelModel):
    quantity: int = Field(..., ge=1)
    operation: StockOperation = StockOperation.ADD
    variant_id: UUID | None = None


class BulkStatusBody(CamelModel):
    product_ids: list[UUID] = Field(..., min_length=1, alias="ids")
    status: ProductStatus


class BulkDeleteBody(CamelModel):
    product_ids: list[UUID] = Field(..., min_length=1, alias="ids")

