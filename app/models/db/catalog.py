"""
Product catalog models: categories, products and product variants.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, uuid_pk


class CategoryModel(Base, TimestampMixin):
    """
    Category tree node.

    `level` is 0 for roots and at most 2; `ancestors` lists every parent id
    from the root down, so descendant queries need no recursion.
    """

    __tablename__ = "categories"

    id = uuid_pk()
    name = Column(String(100), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(String(500))
    icon = Column(String(500))
    image = Column(String(500))
    banner = Column(String(500))

    parent_id = Column(UUID(as_uuid=True), ForeignKey("categories.id"), nullable=True)
    level = Column(Integer, nullable=False, default=0)
    ancestors = Column(ARRAY(UUID(as_uuid=True)), nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    show_in_menu = Column(Boolean, nullable=False, default=True)
    show_in_home = Column(Boolean, nullable=False, default=False)
    product_count = Column(Integer, nullable=False, default=0)

    meta_title = Column(String(200))
    meta_description = Column(String(500))
    meta_keywords = Column(ARRAY(String), nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("level >= 0 AND level <= 2", name="ck_categories_level"),
        Index("idx_categories_parent", parent_id),
        Index("idx_categories_active_order", is_active, display_order),
    )

    def __repr__(self):
        return f"<CategoryModel(slug='{self.slug}', level={self.level})>"


class ProductModel(Base, TimestampMixin):
    """Sellable product. Variants live in `product_variants`."""

    __tablename__ = "products"

    id = uuid_pk()
    name = Column(String(200), nullable=False)
    slug = Column(String(250), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    short_description = Column(String(500))

    images = Column(JSONB, nullable=False, default=list)
    thumbnail = Column(String(500))

    # Pricing
    price = Column(Float, nullable=False)
    compare_price = Column(Float)
    cost_price = Column(Float)
    discount_type = Column(String(20))  # percentage | fixed
    discount_value = Column(Float, nullable=False, default=0)
    sale_start_date = Column(DateTime(timezone=True))
    sale_end_date = Column(DateTime(timezone=True))
    is_on_sale = Column(Boolean, nullable=False, default=False)

    # Inventory
    sku = Column(String(100), unique=True)
    barcode = Column(String(100))
    quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    track_quantity = Column(Boolean, nullable=False, default=True)
    allow_backorder = Column(Boolean, nullable=False, default=False)

    # Classification
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id"), nullable=False)
    sub_category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id"))
    brand = Column(String(100))
    tags = Column(ARRAY(String), nullable=False, default=list)
    attributes = Column(JSONB, nullable=False, default=list)
    has_variants = Column(Boolean, nullable=False, default=False)

    weight = Column(Float)
    dimensions = Column(JSONB)

    status = Column(String(20), nullable=False, default="draft")
    visibility = Column(String(20), nullable=False, default="visible")
    is_featured = Column(Boolean, nullable=False, default=False)
    is_new_product = Column(Boolean, nullable=False, default=True)
    is_best_seller = Column(Boolean, nullable=False, default=False)
    is_top_rated = Column(Boolean, nullable=False, default=False)

    # Denormalised statistics
    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    sales_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)
    wishlist_count = Column(Integer, nullable=False, default=0)

    meta_title = Column(String(200))
    meta_description = Column(String(500))
    meta_keywords = Column(ARRAY(String), nullable=False, default=list)

    published_at = Column(DateTime(timezone=True))

    variants = relationship(
        "ProductVariantModel",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProductVariantModel.created_at",
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price"),
        Index("idx_products_category", category_id),
        Index("idx_products_status_created", status, "created_at"),
        Index("idx_products_sales", sales_count),
        Index("idx_products_rating", rating),
    )

    def __repr__(self):
        return f"<ProductModel(slug='{self.slug}', price={self.price}, quantity={self.quantity})>"


class ProductVariantModel(Base, TimestampMixin):
    """SKU-level combination of attribute choices with its own price and stock."""

    __tablename__ = "product_variants"

    id = uuid_pk()
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    sku = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    compare_price = Column(Float)
    quantity = Column(Integer, nullable=False, default=0)
    attributes = Column(JSONB, nullable=False, default=dict)
    image = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)

    product = relationship("ProductModel", back_populates="variants")

    __table_args__ = (
        UniqueConstraint("product_id", "sku", name="uq_product_variants_sku"),
        Index("idx_product_variants_product", product_id),
    )
