"""Initial schema - identity, catalog, commerce, payments, shipping, engagement.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19

Embedded collections (order items, timelines, tracking history, address
books, cart and wishlist lines) are JSONB columns on their owner.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)
JSONB = postgresql.JSONB()


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Identity
    op.create_table(
        "users",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("avatar", sa.String(500)),
        sa.Column("bio", sa.Text()),
        sa.Column("date_of_birth", sa.Date()),
        sa.Column("gender", sa.String(10)),
        sa.Column("addresses", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("role", sa.String(20), nullable=False, server_default="customer"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_wishlist_items", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("password_changed_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("idx_users_role", "users", ["role"])
    op.create_index("idx_users_status", "users", ["status"])
    op.create_index("idx_users_created_at", "users", ["created_at"])

    # Catalog
    op.create_table(
        "categories",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500)),
        sa.Column("icon", sa.String(500)),
        sa.Column("image", sa.String(500)),
        sa.Column("banner", sa.String(500)),
        sa.Column("parent_id", UUID, sa.ForeignKey("categories.id")),
        sa.Column("level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ancestors", postgresql.ARRAY(UUID), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("show_in_menu", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("show_in_home", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("product_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("meta_title", sa.String(200)),
        sa.Column("meta_description", sa.String(500)),
        sa.Column("meta_keywords", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.CheckConstraint("level >= 0 AND level <= 2", name="ck_categories_level"),
    )
    op.create_index("ix_categories_slug", "categories", ["slug"], unique=True)
    op.create_index("idx_categories_parent", "categories", ["parent_id"])
    op.create_index("idx_categories_active_order", "categories", ["is_active", "display_order"])

    op.create_table(
        "products",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(250), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("short_description", sa.String(500)),
        sa.Column("images", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("thumbnail", sa.String(500)),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("compare_price", sa.Float()),
        sa.Column("cost_price", sa.Float()),
        sa.Column("discount_type", sa.String(20)),
        sa.Column("discount_value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("sale_start_date", sa.DateTime(timezone=True)),
        sa.Column("sale_end_date", sa.DateTime(timezone=True)),
        sa.Column("is_on_sale", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sku", sa.String(100), unique=True),
        sa.Column("barcode", sa.String(100)),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("low_stock_threshold", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("track_quantity", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("allow_backorder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("category_id", UUID, sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("sub_category_id", UUID, sa.ForeignKey("categories.id")),
        sa.Column("brand", sa.String(100)),
        sa.Column("tags", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("attributes", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("has_variants", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("weight", sa.Float()),
        sa.Column("dimensions", JSONB),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("visibility", sa.String(20), nullable=False, server_default="visible"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_new_product", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_best_seller", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_top_rated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("review_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sales_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("wishlist_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("meta_title", sa.String(200)),
        sa.Column("meta_description", sa.String(500)),
        sa.Column("meta_keywords", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("published_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.CheckConstraint("price >= 0", name="ck_products_price"),
    )
    op.create_index("ix_products_slug", "products", ["slug"], unique=True)
    op.create_index("idx_products_category", "products", ["category_id"])
    op.create_index("idx_products_status_created", "products", ["status", "created_at"])
    op.create_index("idx_products_sales", "products", ["sales_count"])
    op.create_index("idx_products_rating", "products", ["rating"])

    op.create_table(
        "product_variants",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("product_id", UUID, sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("sku", sa.String(100), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("compare_price", sa.Float()),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attributes", JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("image", sa.String(500)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("product_id", "sku", name="uq_product_variants_sku"),
    )
    op.create_index("idx_product_variants_product", "product_variants", ["product_id"])

    # Commerce
    op.create_table(
        "carts",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("items", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("coupon_code", sa.String(50)),
        sa.Column("discount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("item_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("subtotal", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "coupons",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("discount_type", sa.String(20), nullable=False),
        sa.Column("discount_value", sa.Float(), nullable=False),
        sa.Column("max_discount", sa.Float()),
        sa.Column("min_purchase", sa.Float(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("usage_limit", sa.Integer()),
        sa.Column("usage_per_user", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("applicable_to", sa.String(30), nullable=False, server_default="all"),
        sa.Column("specific_products", postgresql.ARRAY(UUID), nullable=False, server_default="{}"),
        sa.Column("specific_categories", postgresql.ARRAY(UUID), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_coupons_code", "coupons", ["code"], unique=True)
    op.create_index("idx_coupons_active_window", "coupons", ["is_active", "start_date", "end_date"])

    op.create_table(
        "orders",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("order_number", sa.String(30), nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("items", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("shipping_address", JSONB, nullable=False),
        sa.Column("billing_address", JSONB),
        sa.Column("subtotal", sa.Float(), nullable=False, server_default="0"),
        sa.Column("shipping_cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("discount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("tax", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("coupon_code", sa.String(50)),
        sa.Column("coupon_discount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("payment_method", sa.String(30), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("transaction_id", sa.String(100)),
        sa.Column("shipping_method", sa.String(20), nullable=False, server_default="standard"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("tracking_number", sa.String(100)),
        sa.Column("timeline", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("customer_note", sa.Text()),
        sa.Column("admin_note", sa.Text()),
        sa.Column("cancel_reason", sa.Text()),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("delivered_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("idx_orders_user_created", "orders", ["user_id", "created_at"])
    op.create_index("idx_orders_status", "orders", ["status"])
    op.create_index("idx_orders_payment_status", "orders", ["payment_status"])
    op.create_index("idx_orders_created_at", "orders", ["created_at"])

    # Payments
    op.create_table(
        "payments",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("order_id", UUID, sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="BDT"),
        sa.Column("method", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("transaction_id", sa.String(60), nullable=False),
        sa.Column("gateway_transaction_id", sa.String(120)),
        sa.Column("gateway_response", JSONB),
        sa.Column("val_id", sa.String(120)),
        sa.Column("bank_tran_id", sa.String(120)),
        sa.Column("card_type", sa.String(60)),
        sa.Column("payment_id", sa.String(120)),
        sa.Column("trx_id", sa.String(120)),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("refunded_at", sa.DateTime(timezone=True)),
        sa.Column("refund_amount", sa.Float()),
        sa.Column("refund_reason", sa.Text()),
        sa.Column("failure_reason", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_payments_transaction_id", "payments", ["transaction_id"], unique=True)
    op.create_index("ix_payments_payment_id", "payments", ["payment_id"])
    op.create_index("idx_payments_order", "payments", ["order_id"])
    op.create_index("idx_payments_user_created", "payments", ["user_id", "created_at"])
    op.create_index("idx_payments_status", "payments", ["status"])

    # Shipping
    op.create_table(
        "shipping_zones",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("areas", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "shipping_rates",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("zone_id", UUID, sa.ForeignKey("shipping_zones.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("free_shipping_minimum", sa.Float()),
        sa.Column("estimated_days_min", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("estimated_days_max", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("weight_limit", sa.Float()),
        sa.Column("additional_price_per_kg", sa.Float()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("idx_shipping_rates_zone", "shipping_rates", ["zone_id"])

    op.create_table(
        "shipments",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("order_id", UUID, sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("carrier", sa.String(30), nullable=False, server_default="manual"),
        sa.Column("carrier_order_id", sa.String(100)),
        sa.Column("tracking_number", sa.String(100)),
        sa.Column("tracking_url", sa.String(500)),
        sa.Column("zone_id", UUID, sa.ForeignKey("shipping_zones.id", ondelete="SET NULL")),
        sa.Column("rate_id", UUID, sa.ForeignKey("shipping_rates.id", ondelete="SET NULL")),
        sa.Column("shipping_cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("weight", sa.Float()),
        sa.Column("status", sa.String(30), nullable=False, server_default="pending"),
        sa.Column("tracking_history", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("picked_up_at", sa.DateTime(timezone=True)),
        sa.Column("delivered_at", sa.DateTime(timezone=True)),
        sa.Column("delivery_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("delivery_note", sa.Text()),
        sa.Column("proof_of_delivery", sa.String(500)),
        *_timestamps(),
    )
    op.create_index("ix_shipments_tracking_number", "shipments", ["tracking_number"], unique=True)
    op.create_index("idx_shipments_order", "shipments", ["order_id"])
    op.create_index("idx_shipments_status", "shipments", ["status"])

    # Engagement
    op.create_table(
        "reviews",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", UUID, sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order_id", UUID, sa.ForeignKey("orders.id")),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(100)),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("images", postgresql.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("is_verified_purchase", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="approved"),
        sa.Column("helpful_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("helpful_users", postgresql.ARRAY(UUID), nullable=False, server_default="{}"),
        sa.Column("admin_reply", JSONB),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "product_id", name="uq_reviews_user_product"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),
    )
    op.create_index("idx_reviews_product_status", "reviews", ["product_id", "status"])

    op.create_table(
        "wishlists",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("items", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        *_timestamps(),
    )

    op.create_table(
        "notifications",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("for_admin", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("for_user", UUID, sa.ForeignKey("users.id", ondelete="CASCADE")),
        *_timestamps(),
    )
    op.create_index("idx_notifications_admin_read", "notifications", ["for_admin", "is_read"])
    op.create_index("idx_notifications_user_read", "notifications", ["for_user", "is_read"])
    op.create_index("idx_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    for table in (
        "notifications",
        "wishlists",
        "reviews",
        "shipments",
        "shipping_rates",
        "shipping_zones",
        "payments",
        "orders",
        "coupons",
        "carts",
        "product_variants",
        "products",
        "categories",
        "users",
    ):
        op.drop_table(table)
