"""
Commerce API Schemas
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from app.api.schemas.common import CamelModel
from app.domains.commerce.domain.value_objects import (
    CouponDiscountType,
    CouponScope,
    OrderPaymentStatus,
    OrderStatus,
    PaymentMethod,
    ShippingMethod,
)

# ============================================================================
# Cart Schemas
# ============================================================================


class AddToCartBody(CamelModel):
    product_id: UUID
    quantity: int = Field(1, ge=1)
    variant_id: UUID | None = None
    variant_sku: str | None = None


class UpdateCartItemBody(CamelModel):
    quantity: int = Field(..., ge=1)


class ApplyCouponBody(CamelModel):
    code: str = Field(..., min_length=1, max_length=50)


# ============================================================================
# Coupon Schemas
# ============================================================================


class CouponBase(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    discount_type: CouponDiscountType | None = None
    discount_value: float | None = Field(None, ge=0)
    max_discount: float | None = Field(None, ge=0)
    min_purchase: float | None = Field(None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    usage_limit: int | None = Field(None, ge=1)
    usage_per_user: int | None = Field(None, ge=1)
    applicable_to: CouponScope | None = None
    specific_products: list[UUID] | None = None
    specific_categories: list[UUID] | None = None
    is_active: bool | None = None


class CouponCreate(CouponBase):
    code: str = Field(..., min_length=3, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    discount_type: CouponDiscountType
    discount_value: float = Field(..., ge=0)
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def check_window(self) -> "CouponCreate":
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class CouponUpdate(CouponBase):
    code: str | None = Field(None, min_length=3, max_length=50)


# ============================================================================
# Order Schemas
# ============================================================================


class ShippingAddressBody(CamelModel):
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: EmailStr | None = None
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "Bangladesh"

    def snapshot(self) -> dict[str, Any]:
        """Address as stored on the order (camelCase keys)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PlaceOrderBody(CamelModel):
    shipping_address: ShippingAddressBody
    payment_method: PaymentMethod
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    customer_note: str | None = Field(None, max_length=1000)
    coupon_code: str | None = None


class CancelOrderBody(CamelModel):
    reason: str = Field("Cancelled by customer", max_length=500)


class OrderStatusBody(CamelModel):
    status: OrderStatus
    note: str | None = None
    tracking_number: str | None = None


class PaymentStatusBody(CamelModel):
    payment_status: OrderPaymentStatus
    transaction_id: str | None = None


class AdminNoteBody(CamelModel):
    note: str = Field(..., min_length=1, max_length=2000)
