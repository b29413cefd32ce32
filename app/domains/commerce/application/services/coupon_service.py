"""
Coupon Service

Coupon eligibility and discount pricing for carts, plus admin CRUD.
"""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from app.core.domain import (
    BusinessRuleViolationException,
    DuplicateEntityException,
    EntityNotFoundException,
    PaginatedResult,
    Pagination,
    ValidationException,
)
from app.domains.catalog.application.ports import IProductRepository
from app.domains.commerce.application.ports import ICouponRepository, IOrderRepository
from app.domains.commerce.domain.entities import Cart, Coupon
from app.domains.commerce.domain.value_objects import CouponDiscountType, CouponScope

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "discount_value",
    "max_discount",
    "min_purchase",
    "start_date",
    "end_date",
    "usage_limit",
    "usage_per_user",
    "specific_products",
    "specific_categories",
    "is_active",
)


@dataclass
class CouponQuote:
    coupon: Coupon
    discount: float

    def to_dict(self) -> dict[str, Any]:
        return {"coupon": self.coupon.to_dict(), "discount": self.discount}


class CouponService:
    def __init__(
        self,
        coupon_repository: ICouponRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ):
        self.coupon_repository = coupon_repository
        self.order_repository = order_repository
        self.product_repository = product_repository

    async def quote(self, code: str, cart: Cart, user_id: UUID) -> CouponQuote:
        """
        Price a coupon against a cart.

        Raises:
            BusinessRuleViolationException: Invalid, below minimum, used up or not applicable
        """
        coupon = await self.coupon_repository.get_by_code(code.strip().upper())
        if not coupon or not coupon.is_valid():
            raise BusinessRuleViolationException("coupon_invalid", "Invalid or expired coupon")

        if cart.subtotal < coupon.min_purchase:
            raise BusinessRuleViolationException(
                "coupon_min_purchase", f"Minimum purchase of ৳{coupon.min_purchase:g} required"
            )

        if await self.order_repository.count_coupon_uses(user_id, coupon.code) >= coupon.usage_per_user:
            raise BusinessRuleViolationException("coupon_used", "You have already used this coupon")

        eligible = await self._eligible_subtotal(coupon, cart)
        if eligible <= 0:
            raise BusinessRuleViolationException(
                "coupon_not_applicable", "Coupon is not applicable to items in your cart"
            )
        return CouponQuote(coupon=coupon, discount=coupon.compute_discount(eligible))

    async def _eligible_subtotal(self, coupon: Coupon, cart: Cart) -> float:
        if coupon.applicable_to == CouponScope.ALL:
            return cart.subtotal

        categories: dict[UUID, set[UUID]] = {}
        if coupon.applicable_to == CouponScope.SPECIFIC_CATEGORIES:
            products = await self.product_repository.get_many(list({i.product_id for i in cart.items}))
            categories = {p.id: {c for c in (p.category_id, p.sub_category_id) if c} for p in products}  # type: ignore[misc]

        return sum(
            item.line_total
            for item in cart.items
            if coupon.applies_to(item.product_id, categories.get(item.product_id, set()))
        )

    # Admin

    async def get_coupon(self, coupon_id: UUID) -> Coupon:
        coupon = await self.coupon_repository.get_by_id(coupon_id)
        if not coupon:
            raise EntityNotFoundException("Coupon", coupon_id, "Coupon not found")
        return coupon

    async def list_coupons(self, pagination: Pagination, is_active: bool | None = None) -> PaginatedResult[Coupon]:
        return await self.coupon_repository.list(pagination, is_active=is_active)

    @staticmethod
    def _check_window(coupon: Coupon) -> None:
        if coupon.end_date < coupon.start_date:
            raise ValidationException("End date must be after start date", field="endDate")
        if coupon.discount_type == CouponDiscountType.PERCENTAGE and coupon.discount_value > 100:
            raise ValidationException("Percentage discount cannot exceed 100", field="discountValue")

    async def create_coupon(self, data: dict[str, Any]) -> Coupon:
        code = data["code"].strip().upper()
        if await self.coupon_repository.code_exists(code):
            raise DuplicateEntityException("Coupon", "code", code, "Coupon with this code already exists")

        coupon = Coupon.new(
            code=code,
            discount_type=CouponDiscountType(data["discount_type"]),
            applicable_to=CouponScope(data.get("applicable_to") or CouponScope.ALL.value),
            **{key: data[key] for key in EDITABLE_FIELDS if data.get(key) is not None},
        )
        self._check_window(coupon)
        coupon = await self.coupon_repository.create(coupon)
        logger.info(f"Coupon created: {coupon.code}")
        return coupon

    async def update_coupon(self, coupon_id: UUID, changes: dict[str, Any]) -> Coupon:
        coupon = await self.get_coupon(coupon_id)

        if changes.get("code"):
            code = changes["code"].strip().upper()
            if code != coupon.code and await self.coupon_repository.code_exists(code, exclude_id=coupon.id):
                raise DuplicateEntityException("Coupon", "code", code, "Coupon with this code already exists")
            coupon.code = code
        if changes.get("discount_type"):
            coupon.discount_type = CouponDiscountType(changes["discount_type"])
        if changes.get("applicable_to"):
            coupon.applicable_to = CouponScope(changes["applicable_to"])
        for key in EDITABLE_FIELDS:
            if key in changes:
                setattr(coupon, key, changes[key])

        self._check_window(coupon)
        coupon.touch()
        return await self.coupon_repository.save(coupon)

    async def delete_coupon(self, coupon_id: UUID) -> None:
        coupon = await self.get_coupon(coupon_id)
        await self.coupon_repository.delete(coupon_id)
        logger.info(f"Coupon deleted: {coupon.code}")


__all__ = ["CouponService", "CouponQuote"]
