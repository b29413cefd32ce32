"""
Coupon Repository Implementation
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination, utcnow
from app.domains.commerce.application.ports import ICouponRepository
from app.domains.commerce.domain.entities import Coupon
from app.domains.commerce.domain.value_objects import CouponDiscountType, CouponScope
from app.models.db import CouponModel

logger = logging.getLogger(__name__)


class SQLAlchemyCouponRepository(ICouponRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, coupon_id: UUID) -> CouponModel | None:
        result = await self.session.execute(select(CouponModel).where(CouponModel.id == coupon_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, coupon_id: UUID) -> Coupon | None:
        model = await self._get_model(coupon_id)
        return self._to_entity(model) if model else None

    async def get_by_code(self, code: str) -> Coupon | None:
        result = await self.session.execute(select(CouponModel).where(CouponModel.code == code.upper()))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def code_exists(self, code: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(CouponModel.id).where(CouponModel.code == code.upper())
        if exclude_id:
            stmt = stmt.where(CouponModel.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    async def list(self, pagination: Pagination, is_active: bool | None = None) -> PaginatedResult[Coupon]:
        conditions = []
        if is_active is not None:
            conditions.append(CouponModel.is_active.is_(is_active))
        total = (await self.session.execute(select(func.count(CouponModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(CouponModel)
            .where(*conditions)
            .order_by(CouponModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return PaginatedResult(
            items=[self._to_entity(m) for m in result.scalars().all()],
            total=total,
            pagination=pagination,
        )

    async def create(self, coupon: Coupon) -> Coupon:
        model = CouponModel(id=coupon.id)
        self._apply(model, coupon)
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def save(self, coupon: Coupon) -> Coupon:
        model = await self._get_model(coupon.id)  # type: ignore[arg-type]
        if model is None:
            return await self.create(coupon)
        self._apply(model, coupon)
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, coupon_id: UUID) -> None:
        await self.session.execute(delete(CouponModel).where(CouponModel.id == coupon_id))

    async def increment_usage(self, coupon_id: UUID) -> bool:
        result = await self.session.execute(
            update(CouponModel)
            .where(
                CouponModel.id == coupon_id,
                or_(CouponModel.usage_limit.is_(None), CouponModel.used_count < CouponModel.usage_limit),
            )
            .values(used_count=CouponModel.used_count + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    # Mapping methods

    def _apply(self, model: CouponModel, coupon: Coupon) -> None:
        model.code = coupon.code
        model.name = coupon.name
        model.description = coupon.description
        model.discount_type = coupon.discount_type.value
        model.discount_value = coupon.discount_value
        model.max_discount = coupon.max_discount
        model.min_purchase = coupon.min_purchase
        model.start_date = coupon.start_date
        model.end_date = coupon.end_date
        model.usage_limit = coupon.usage_limit
        model.usage_per_user = coupon.usage_per_user
        model.used_count = coupon.used_count
        model.applicable_to = coupon.applicable_to.value
        model.specific_products = list(coupon.specific_products)
        model.specific_categories = list(coupon.specific_categories)
        model.is_active = coupon.is_active

    def _to_entity(self, model: CouponModel) -> Coupon:
        coupon = Coupon(
            id=model.id,
            code=model.code,
            name=model.name,
            description=model.description,
            discount_type=CouponDiscountType(model.discount_type),
            discount_value=float(model.discount_value or 0),
            max_discount=model.max_discount,
            min_purchase=float(model.min_purchase or 0),
            start_date=model.start_date,
            end_date=model.end_date,
            usage_limit=model.usage_limit,
            usage_per_user=model.usage_per_user or 1,
            used_count=model.used_count or 0,
            applicable_to=CouponScope(model.applicable_to or "all"),
            specific_products=list(model.specific_products or []),
            specific_categories=list(model.specific_categories or []),
            is_active=bool(model.is_active),
        )
        if model.created_at is not None:
            coupon.created_at = model.created_at
        if model.updated_at is not None:
            coupon.updated_at = model.updated_at
        return coupon
