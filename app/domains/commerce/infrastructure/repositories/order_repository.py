"""
Order Repository Implementation

Items, addresses and the timeline live in JSONB columns; searches over the
shipping address use the `->>` accessor.
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination
from app.domains.commerce.application.dto import OrderFilters
from app.domains.commerce.application.ports import IOrderRepository
from app.domains.commerce.domain.entities import Order, OrderItem, TimelineEntry
from app.domains.commerce.domain.value_objects import (
    OrderPaymentStatus,
    OrderStatus,
    PaymentMethod,
    ShippingMethod,
)
from app.models.db import OrderModel

logger = logging.getLogger(__name__)

NON_REVENUE_STATUSES = [s.value for s in OrderStatus if not s.counts_as_revenue()]


class SQLAlchemyOrderRepository(IOrderRepository):
    """
    SQLAlchemy implementation of order repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, *conditions) -> OrderModel | None:
        result = await self.session.execute(
            select(OrderModel).where(*conditions).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, order_id: UUID) -> Order | None:
        model = await self._get_model(OrderModel.id == order_id)
        return self._to_entity(model) if model else None

    async def get_for_user(self, order_id: UUID, user_id: UUID) -> Order | None:
        model = await self._get_model(OrderModel.id == order_id, OrderModel.user_id == user_id)
        return self._to_entity(model) if model else None

    async def get_by_number(self, order_number: str) -> Order | None:
        model = await self._get_model(OrderModel.order_number == order_number)
        return self._to_entity(model) if model else None

    async def create(self, order: Order) -> Order:
        model = OrderModel(id=order.id, order_number=order.order_number, user_id=order.user_id)
        self._apply(model, order)
        self.session.add(model)
        await self.session.flush()
        logger.info(f"Order {order.order_number} created")
        return self._to_entity(model)

    async def save(self, order: Order) -> Order:
        model = await self._get_model(OrderModel.id == order.id)
        if model is None:
            return await self.create(order)
        self._apply(model, order)
        await self.session.flush()
        return self._to_entity(model)

    async def _page(self, conditions: list, pagination: Pagination) -> PaginatedResult[Order]:
        total = (await self.session.execute(select(func.count(OrderModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(OrderModel)
            .where(*conditions)
            .order_by(OrderModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return PaginatedResult(
            items=[self._to_entity(m) for m in result.scalars().all()],
            total=total,
            pagination=pagination,
        )

    async def list_for_user(
        self, user_id: UUID, pagination: Pagination, status: str | None = None
    ) -> PaginatedResult[Order]:
        conditions = [OrderModel.user_id == user_id]
        if status:
            conditions.append(OrderModel.status == status)
        return await self._page(conditions, pagination)

    async def list(self, pagination: Pagination, filters: OrderFilters) -> PaginatedResult[Order]:
        conditions = []
        if filters.status:
            conditions.append(OrderModel.status == filters.status)
        if filters.payment_status:
            conditions.append(OrderModel.payment_status == filters.payment_status)
        if filters.start_date:
            conditions.append(OrderModel.created_at >= filters.start_date)
        if filters.end_date:
            conditions.append(OrderModel.created_at <= filters.end_date)
        if filters.search:
            term = f"%{filters.search}%"
            conditions.append(
                or_(
                    OrderModel.order_number.ilike(term),
                    OrderModel.shipping_address["fullName"].astext.ilike(term),
                    OrderModel.shipping_address["phone"].astext.ilike(term),
                )
            )
        return await self._page(conditions, pagination)

    async def get_stats(self, today_start: datetime) -> dict[str, Any]:
        by_status = await self.session.execute(
            select(OrderModel.status, func.count(OrderModel.id)).group_by(OrderModel.status)
        )
        counts = {s.value: 0 for s in OrderStatus}
        counts.update({status: count for status, count in by_status.all()})

        revenue = OrderModel.status.notin_(NON_REVENUE_STATUSES)
        total_revenue = (
            await self.session.execute(select(func.coalesce(func.sum(OrderModel.total), 0)).where(revenue))
        ).scalar_one()
        today_orders, today_revenue = (
            await self.session.execute(
                select(
                    func.count(OrderModel.id),
                    func.coalesce(func.sum(OrderModel.total).filter(revenue), 0),
                ).where(OrderModel.created_at >= today_start)
            )
        ).one()

        return {
            "totalOrders": sum(counts.values()),
            "pendingOrders": counts[OrderStatus.PENDING.value],
            "confirmedOrders": counts[OrderStatus.CONFIRMED.value],
            "processingOrders": counts[OrderStatus.PROCESSING.value],
            "shippedOrders": counts[OrderStatus.SHIPPED.value],
            "deliveredOrders": counts[OrderStatus.DELIVERED.value],
            "cancelledOrders": counts[OrderStatus.CANCELLED.value],
            "returnedOrders": counts[OrderStatus.RETURNED.value],
            "totalRevenue": float(total_revenue),
            "todayOrders": today_orders,
            "todayRevenue": float(today_revenue),
        }

    async def count_coupon_uses(self, user_id: UUID, coupon_code: str) -> int:
        stmt = select(func.count(OrderModel.id)).where(
            OrderModel.user_id == user_id,
            OrderModel.coupon_code == coupon_code.upper(),
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def has_delivered_product(self, user_id: UUID, product_id: UUID) -> bool:
        stmt = select(OrderModel.id).where(
            OrderModel.user_id == user_id,
            OrderModel.status == OrderStatus.DELIVERED.value,
            OrderModel.items.contains([{"product": str(product_id)}]),
        )
        return (await self.session.execute(stmt.limit(1))).first() is not None

    # Mapping methods

    def _apply(self, model: OrderModel, order: Order) -> None:
        model.items = [i.to_dict() for i in order.items]
        model.shipping_address = dict(order.shipping_address)
        model.billing_address = order.billing_address
        model.subtotal = order.subtotal
        model.shipping_cost = order.shipping_cost
        model.discount = order.discount
        model.tax = order.tax
        model.total = order.total
        model.coupon_code = order.coupon_code
        model.coupon_discount = order.coupon_discount
        model.payment_method = order.payment_method.value
        model.payment_status = order.payment_status.value
        model.transaction_id = order.transaction_id
        model.shipping_method = order.shipping_method.value
        model.status = order.status.value
        model.tracking_number = order.tracking_number
        model.timeline = [t.to_dict() for t in order.timeline]
        model.customer_note = order.customer_note
        model.admin_note = order.admin_note
        model.cancel_reason = order.cancel_reason
        model.paid_at = order.paid_at
        model.delivered_at = order.delivered_at
        model.cancelled_at = order.cancelled_at

    def _to_entity(self, model: OrderModel) -> Order:
        order = Order(
            id=model.id,
            order_number=model.order_number,
            user_id=model.user_id,
            items=[OrderItem.from_dict(i) for i in (model.items or [])],
            shipping_address=dict(model.shipping_address or {}),
            billing_address=model.billing_address,
            subtotal=float(model.subtotal or 0),
            shipping_cost=float(model.shipping_cost or 0),
            discount=float(model.discount or 0),
            tax=float(model.tax or 0),
            total=float(model.total or 0),
            coupon_code=model.coupon_code,
            coupon_discount=float(model.coupon_discount or 0),
            payment_method=PaymentMethod(model.payment_method),
            payment_status=OrderPaymentStatus(model.payment_status),
            transaction_id=model.transaction_id,
            shipping_method=ShippingMethod(model.shipping_method),
            status=OrderStatus(model.status),
            tracking_number=model.tracking_number,
            timeline=[TimelineEntry.from_dict(t) for t in (model.timeline or [])],
            customer_note=model.customer_note,
            admin_note=model.admin_note,
            cancel_reason=model.cancel_reason,
            paid_at=model.paid_at,
            delivered_at=model.delivered_at,
            cancelled_at=model.cancelled_at,
        )
        if model.created_at is not None:
            order.created_at = model.created_at
        if model.updated_at is not None:
            order.updated_at = model.updated_at
        return order
