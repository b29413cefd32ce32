"""
Order Service

Order queries and every post-placement status change. Cancellation from any
path restores the stock that placement took.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.domain import EntityNotFoundException, EventOutbox, PaginatedResult, Pagination, utcnow
from app.domains.catalog.application.ports import IProductRepository
from app.domains.commerce.application.dto import OrderFilters
from app.domains.commerce.application.ports import IOrderRepository
from app.domains.commerce.domain.entities import Order
from app.domains.commerce.domain.value_objects import OrderPaymentStatus, OrderStatus

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        outbox: EventOutbox,
    ):
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.outbox = outbox

    # Queries

    async def get_order(self, order_id: UUID) -> Order:
        order = await self.order_repository.get_by_id(order_id)
        if not order:
            raise EntityNotFoundException("Order", order_id, "Order not found")
        return order

    async def get_user_order(self, order_id: UUID, user_id: UUID) -> Order:
        order = await self.order_repository.get_for_user(order_id, user_id)
        if not order:
            raise EntityNotFoundException("Order", order_id, "Order not found")
        return order

    async def track(self, order_number: str) -> Order:
        order = await self.order_repository.get_by_number(order_number)
        if not order:
            raise EntityNotFoundException("Order", order_number, "Order not found")
        return order

    async def list_user_orders(
        self, user_id: UUID, pagination: Pagination, status: str | None = None
    ) -> PaginatedResult[Order]:
        return await self.order_repository.list_for_user(user_id, pagination, status=status)

    async def list_orders(self, pagination: Pagination, filters: OrderFilters) -> PaginatedResult[Order]:
        return await self.order_repository.list(pagination, filters)

    async def get_stats(self) -> dict[str, Any]:
        today_start = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        return await self.order_repository.get_stats(today_start)

    # Status changes

    async def _restore_stock(self, order: Order) -> None:
        products = {p.id: p for p in await self.product_repository.get_many([i.product_id for i in order.items])}
        for item in order.items:
            product = products.get(item.product_id)
            if product is None or not product.track_quantity:
                continue
            await self.product_repository.adjust_stock(item.product_id, item.quantity, variant_id=item.variant_id)
        logger.info(f"Stock restored for cancelled order {order.order_number}")

    async def _commit_change(self, order: Order, previous: OrderStatus) -> Order:
        if order.status == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            await self._restore_stock(order)
        order = await self.order_repository.save(order)
        return order

    async def update_status(
        self,
        order_id: UUID,
        status: str,
        note: str | None = None,
        tracking_number: str | None = None,
        updated_by: UUID | None = None,
    ) -> Order:
        """Admin transition along the order state machine."""
        order = await self.get_order(order_id)
        previous = order.change_status(
            OrderStatus(status), note=note, updated_by=updated_by, tracking_number=tracking_number
        )
        self.outbox.collect_from(order)
        logger.info(f"Order {order.order_number}: {previous.value} -> {order.status.value}")
        return await self._commit_change(order, previous)

    async def cancel(self, order_id: UUID, user_id: UUID, reason: str) -> Order:
        order = await self.get_user_order(order_id, user_id)
        previous = order.status
        order.cancel_by_customer(reason)
        self.outbox.collect_from(order)
        logger.info(f"Order {order.order_number} cancelled by customer {user_id}")
        return await self._commit_change(order, previous)

    async def update_payment_status(
        self, order_id: UUID, payment_status: str, transaction_id: str | None = None
    ) -> Order:
        order = await self.get_order(order_id)
        order.update_payment_status(OrderPaymentStatus(payment_status), transaction_id)
        self.outbox.collect_from(order)
        logger.info(f"Order {order.order_number} payment status -> {payment_status}")
        return await self.order_repository.save(order)

    async def add_admin_note(self, order_id: UUID, note: str) -> Order:
        order = await self.get_order(order_id)
        order.admin_note = note
        order.touch()
        return await self.order_repository.save(order)


__all__ = ["OrderService"]
