"""
Payment Repository Implementation
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination
from app.domains.payments.application.dto import PaymentFilters
from app.domains.payments.application.ports import IPaymentRepository
from app.domains.payments.domain.entities import Payment
from app.domains.payments.domain.value_objects import PaymentMethod, PaymentStatus
from app.models.db import PaymentModel

logger = logging.getLogger(__name__)


class SQLAlchemyPaymentRepository(IPaymentRepository):
    """
    SQLAlchemy implementation of payment repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, *conditions) -> PaymentModel | None:
        result = await self.session.execute(
            select(PaymentModel)
            .where(*conditions)
            .order_by(PaymentModel.created_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, payment_id: UUID) -> Payment | None:
        model = await self._get_model(PaymentModel.id == payment_id)
        return self._to_entity(model) if model else None

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        model = await self._get_model(PaymentModel.transaction_id == transaction_id)
        return self._to_entity(model) if model else None

    async def get_by_gateway_payment_id(self, payment_id: str) -> Payment | None:
        model = await self._get_model(PaymentModel.payment_id == payment_id)
        return self._to_entity(model) if model else None

    async def get_latest_for_order(self, order_id: UUID) -> Payment | None:
        model = await self._get_model(PaymentModel.order_id == order_id)
        return self._to_entity(model) if model else None

    async def create(self, payment: Payment) -> Payment:
        model = PaymentModel(id=payment.id, order_id=payment.order_id, user_id=payment.user_id)
        self._apply(model, payment)
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def save(self, payment: Payment) -> Payment:
        model = await self._get_model(PaymentModel.id == payment.id)
        if model is None:
            return await self.create(payment)
        self._apply(model, payment)
        await self.session.flush()
        return self._to_entity(model)

    async def _page(self, conditions: list, pagination: Pagination) -> PaginatedResult[Payment]:
        total = (await self.session.execute(select(func.count(PaymentModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(PaymentModel)
            .where(*conditions)
            .order_by(PaymentModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return PaginatedResult(
            items=[self._to_entity(m) for m in result.scalars().all()],
            total=total,
            pagination=pagination,
        )

    async def list_for_user(self, user_id: UUID, pagination: Pagination) -> PaginatedResult[Payment]:
        return await self._page([PaymentModel.user_id == user_id], pagination)

    async def list(self, pagination: Pagination, filters: PaymentFilters) -> PaginatedResult[Payment]:
        conditions = []
        if filters.status:
            conditions.append(PaymentModel.status == filters.status)
        if filters.method:
            conditions.append(PaymentModel.method == filters.method)
        return await self._page(conditions, pagination)

    async def get_stats(self) -> dict[str, Any]:
        by_status = await self.session.execute(
            select(PaymentModel.status, func.count(PaymentModel.id), func.coalesce(func.sum(PaymentModel.amount), 0))
            .group_by(PaymentModel.status)
        )
        amounts: dict[str, float] = {}
        total_payments = 0
        for status, count, amount in by_status.all():
            amounts[status] = float(amount)
            total_payments += count

        by_method = await self.session.execute(
            select(PaymentModel.method, func.count(PaymentModel.id), func.coalesce(func.sum(PaymentModel.amount), 0))
            .where(PaymentModel.status == PaymentStatus.COMPLETED.value)
            .group_by(PaymentModel.method)
        )
        return {
            "totalPayments": total_payments,
            "totalAmount": sum(amounts.values()),
            "pendingAmount": amounts.get(PaymentStatus.PENDING.value, 0.0),
            "completedAmount": amounts.get(PaymentStatus.COMPLETED.value, 0.0),
            "byMethod": [
                {"method": method, "count": count, "amount": float(amount)}
                for method, count, amount in by_method.all()
            ],
        }

    # Mapping methods

    def _apply(self, model: PaymentModel, payment: Payment) -> None:
        model.amount = payment.amount
        model.currency = payment.currency
        model.method = payment.method.value
        model.status = payment.status.value
        model.transaction_id = payment.transaction_id
        model.gateway_transaction_id = payment.gateway_transaction_id
        model.gateway_response = payment.gateway_response
        model.val_id = payment.val_id
        model.bank_tran_id = payment.bank_tran_id
        model.card_type = payment.card_type
        model.payment_id = payment.payment_id
        model.trx_id = payment.trx_id
        model.paid_at = payment.paid_at
        model.refunded_at = payment.refunded_at
        model.refund_amount = payment.refund_amount
        model.refund_reason = payment.refund_reason
        model.failure_reason = payment.failure_reason

    def _to_entity(self, model: PaymentModel) -> Payment:
        payment = Payment(
            id=model.id,
            order_id=model.order_id,
            user_id=model.user_id,
            amount=float(model.amount or 0),
            currency=model.currency or "BDT",
            method=PaymentMethod(model.method),
            status=PaymentStatus(model.status),
            transaction_id=model.transaction_id,
            gateway_transaction_id=model.gateway_transaction_id,
            gateway_response=model.gateway_response,
            val_id=model.val_id,
            bank_tran_id=model.bank_tran_id,
            card_type=model.card_type,
            payment_id=model.payment_id,
            trx_id=model.trx_id,
            paid_at=model.paid_at,
            refunded_at=model.refunded_at,
            refund_amount=model.refund_amount,
            refund_reason=model.refund_reason,
            failure_reason=model.failure_reason,
        )
        if model.created_at is not None:
            payment.created_at = model.created_at
        if model.updated_at is not None:
            payment.updated_at = model.updated_at
        return payment
