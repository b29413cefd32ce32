"""
Payments Domain Container.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.async_db import get_outbox
from app.domains.payments.application.services import PaymentService
from app.domains.payments.infrastructure.repositories import SQLAlchemyPaymentRepository

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer
    from app.core.container.commerce import CommerceContainer


class PaymentsContainer:
    def __init__(self, base: "BaseContainer", commerce: "CommerceContainer"):
        self._base = base
        self._commerce = commerce

    def create_payment_repository(self, db: AsyncSession) -> SQLAlchemyPaymentRepository:
        return SQLAlchemyPaymentRepository(session=db)

    def create_payment_service(self, db: AsyncSession) -> PaymentService:
        return PaymentService(
            payment_repository=self.create_payment_repository(db),
            order_repository=self._commerce.create_order_repository(db),
            sslcommerz=self._base.get_sslcommerz(),
            bkash=self._base.get_bkash(),
            outbox=get_outbox(db),
            frontend_url=self._base.settings.FRONTEND_URL,
            currency=self._base.settings.CURRENCY,
        )
