"""
Payments API Schemas
"""

from uuid import UUID

from pydantic import Field

from app.api.schemas.common import CamelModel
from app.domains.payments.domain.value_objects import PaymentMethod


class InitiatePaymentBody(CamelModel):
    order_id: UUID
    method: PaymentMethod


class RefundBody(CamelModel):
    amount: float | None = Field(None, gt=0)
    reason: str | None = Field(None, max_length=500)
