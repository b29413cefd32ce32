"""
Payment value objects.
"""

from app.core.domain import StatusEnum
from app.domains.commerce.domain.value_objects import PaymentMethod


class PaymentStatus(StatusEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class CallbackOutcome(StatusEnum):
    """Storefront landing page a gateway callback redirects to."""

    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


__all__ = ["PaymentStatus", "PaymentMethod", "CallbackOutcome"]
