from .payment_repository import SQLAlchemyPaymentRepository

__all__ = ["SQLAlchemyPaymentRepository"]
