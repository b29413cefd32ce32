"""
Payments API Dependencies
"""

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.payments.application.dto import PaymentFilters
from app.domains.payments.application.services import PaymentService


def get_payment_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> PaymentService:
    return container.payments.create_payment_service(db)


def get_payment_filters(
    status: str | None = Query(None),  # noqa: B008
    method: str | None = Query(None),  # noqa: B008
) -> PaymentFilters:
    return PaymentFilters(status=status, method=method)


__all__ = ["get_payment_service", "get_payment_filters"]
