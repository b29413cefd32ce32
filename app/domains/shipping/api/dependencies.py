"""
Shipping API Dependencies
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.shipping.application.services import ShippingService


def get_shipping_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ShippingService:
    return container.shipping.create_shipping_service(db)


__all__ = ["get_shipping_service"]
