"""
Commerce API Dependencies
"""

from datetime import datetime

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.commerce.application.dto import OrderFilters
from app.domains.commerce.application.services import CartService, CouponService, OrderService
from app.domains.commerce.application.use_cases import PlaceOrderUseCase


def get_cart_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CartService:
    return container.commerce.create_cart_service(db)


def get_coupon_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CouponService:
    return container.commerce.create_coupon_service(db)


def get_order_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> OrderService:
    return container.commerce.create_order_service(db)


def get_place_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> PlaceOrderUseCase:
    return container.commerce.create_place_order_use_case(db)


def get_order_filters(
    status: str | None = Query(None),  # noqa: B008
    payment_status: str | None = Query(None, alias="paymentStatus"),  # noqa: B008
    start_date: datetime | None = Query(None, alias="startDate"),  # noqa: B008
    end_date: datetime | None = Query(None, alias="endDate"),  # noqa: B008
    search: str | None = Query(None, description="Order number, customer name or phone"),  # noqa: B008
) -> OrderFilters:
    return OrderFilters(
        status=status,
        payment_status=payment_status,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


__all__ = [
    "get_cart_service",
    "get_coupon_service",
    "get_order_service",
    "get_place_order_use_case",
    "get_order_filters",
]
