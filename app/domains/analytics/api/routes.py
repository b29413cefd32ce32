"""
Analytics API Routes

Everything except the public stats is admin-only.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.api.dependencies import require_admin
from app.api.responses import success_response
from app.domains.analytics.api.dependencies import get_analytics_service, get_date_window
from app.domains.analytics.application.services import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])
admin = [Depends(require_admin)]


def _csv(filename: str, content: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/public-stats")
async def public_stats(service: AnalyticsService = Depends(get_analytics_service)):  # noqa: B008
    return success_response(await service.public_stats(), "Public statistics fetched")


@router.get("/dashboard", dependencies=admin)
async def dashboard(service: AnalyticsService = Depends(get_analytics_service)):  # noqa: B008
    return success_response(await service.dashboard(), "Dashboard data fetched")


@router.get("/revenue", dependencies=admin)
async def revenue(
    window: tuple[datetime | None, datetime | None] = Depends(get_date_window),  # noqa: B008
    service: AnalyticsService = Depends(get_analytics_service),  # noqa: B008
):
    return success_response(await service.revenue(*window), "Revenue data fetched")


@router.get("/monthly-revenue", dependencies=admin)
async def monthly_revenue(service: AnalyticsService = Depends(get_analytics_service)):  # noqa: B008
    return success_response(await service.monthly_revenue(), "Monthly revenue fetched")


@router.get("/top-products", dependencies=admin)
async def top_products(
    limit: int = Query(10, ge=1, le=100),  # noqa: B008
    service: AnalyticsService = Depends(get_analytics_service),  # noqa: B008
):
    return success_response(await service.top_selling(limit), "Top products fetched")


@router.get("/top-rated", dependencies=admin)
async def top_rated(
    limit: int = Query(10, ge=1, le=100),  # noqa: B008
    service: AnalyticsService = Depends(get_analytics_service),  # noqa: B008
):
    return success_response(await service.top_rated(limit), "Top rated products fetched")


@router.get("/recent-orders", dependencies=admin)
async def recent_orders(
    limit: int = Query(20, ge=1, le=100),  # noqa: B008
    service: AnalyticsService = Depends(get_analytics_service),  # noqa: B008
):
    return success_response(await service.recent_orders(limit), "Recent orders fetched")


@router.get("/sales-by-category", dependencies=admin)
async def sales_by_category(service: AnalyticsService = Depends(get_analytics_service)):  # noqa: B008
    return success_response(await service.sales_by_category(), "Sales by category fetched")


@router.get("/customers", dependencies=admin)
async def customer_report(service: AnalyticsService = Depends(get_analytics_service)):  # noqa: B008
    return success_response(await service.customer_report(), "Customer report fetched")


@router.get("/download/sales", dependencies=admin)
async def download_sales(
    window: tuple[datetime | None, datetime | None] = Depends(get_date_window),  # noqa: B008
    service: AnalyticsService = Depends(get_analytics_service),  # noqa: B008
):
    return _csv(*await service.sales_csv(*window))


@router.get("/download/customers", dependencies=admin)
async def download_customers(service: AnalyticsService = Depends(get_analytics_service)):  # noqa: B008
    return _csv(*await service.customers_csv())
