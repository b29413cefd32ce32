"""
Analytics Service

Date windows and report shaping on top of the repository aggregations.
"""

import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from app.core.domain import utcnow
from app.domains.analytics.application.ports import IAnalyticsRepository
from app.domains.analytics.application.services.reports import render_customers_csv, render_sales_csv

logger = logging.getLogger(__name__)

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DEFAULT_WINDOW_DAYS = 30
TOP_RATED_MIN_REVIEWS = 5


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _month_offset(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


class AnalyticsService:
    def __init__(self, analytics_repository: IAnalyticsRepository):
        self.analytics_repository = analytics_repository

    @staticmethod
    def resolve_window(start: datetime | None = None, end: datetime | None = None) -> tuple[datetime, datetime]:
        """Fill a missing bound: `end` defaults to now and `start` to 30 days before `end`."""
        end = _aware(end) or utcnow()
        start = _aware(start) or end - timedelta(days=DEFAULT_WINDOW_DAYS)
        return start, end

    async def dashboard(self, now: datetime | None = None) -> dict[str, Any]:
        now = now or utcnow()
        today_start = datetime.combine(now.date(), time.min, tzinfo=UTC)
        month_start = today_start.replace(day=1)
        return await self.analytics_repository.dashboard_summary(today_start, month_start)

    async def public_stats(self) -> dict[str, Any]:
        return await self.analytics_repository.public_stats()

    async def revenue(self, start: datetime | None = None, end: datetime | None = None) -> list[dict[str, Any]]:
        return await self.analytics_repository.revenue_by_day(*self.resolve_window(start, end))

    async def monthly_revenue(self, today: date | None = None) -> dict[str, list]:
        """
        Revenue and order counts for the last 12 calendar months, oldest
        first; months without orders are zero.
        """
        today = today or utcnow().date()
        first_year, first_month = _month_offset(today.year, today.month, -11)
        since = datetime(first_year, first_month, 1, tzinfo=UTC)
        totals = await self.analytics_repository.revenue_by_month(since)

        labels: list[str] = []
        revenue: list[float] = []
        orders: list[int] = []
        for offset in range(12):
            year, month = _month_offset(first_year, first_month, offset)
            month_revenue, month_orders = totals.get((year, month), (0.0, 0))
            labels.append(MONTH_LABELS[month - 1])
            revenue.append(month_revenue)
            orders.append(month_orders)
        return {"labels": labels, "revenue": revenue, "orders": orders}

    async def top_selling(self, limit: int = 10) -> list[dict[str, Any]]:
        return await self.analytics_repository.top_selling(limit)

    async def top_rated(self, limit: int = 10) -> list[dict[str, Any]]:
        return await self.analytics_repository.top_rated(limit, TOP_RATED_MIN_REVIEWS)

    async def recent_orders(self, limit: int = 20) -> list[dict[str, Any]]:
        return await self.analytics_repository.recent_orders(limit)

    async def sales_by_category(self) -> list[dict[str, Any]]:
        return await self.analytics_repository.sales_by_category()

    async def customer_report(self) -> list[dict[str, Any]]:
        return await self.analytics_repository.customer_report()

    async def sales_csv(self, start: datetime | None = None, end: datetime | None = None) -> tuple[str, str]:
        """Returns (filename, csv) for revenue orders in the window."""
        start, end = self.resolve_window(start, end)
        rows = await self.analytics_repository.sales_rows(start, end)
        logger.info(f"Sales report {start.date()}..{end.date()}: {len(rows)} orders")
        return f"sales-report-{start.date().isoformat()}-to-{end.date().isoformat()}.csv", render_sales_csv(rows)

    async def customers_csv(self) -> tuple[str, str]:
        return "customer-report.csv", render_customers_csv(await self.customer_report())


__all__ = ["AnalyticsService", "MONTH_LABELS", "TOP_RATED_MIN_REVIEWS"]
