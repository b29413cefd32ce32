"""
Analytics Ports (Interfaces)
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IAnalyticsRepository(Protocol):
    """Aggregations over the transactional tables; revenue excludes cancelled and returned orders."""

    async def dashboard_summary(self, today_start: datetime, month_start: datetime) -> dict[str, Any]:
        ...

    async def public_stats(self) -> dict[str, Any]:
        ...

    async def revenue_by_day(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        ...

    async def revenue_by_month(self, since: datetime) -> dict[tuple[int, int], tuple[float, int]]:
        """(year, month) -> (revenue, orders) for months with revenue orders."""
        ...

    async def top_selling(self, limit: int) -> list[dict[str, Any]]:
        ...

    async def top_rated(self, limit: int, min_reviews: int) -> list[dict[str, Any]]:
        ...

    async def recent_orders(self, limit: int) -> list[dict[str, Any]]:
        ...

    async def sales_by_category(self) -> list[dict[str, Any]]:
        ...

    async def customer_report(self) -> list[dict[str, Any]]:
        ...

    async def sales_rows(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        """Revenue orders in the window, newest first, with customer name and email."""
        ...


__all__ = ["IAnalyticsRepository"]
