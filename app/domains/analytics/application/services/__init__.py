from .analytics_service import AnalyticsService
from .reports import render_customers_csv, render_sales_csv

__all__ = ["AnalyticsService", "render_sales_csv", "render_customers_csv"]
