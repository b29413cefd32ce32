"""
Unit tests for analytics: date windows, monthly zero-fill and CSV reports.
"""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.domains.analytics.application.services import AnalyticsService, render_customers_csv, render_sales_csv


@pytest.fixture
def mock_analytics_repository():
    return AsyncMock()


@pytest.fixture
def analytics_service(mock_analytics_repository):
    return AnalyticsService(analytics_repository=mock_analytics_repository)


@pytest.mark.unit
def test_window_defaults_to_last_30_days():
    end = datetime(2024, 3, 31, 12, tzinfo=UTC)

    start, resolved_end = AnalyticsService.resolve_window(end=end)

    assert resolved_end == end
    assert start == end - timedelta(days=30)


@pytest.mark.unit
def test_naive_bounds_are_treated_as_utc():
    start, end = AnalyticsService.resolve_window(datetime(2024, 1, 1), datetime(2024, 1, 31))

    assert start.tzinfo is UTC
    assert end.tzinfo is UTC


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_revenue_zero_fills_twelve_months(analytics_service, mock_analytics_repository):
    mock_analytics_repository.revenue_by_month.return_value = {
        (2023, 4): (1500.0, 2),
        (2024, 3): (900.0, 1),
    }

    result = await analytics_service.monthly_revenue(today=date(2024, 3, 15))

    mock_analytics_repository.revenue_by_month.assert_awaited_once_with(datetime(2023, 4, 1, tzinfo=UTC))
    assert result["labels"][0] == "Apr"
    assert result["labels"][-1] == "Mar"
    assert len(result["revenue"]) == 12
    assert result["revenue"][0] == 1500.0
    assert result["revenue"][-1] == 900.0
    assert result["orders"][1:11] == [0] * 10


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_revenue_crosses_year_in_january(analytics_service, mock_analytics_repository):
    mock_analytics_repository.revenue_by_month.return_value = {}

    result = await analytics_service.monthly_revenue(today=date(2024, 1, 10))

    assert result["labels"] == ["Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec", "Jan"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_dashboard_uses_utc_day_and_month_start(analytics_service, mock_analytics_repository):
    mock_analytics_repository.dashboard_summary.return_value = {}

    await analytics_service.dashboard(now=datetime(2024, 3, 15, 18, 30, tzinfo=UTC))

    mock_analytics_repository.dashboard_summary.assert_awaited_once_with(
        datetime(2024, 3, 15, tzinfo=UTC), datetime(2024, 3, 1, tzinfo=UTC)
    )


@pytest.mark.unit
def test_sales_csv_quotes_every_cell():
    csv_text = render_sales_csv(
        [
            {
                "orderNumber": "ORD-240315-AB12CD",
                "createdAt": datetime(2024, 3, 15, 10, tzinfo=UTC),
                "customerName": "Rahim Uddin",
                "customerEmail": "rahim@example.com",
                "products": ["Cotton Panjabi", 'Saree "Jamdani"'],
                "total": 2460.0,
                "status": "delivered",
                "paymentStatus": "paid",
            }
        ]
    )

    header, row = csv_text.split("\n")
    assert header.startswith("Order Number,Order Date,Customer Name")
    assert row == (
        '"ORD-240315-AB12CD","2024-03-15","Rahim Uddin","rahim@example.com",'
        '"Cotton Panjabi; Saree ""Jamdani""","2460.0","delivered","paid"'
    )


@pytest.mark.unit
def test_customers_csv_handles_missing_fields():
    csv_text = render_customers_csv(
        [{"firstName": "Karim", "lastName": None, "email": "karim@example.com", "totalOrders": 0}]
    )

    assert csv_text.split("\n")[1] == '"Karim","karim@example.com","0","0",""'


@pytest.mark.unit
def test_empty_report_is_header_only():
    assert render_sales_csv([]).count("\n") == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sales_csv_filename_covers_window(analytics_service, mock_analytics_repository):
    mock_analytics_repository.sales_rows.return_value = []

    filename, _ = await analytics_service.sales_csv(
        datetime(2024, 3, 1, tzinfo=UTC), datetime(2024, 3, 31, tzinfo=UTC)
    )

    assert filename == "sales-report-2024-03-01-to-2024-03-31.csv"
