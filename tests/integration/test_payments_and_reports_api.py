"""
HTTP tests for gateway callbacks, CSV downloads and the body size limit.
"""

import pytest
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.core.app_factory import create_app
from app.domains.analytics.api.dependencies import get_analytics_service
from app.domains.payments.api.dependencies import get_payment_service

API = "/api/v1"
FRONTEND = "http://localhost:3000"


@pytest.mark.api
def test_sslcommerz_success_post_redirects(api_client, override, service_mock):
    override(get_payment_service, service_mock)
    service_mock.handle_sslcommerz_success.return_value = f"{FRONTEND}/payment/success?txn=TXN-1"

    response = api_client.post(
        f"{API}/payments/sslcommerz/success",
        data={"tran_id": "TXN-1", "val_id": "VAL-9", "status": "VALID"},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == f"{FRONTEND}/payment/success?txn=TXN-1"
    payload = service_mock.handle_sslcommerz_success.await_args.args[0]
    assert payload["tran_id"] == "TXN-1"
    assert payload["val_id"] == "VAL-9"


@pytest.mark.api
def test_bkash_callback_passes_query_parameters(api_client, override, service_mock):
    override(get_payment_service, service_mock)
    service_mock.handle_bkash_callback.return_value = f"{FRONTEND}/payment/failed?method=bkash"

    response = api_client.get(
        f"{API}/payments/bkash/callback", params={"paymentID": "PAY-1", "status": "cancel"}, follow_redirects=False
    )

    assert response.status_code == 302
    service_mock.handle_bkash_callback.assert_awaited_once_with("PAY-1", "cancel")


@pytest.mark.api
def test_initiate_payment_requires_login(api_client, override, service_mock):
    override(get_payment_service, service_mock)

    response = api_client.post(f"{API}/payments", json={"orderId": "x"})

    assert response.status_code == 401


@pytest.mark.api
def test_sales_csv_download(api_client, as_user, admin, override, service_mock):
    as_user(admin)
    override(get_analytics_service, service_mock)
    service_mock.sales_csv.return_value = ("sales-report-2024-03-01-to-2024-03-31.csv", "Order Number\n")

    response = api_client.get(
        f"{API}/analytics/download/sales", params={"startDate": "2024-03-01", "endDate": "2024-03-31"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == (
        "attachment; filename=sales-report-2024-03-01-to-2024-03-31.csv"
    )
    assert response.text == "Order Number\n"
    start, end = service_mock.sales_csv.await_args.args
    assert (start.year, start.month, start.day) == (2024, 3, 1)
    assert (end.year, end.month, end.day) == (2024, 3, 31)


@pytest.mark.api
def test_dashboard_is_admin_only(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_analytics_service, service_mock)

    response = api_client.get(f"{API}/analytics/dashboard")

    assert response.status_code == 403
    service_mock.dashboard.assert_not_called()


@pytest.mark.api
def test_public_stats_need_no_login(api_client, override, service_mock):
    override(get_analytics_service, service_mock)
    service_mock.public_stats.return_value = {"totalProducts": 12, "averageRating": 4.8}

    response = api_client.get(f"{API}/analytics/public-stats")

    assert response.status_code == 200
    assert response.json()["data"]["averageRating"] == 4.8


@pytest.mark.api
def test_oversized_body_answers_413():
    settings = Settings(
        ENVIRONMENT="test",
        MAX_BODY_SIZE=64,
        JWT_ACCESS_SECRET="test-access-secret",
        JWT_REFRESH_SECRET="test-refresh-secret",
    )
    client = TestClient(create_app(settings, use_lifespan=False))

    response = client.post(f"{API}/auth/login", content=b"x" * 65, headers={"content-type": "application/json"})

    assert response.status_code == 413
    assert response.json() == {"success": False, "message": "Request entity too large"}
