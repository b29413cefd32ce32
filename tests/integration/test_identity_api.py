"""
HTTP tests for the identity routers, the response envelope and the auth gate.
"""

from unittest.mock import AsyncMock

import pytest

from app.domains.identity.api.dependencies import get_auth_service, get_user_service
from app.domains.identity.application.services import AuthService

API = "/api/v1"


@pytest.fixture
def user_repository():
    repo = AsyncMock()
    repo.create.side_effect = lambda user: user
    repo.save.side_effect = lambda user: user
    return repo


@pytest.fixture
def wired_auth_service(override, user_repository, token_service, outbox):
    return override(get_auth_service, AuthService(user_repository, token_service, outbox))


@pytest.mark.api
def test_health(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Server is running"
    assert body["environment"] == "test"
    assert body["uptime"] >= 0


@pytest.mark.api
def test_correlation_id_is_echoed(api_client):
    response = api_client.get("/health", headers={"X-Correlation-ID": "abc123"})

    assert response.headers["X-Correlation-ID"] == "abc123"


@pytest.mark.api
def test_unknown_route_uses_envelope(api_client):
    response = api_client.get(f"{API}/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": f"Route {API}/does-not-exist not found"}


@pytest.mark.api
def test_register_returns_user_and_tokens(api_client, wired_auth_service, user_repository):
    user_repository.email_exists.return_value = False

    response = api_client.post(
        f"{API}/auth/register",
        json={"email": "karim@example.com", "password": "secret123", "firstName": "Karim", "lastName": "Ali"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "karim@example.com"
    assert "password" not in body["data"]["user"]
    assert "passwordHash" not in body["data"]["user"]
    assert set(body["data"]["tokens"]) == {"accessToken", "refreshToken"}


@pytest.mark.api
def test_register_validation_error(api_client, wired_auth_service):
    response = api_client.post(
        f"{API}/auth/register",
        json={"email": "not-an-email", "password": "123", "firstName": "K", "lastName": "A"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    paths = {source["path"] for source in body["errorSources"]}
    assert {"email", "password"} <= paths


@pytest.mark.api
def test_duplicate_email_answers_400(api_client, wired_auth_service, user_repository):
    user_repository.email_exists.return_value = True

    response = api_client.post(
        f"{API}/auth/register",
        json={"email": "karim@example.com", "password": "secret123", "firstName": "Karim", "lastName": "Ali"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email already exists"


@pytest.mark.api
def test_missing_bearer_token(api_client):
    response = api_client.get(f"{API}/users/me")

    assert response.status_code == 401
    assert response.json()["message"] == "You are not logged in. Please login to continue."


@pytest.mark.api
def test_bearer_token_resolves_user(api_client, fastapi_app, token_service, user_repository, customer, outbox):
    user_repository.get_by_id.return_value = customer
    fastapi_app.state.container.identity.create_auth_service.return_value = AuthService(
        user_repository, token_service, outbox
    )
    token = token_service.create_token_pair(str(customer.id), customer.email, "customer")["accessToken"]

    response = api_client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(customer.id)


@pytest.mark.api
def test_customer_denied_admin_route(api_client, as_user, customer, override, service_mock):
    as_user(customer)
    override(get_user_service, service_mock)

    response = api_client.get(f"{API}/users/stats")

    assert response.status_code == 403
    assert response.json()["message"] == "You do not have permission to perform this action."
    service_mock.get_stats.assert_not_called()


@pytest.mark.api
def test_admin_stats(api_client, as_user, admin, override, service_mock):
    as_user(admin)
    override(get_user_service, service_mock)
    service_mock.get_stats.return_value = {"total": 3, "customers": 2, "admins": 1}

    response = api_client.get(f"{API}/users/stats")

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 3
