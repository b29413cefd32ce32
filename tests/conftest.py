"""
Shared pytest fixtures for all tests.

Unit tests build services directly over `AsyncMock` repositories; API tests
drive the real routers through `TestClient` with the session, the current
user and the domain services overridden.
"""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Ensure test environment before settings are read
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_SALT_ROUNDS", "4")
os.environ.setdefault("NOTIFICATION_SWEEP_ENABLED", "false")

from app.api.dependencies import get_current_user, get_di_container, require_admin  # noqa: E402
from app.config.settings import Settings  # noqa: E402
from app.core.domain import EventOutbox  # noqa: E402
from app.database.async_db import get_async_db  # noqa: E402
from app.domains.catalog.domain.entities import Product  # noqa: E402
from app.domains.catalog.domain.value_objects import ProductStatus  # noqa: E402
from app.domains.identity.domain.entities import User  # noqa: E402
from app.domains.identity.domain.value_objects import UserRole  # noqa: E402
from app.domains.identity.infrastructure.security import TokenService  # noqa: E402

# ============================================================================
# SETTINGS AND CREDENTIALS
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        BCRYPT_SALT_ROUNDS=4,
        JWT_ACCESS_SECRET="test-access-secret",
        JWT_REFRESH_SECRET="test-refresh-secret",
    )


@pytest.fixture
def token_service(test_settings: Settings) -> TokenService:
    return TokenService(test_settings)


@pytest.fixture
def outbox() -> EventOutbox:
    return EventOutbox()


# ============================================================================
# TEST DATA FIXTURES
# ============================================================================


@pytest.fixture
def make_user() -> Callable[..., User]:
    def factory(**overrides: Any) -> User:
        data: dict[str, Any] = {
            "id": uuid4(),
            "email": "rahim@example.com",
            "password_hash": "hashed",
            "first_name": "Rahim",
            "last_name": "Uddin",
            "phone": "01700000000",
        }
        data.update(overrides)
        return User(**data)

    return factory


@pytest.fixture
def customer(make_user) -> User:
    return make_user()


@pytest.fixture
def admin(make_user) -> User:
    return make_user(email="admin@example.com", first_name="Admin", last_name="User", role=UserRole.ADMIN)


@pytest.fixture
def make_product() -> Callable[..., Product]:
    def factory(**overrides: Any) -> Product:
        data: dict[str, Any] = {
            "id": uuid4(),
            "name": "Cotton Panjabi",
            "slug": "cotton-panjabi",
            "price": 1200.0,
            "quantity": 10,
            "status": ProductStatus.ACTIVE,
            "category_id": uuid4(),
        }
        data.update(overrides)
        return Product(**data)

    return factory


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def fastapi_app(test_settings: Settings) -> Generator[FastAPI, None, None]:
    """
    Application without lifespan: no Redis, no background jobs, and a
    MagicMock standing in for the session.
    """
    from app.core.app_factory import create_app

    app = create_app(test_settings, use_lifespan=False)
    container = MagicMock()
    app.state.container = container

    async def fake_db():
        yield MagicMock()

    app.dependency_overrides[get_async_db] = fake_db
    app.dependency_overrides[get_di_container] = lambda: container
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(fastapi_app: FastAPI) -> TestClient:
    return TestClient(fastapi_app)


@pytest.fixture
def as_user(fastapi_app: FastAPI) -> Callable[[User], None]:
    """Authenticate every request as `user`; staff users also pass the admin gate."""

    def login(user: User) -> None:
        fastapi_app.dependency_overrides[get_current_user] = lambda: user
        if user.is_staff:
            fastapi_app.dependency_overrides[require_admin] = lambda: user
        else:
            fastapi_app.dependency_overrides.pop(require_admin, None)

    return login


@pytest.fixture
def override(fastapi_app: FastAPI) -> Callable[[Callable, Any], Any]:
    """Replace a service dependency with the given object."""

    def apply(dependency: Callable, service: Any) -> Any:
        fastapi_app.dependency_overrides[dependency] = lambda: service
        return service

    return apply


@pytest.fixture
def service_mock() -> AsyncMock:
    return AsyncMock()
