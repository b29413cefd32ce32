"""
Unit tests for identity: token issuing, registration, login and refresh.
"""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import (
    AuthenticationException,
    AuthorizationException,
    DuplicateEntityException,
)
from app.domains.identity.application.services import AuthService, RegisterRequest
from app.domains.identity.domain.events import UserRegistered
from app.domains.identity.domain.value_objects import UserStatus

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def mock_user_repository():
    repo = AsyncMock()
    repo.create.side_effect = lambda user: user
    repo.save.side_effect = lambda user: user
    return repo


@pytest.fixture
def auth_service(mock_user_repository, token_service, outbox):
    return AuthService(user_repository=mock_user_repository, credentials=token_service, outbox=outbox)


# ============================================================================
# TokenService
# ============================================================================


@pytest.mark.unit
def test_password_hash_roundtrip(token_service):
    hashed = token_service.get_password_hash("secret123")

    assert hashed != "secret123"
    assert token_service.verify_password("secret123", hashed)
    assert not token_service.verify_password("wrong", hashed)


@pytest.mark.unit
def test_malformed_hash_does_not_verify(token_service):
    assert token_service.verify_password("secret123", "not-a-bcrypt-hash") is False


@pytest.mark.unit
def test_token_pair_claims(token_service):
    user_id = str(uuid4())
    tokens = token_service.create_token_pair(user_id, "a@b.com", "customer")

    access = token_service.decode_token(tokens["accessToken"], "access")
    refresh = token_service.decode_token(tokens["refreshToken"], "refresh")

    assert access["sub"] == user_id
    assert access["role"] == "customer"
    assert refresh["sub"] == user_id


@pytest.mark.unit
def test_refresh_token_rejected_as_access(token_service):
    tokens = token_service.create_token_pair(str(uuid4()), "a@b.com", "customer")

    with pytest.raises(AuthenticationException):
        token_service.decode_token(tokens["refreshToken"], "access")


@pytest.mark.unit
def test_expired_token(token_service):
    token = token_service.create_access_token({"sub": str(uuid4())}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(AuthenticationException) as exc_info:
        token_service.decode_token(token)

    assert exc_info.value.message == "Your token has expired. Please login again."
    assert exc_info.value.status_code == 401


# ============================================================================
# Registration
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_register_creates_user_and_records_event(auth_service, mock_user_repository, outbox):
    mock_user_repository.email_exists.return_value = False

    result = await auth_service.register(
        RegisterRequest(email="  Karim@Example.COM ", password="secret123", first_name="Karim", last_name="Ali")
    )

    assert result.user.email == "karim@example.com"
    assert result.user.password_hash != "secret123"
    assert set(result.tokens) == {"accessToken", "refreshToken"}
    assert "password" not in str(result.to_dict()["user"]).lower()
    mock_user_repository.email_exists.assert_awaited_once_with("karim@example.com")

    events = outbox.pending()
    assert len(events) == 1
    assert isinstance(events[0], UserRegistered)
    assert events[0].email == "karim@example.com"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_register_duplicate_email(auth_service, mock_user_repository):
    mock_user_repository.email_exists.return_value = True

    with pytest.raises(DuplicateEntityException) as exc_info:
        await auth_service.register(
            RegisterRequest(email="karim@example.com", password="secret123", first_name="K", last_name="A")
        )

    assert exc_info.value.message == "User with this email already exists"
    assert exc_info.value.status_code == 400
    mock_user_repository.create.assert_not_called()


# ============================================================================
# Login
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_success_stamps_last_login(auth_service, mock_user_repository, token_service, make_user):
    user = make_user(password_hash=token_service.get_password_hash("secret123"))
    mock_user_repository.get_by_email.return_value = user

    result = await auth_service.login("RAHIM@example.com", "secret123")

    assert result.user.last_login_at is not None
    mock_user_repository.get_by_email.assert_awaited_once_with("rahim@example.com")
    mock_user_repository.save.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_wrong_password(auth_service, mock_user_repository, token_service, make_user):
    mock_user_repository.get_by_email.return_value = make_user(password_hash=token_service.get_password_hash("x" * 8))

    with pytest.raises(AuthenticationException) as exc_info:
        await auth_service.login("rahim@example.com", "secret123")

    assert exc_info.value.message == "Invalid email or password"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_unknown_email(auth_service, mock_user_repository):
    mock_user_repository.get_by_email.return_value = None

    with pytest.raises(AuthenticationException):
        await auth_service.login("nobody@example.com", "secret123")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_blocked_user(auth_service, mock_user_repository, token_service, make_user):
    user = make_user(password_hash=token_service.get_password_hash("secret123"), status=UserStatus.BLOCKED)
    mock_user_repository.get_by_email.return_value = user

    with pytest.raises(AuthorizationException) as exc_info:
        await auth_service.login("rahim@example.com", "secret123")

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Your account has been blocked. Contact support."


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_deleted_user(auth_service, mock_user_repository, token_service, make_user):
    user = make_user(password_hash=token_service.get_password_hash("secret123"), is_deleted=True)
    mock_user_repository.get_by_email.return_value = user

    with pytest.raises(AuthenticationException) as exc_info:
        await auth_service.login("rahim@example.com", "secret123")

    assert exc_info.value.message == "This user account has been deleted."


# ============================================================================
# Refresh / authenticate
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_refresh_issues_access_token(auth_service, mock_user_repository, token_service, customer):
    mock_user_repository.get_by_id.return_value = customer
    tokens = token_service.create_token_pair(str(customer.id), customer.email, "customer")

    result = await auth_service.refresh(tokens["refreshToken"])

    payload = token_service.decode_token(result["accessToken"])
    assert payload["sub"] == str(customer.id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_authenticate_user_gone(auth_service, mock_user_repository, token_service):
    mock_user_repository.get_by_id.return_value = None
    tokens = token_service.create_token_pair(str(uuid4()), "x@y.com", "customer")

    with pytest.raises(AuthenticationException) as exc_info:
        await auth_service.authenticate(tokens["accessToken"])

    assert exc_info.value.message == "User belonging to this token no longer exists."
