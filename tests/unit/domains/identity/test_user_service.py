"""
Unit tests for UserService and the User address book.
"""

from unittest.mock import AsyncMock

import pytest

from app.core.domain import AuthenticationException, BusinessRuleViolationException, EntityNotFoundException
from app.domains.identity.application.services import UserService
from app.domains.identity.domain.entities import UserAddress
from app.domains.identity.domain.value_objects import UserRole, UserStatus


@pytest.fixture
def mock_user_repository():
    repo = AsyncMock()
    repo.save.side_effect = lambda user: user
    return repo


@pytest.fixture
def user_service(mock_user_repository, token_service):
    return UserService(user_repository=mock_user_repository, credentials=token_service)


def _address(city: str, **kwargs) -> UserAddress:
    return UserAddress(full_name="Rahim Uddin", phone="01700000000", street="House 1", city=city, **kwargs)


@pytest.mark.unit
def test_first_address_becomes_default(customer):
    first = customer.add_address(_address("Dhaka"))
    second = customer.add_address(_address("Sylhet"))

    assert first.is_default is True
    assert second.is_default is False
    assert customer.default_address() is first


@pytest.mark.unit
def test_removing_default_promotes_next(customer):
    first = customer.add_address(_address("Dhaka"))
    second = customer.add_address(_address("Sylhet"))

    customer.remove_address(first.id)

    assert customer.addresses == [second]
    assert second.is_default is True


@pytest.mark.unit
def test_set_default_is_exclusive(customer):
    first = customer.add_address(_address("Dhaka"))
    second = customer.add_address(_address("Sylhet"))

    customer.set_default_address(second.id)

    assert second.is_default and not first.is_default


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_password_rejects_wrong_current(user_service, token_service, make_user):
    user = make_user(password_hash=token_service.get_password_hash("old-secret"))

    with pytest.raises(AuthenticationException) as exc_info:
        await user_service.change_password(user, "not-it", "new-secret")

    assert exc_info.value.message == "Current password is incorrect"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_password_rehashes(user_service, token_service, make_user, mock_user_repository):
    user = make_user(password_hash=token_service.get_password_hash("old-secret"))

    await user_service.change_password(user, "old-secret", "new-secret")

    assert token_service.verify_password("new-secret", user.password_hash)
    assert user.password_changed_at is not None
    mock_user_repository.save.assert_awaited_once_with(user)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_deleted_user_is_not_found(user_service, mock_user_repository, make_user):
    mock_user_repository.get_by_id.return_value = make_user(is_deleted=True)

    with pytest.raises(EntityNotFoundException):
        await user_service.get_user(make_user().id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_cannot_grant_super_admin(user_service, mock_user_repository, admin, customer):
    mock_user_repository.get_by_id.return_value = customer

    with pytest.raises(BusinessRuleViolationException):
        await user_service.admin_update(admin, customer.id, {"role": "super_admin"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_blocks_customer(user_service, mock_user_repository, admin, customer):
    mock_user_repository.get_by_id.return_value = customer

    updated = await user_service.admin_update(admin, customer.id, {"status": "blocked", "role": "admin"})

    assert updated.status == UserStatus.BLOCKED
    assert updated.role == UserRole.ADMIN


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_cannot_delete_self(user_service, mock_user_repository, admin):
    mock_user_repository.get_by_id.return_value = admin

    with pytest.raises(BusinessRuleViolationException):
        await user_service.admin_delete(admin, admin.id)
