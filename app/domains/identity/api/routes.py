"""
Identity API Routes

Authentication and user management endpoints.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_pagination, require_admin
from app.api.responses import paginated_response, success_response
from app.core.domain import Pagination
from app.domains.identity.api.dependencies import get_auth_service, get_user_service
from app.domains.identity.api.schemas import (
    AddressBody,
    AddressUpdateBody,
    AdminUserUpdateBody,
    ChangePasswordBody,
    LoginBody,
    ProfileUpdateBody,
    RefreshTokenBody,
    RegisterBody,
)
from app.domains.identity.application.services import AuthService, RegisterRequest, UserService
from app.domains.identity.domain.entities import User, UserAddress

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
users_router = APIRouter(prefix="/users", tags=["Users"])


# ============================================================================
# Auth
# ============================================================================


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterBody,
    service: AuthService = Depends(get_auth_service),  # noqa: B008
):
    """Create a customer account and return a token pair."""
    result = await service.register(RegisterRequest(**body.model_dump()))
    return success_response(result.to_dict(), "User registered successfully")


@auth_router.post("/login")
async def login(
    body: LoginBody,
    service: AuthService = Depends(get_auth_service),  # noqa: B008
):
    result = await service.login(body.email, body.password)
    return success_response(result.to_dict(), "Login successful")


@auth_router.post("/refresh-token")
async def refresh_token(
    body: RefreshTokenBody,
    service: AuthService = Depends(get_auth_service),  # noqa: B008
):
    tokens = await service.refresh(body.refresh_token)
    return success_response(tokens, "Access token refreshed")


@auth_router.get("/me")
async def auth_me(user: User = Depends(get_current_user)):  # noqa: B008
    return success_response(user.to_dict(), "User retrieved successfully")


# ============================================================================
# Self-service
# ============================================================================


@users_router.get("/me")
async def get_me(user: User = Depends(get_current_user)):  # noqa: B008
    return success_response(user.to_dict(), "Profile retrieved successfully")


@users_router.patch("/me")
async def update_me(
    body: ProfileUpdateBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    updated = await service.update_profile(user, body.model_dump(exclude_unset=True))
    return success_response(updated.to_dict(), "Profile updated successfully")


@users_router.patch("/change-password")
async def change_password(
    body: ChangePasswordBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    await service.change_password(user, body.current_password, body.new_password)
    return success_response(None, "Password changed successfully")


@users_router.post("/me/addresses", status_code=status.HTTP_201_CREATED)
async def add_address(
    body: AddressBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    updated = await service.add_address(user, UserAddress(**body.model_dump()))
    return success_response([a.to_dict() for a in updated.addresses], "Address added successfully")


@users_router.patch("/me/addresses/{address_id}")
async def update_address(
    address_id: UUID,
    body: AddressUpdateBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    updated = await service.update_address(user, address_id, body.model_dump(exclude_unset=True))
    return success_response([a.to_dict() for a in updated.addresses], "Address updated successfully")


@users_router.delete("/me/addresses/{address_id}")
async def delete_address(
    address_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    updated = await service.delete_address(user, address_id)
    return success_response([a.to_dict() for a in updated.addresses], "Address deleted successfully")


@users_router.patch("/me/addresses/{address_id}/default")
async def set_default_address(
    address_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    updated = await service.set_default_address(user, address_id)
    return success_response([a.to_dict() for a in updated.addresses], "Default address updated")


# ============================================================================
# Admin
# ============================================================================


@users_router.get("/stats")
async def user_stats(
    _: User = Depends(require_admin),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    return success_response(await service.get_stats(), "User statistics retrieved successfully")


@users_router.get("")
async def list_users(
    search: str | None = Query(None, description="Name, email or phone contains"),  # noqa: B008
    role: str | None = Query(None),  # noqa: B008
    status_filter: str | None = Query(None, alias="status"),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    _: User = Depends(require_admin),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    result = await service.list_users(pagination, search=search, role=role, status=status_filter)
    return paginated_response(result, "Users retrieved successfully")


@users_router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    _: User = Depends(require_admin),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    user = await service.get_user(user_id)
    return success_response(user.to_dict(), "User retrieved successfully")


@users_router.patch("/{user_id}")
async def admin_update_user(
    user_id: UUID,
    body: AdminUserUpdateBody,
    actor: User = Depends(require_admin),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    user = await service.admin_update(actor, user_id, body.model_dump(exclude_unset=True))
    return success_response(user.to_dict(), "User updated successfully")


@users_router.delete("/{user_id}")
async def admin_delete_user(
    user_id: UUID,
    actor: User = Depends(require_admin),  # noqa: B008
    service: UserService = Depends(get_user_service),  # noqa: B008
):
    await service.admin_delete(actor, user_id)
    return success_response(None, "User deleted successfully")


__all__ = ["auth_router", "users_router"]
