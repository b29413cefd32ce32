"""
User Service

Profile self-service, address book and admin user management.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.domain import (
    AuthenticationException,
    BusinessRuleViolationException,
    EntityNotFoundException,
    PaginatedResult,
    Pagination,
    utcnow,
)
from app.domains.identity.application.ports import ICredentialService, IUserRepository
from app.domains.identity.domain.entities import User, UserAddress
from app.domains.identity.domain.value_objects import UserRole, UserStatus

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone", "avatar", "bio", "date_of_birth", "gender")


class UserService:
    def __init__(self, user_repository: IUserRepository, credentials: ICredentialService):
        self.user_repository = user_repository
        self.credentials = credentials

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if not user or user.is_deleted:
            raise EntityNotFoundException("User", user_id, "User not found")
        return user

    # Self-service

    async def update_profile(self, user: User, changes: dict[str, Any]) -> User:
        for key in PROFILE_FIELDS:
            if key in changes:
                setattr(user, key, changes[key])
        user.touch()
        return await self.user_repository.save(user)

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not self.credentials.verify_password(current_password, user.password_hash):
            raise AuthenticationException("Current password is incorrect")
        user.change_password_hash(self.credentials.get_password_hash(new_password))
        await self.user_repository.save(user)
        logger.info(f"Password changed for user {user.id}")

    async def add_address(self, user: User, address: UserAddress) -> User:
        user.add_address(address)
        return await self.user_repository.save(user)

    async def update_address(self, user: User, address_id: UUID, changes: dict[str, Any]) -> User:
        user.update_address(address_id, changes)
        return await self.user_repository.save(user)

    async def delete_address(self, user: User, address_id: UUID) -> User:
        user.remove_address(address_id)
        return await self.user_repository.save(user)

    async def set_default_address(self, user: User, address_id: UUID) -> User:
        user.set_default_address(address_id)
        return await self.user_repository.save(user)

    # Admin

    async def list_users(
        self,
        pagination: Pagination,
        search: str | None = None,
        role: str | None = None,
        status: str | None = None,
    ) -> PaginatedResult[User]:
        return await self.user_repository.list(pagination, search=search, role=role, status=status)

    async def admin_update(self, actor: User, user_id: UUID, changes: dict[str, Any]) -> User:
        user = await self.get_user(user_id)

        if "role" in changes and changes["role"] is not None:
            role = UserRole.from_string(changes["role"])
            if role == UserRole.SUPER_ADMIN and actor.role != UserRole.SUPER_ADMIN:
                raise BusinessRuleViolationException("super_admin_grant", "Only a super admin can grant super admin role")
            user.role = role
        if "status" in changes and changes["status"] is not None:
            if user.id == actor.id:
                raise BusinessRuleViolationException("self_status", "You cannot change your own status")
            user.status = UserStatus.from_string(changes["status"])
        for key in PROFILE_FIELDS:
            if key in changes:
                setattr(user, key, changes[key])

        user.touch()
        user = await self.user_repository.save(user)
        logger.info(f"User {user.id} updated by admin {actor.id}")
        return user

    async def admin_delete(self, actor: User, user_id: UUID) -> None:
        user = await self.get_user(user_id)
        if user.id == actor.id:
            raise BusinessRuleViolationException("self_delete", "You cannot delete your own account")
        user.soft_delete()
        await self.user_repository.save(user)
        logger.info(f"User {user.id} soft-deleted by admin {actor.id}")

    async def get_stats(self) -> dict[str, int]:
        now = utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return await self.user_repository.get_stats(month_start)


__all__ = ["UserService"]
