"""
Identity Domain Container.

Single Responsibility: Wire user repository, credentials and services.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.async_db import get_outbox
from app.domains.identity.application.services import AuthService, UserService
from app.domains.identity.infrastructure.repositories import SQLAlchemyUserRepository

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer


class IdentityContainer:
    def __init__(self, base: "BaseContainer"):
        self._base = base

    # ==================== REPOSITORIES ====================

    def create_user_repository(self, db: AsyncSession) -> SQLAlchemyUserRepository:
        return SQLAlchemyUserRepository(session=db)

    # ==================== SERVICES ====================

    def create_auth_service(self, db: AsyncSession) -> AuthService:
        return AuthService(
            user_repository=self.create_user_repository(db),
            credentials=self._base.get_token_service(),
            outbox=get_outbox(db),
        )

    def create_user_service(self, db: AsyncSession) -> UserService:
        return UserService(
            user_repository=self.create_user_repository(db),
            credentials=self._base.get_token_service(),
        )
