"""
Identity API Dependencies
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.identity.application.services import AuthService, UserService


def get_auth_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> AuthService:
    return container.identity.create_auth_service(db)


def get_user_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UserService:
    return container.identity.create_user_service(db)


__all__ = ["get_auth_service", "get_user_service"]
