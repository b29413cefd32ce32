"""
Shared FastAPI dependencies: container access, authentication, role gates
and pagination.
"""

import logging
from typing import Callable

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import get_settings
from app.core.container import DependencyContainer
from app.core.domain import AuthenticationException, AuthorizationException, Pagination
from app.database.async_db import get_async_db
from app.domains.identity.domain.entities import User
from app.domains.identity.domain.value_objects import STAFF_ROLES, UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_di_container(request: Request) -> DependencyContainer:
    """Container built at startup (see `app.core.lifecycle`)."""
    return request.app.state.container


def get_pagination(
    page: int = Query(1, description="Page number"),  # noqa: B008
    limit: int | None = Query(None, description="Items per page"),  # noqa: B008
) -> Pagination:
    settings = get_settings()
    return Pagination(page=page, limit=limit or settings.DEFAULT_LIMIT, max_limit=settings.MAX_LIMIT)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        AuthenticationException: Missing, invalid or expired token, or user gone
        AuthorizationException: Account blocked
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationException()
    auth_service = container.identity.create_auth_service(db)
    return await auth_service.authenticate(credentials.credentials)


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory admitting only users whose role is in `roles`."""
    allowed = {r.value for r in roles}

    async def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if user.role.value not in allowed:
            logger.warning(f"User {user.id} ({user.role.value}) denied; requires {sorted(allowed)}")
            raise AuthorizationException(operation="role_gate", user_id=str(user.id))
        return user

    return dependency


require_admin = require_roles(*STAFF_ROLES)


__all__ = [
    "bearer_scheme",
    "get_di_container",
    "get_pagination",
    "get_current_user",
    "require_roles",
    "require_admin",
]
