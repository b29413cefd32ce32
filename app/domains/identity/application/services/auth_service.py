"""
Authentication Service

Registration, login and token refresh.
"""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from app.core.domain import AuthenticationException, DuplicateEntityException, EventOutbox
from app.domains.identity.application.ports import ICredentialService, IUserRepository
from app.domains.identity.domain.entities import User

logger = logging.getLogger(__name__)


@dataclass
class RegisterRequest:
    email: str
    password: str
    first_name: str
    last_name: str
    phone: str | None = None


@dataclass
class AuthResult:
    user: User
    tokens: dict[str, str]

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user.to_dict(), "tokens": self.tokens}


class AuthService:
    """
    Issues credentials for users.

    Responsibilities:
    - Create accounts (unique email, hashed password)
    - Verify credentials and account state at login
    - Exchange refresh tokens for access tokens
    """

    def __init__(self, user_repository: IUserRepository, credentials: ICredentialService, outbox: EventOutbox):
        self.user_repository = user_repository
        self.credentials = credentials
        self.outbox = outbox

    def _issue(self, user: User) -> dict[str, str]:
        return self.credentials.create_token_pair(str(user.id), user.email, user.role.value)

    async def register(self, request: RegisterRequest) -> AuthResult:
        email = request.email.strip().lower()
        if await self.user_repository.email_exists(email):
            raise DuplicateEntityException("User", "email", email, "User with this email already exists")

        user = User.register(
            email=email,
            password_hash=self.credentials.get_password_hash(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
        )
        user = await self.user_repository.create(user)
        self.outbox.collect_from(user)

        logger.info(f"User registered: {user.id} ({user.email})")
        return AuthResult(user=user, tokens=self._issue(user))

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.user_repository.get_by_email(email.strip().lower())
        if not user or not self.credentials.verify_password(password, user.password_hash):
            logger.info(f"Failed login for {email}")
            raise AuthenticationException("Invalid email or password")

        user.ensure_active()
        user.record_login()
        user = await self.user_repository.save(user)
        return AuthResult(user=user, tokens=self._issue(user))

    async def refresh(self, refresh_token: str) -> dict[str, str]:
        payload = self.credentials.decode_token(refresh_token, "refresh")
        try:
            user_id = UUID(payload["sub"])
        except (KeyError, ValueError) as e:
            raise AuthenticationException("Invalid refresh token") from e

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise AuthenticationException("User belonging to this token no longer exists.")
        user.ensure_active()

        access = self.credentials.create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})
        return {"accessToken": access}

    async def authenticate(self, access_token: str) -> User:
        """Resolve the user behind an access token and check the account may act."""
        payload = self.credentials.decode_token(access_token, "access")
        try:
            user_id = UUID(payload["sub"])
        except (KeyError, ValueError) as e:
            raise AuthenticationException("Invalid authentication token.") from e

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise AuthenticationException("User belonging to this token no longer exists.")
        user.ensure_active()
        return user


__all__ = ["AuthService", "AuthResult", "RegisterRequest"]
