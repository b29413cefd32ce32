"""
JWT and password hashing service.

Access and refresh tokens are signed with separate secrets so a leaked
refresh secret cannot mint access tokens (and vice versa).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.config.settings import Settings, get_settings
from app.core.domain.exceptions import AuthenticationException

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenService:
    """
    Issues and verifies JWTs and hashes passwords with bcrypt.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

        self.ALGORITHM = self.settings.JWT_ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.settings.JWT_ACCESS_EXPIRES_MINUTES
        self.REFRESH_TOKEN_EXPIRE_DAYS = self.settings.JWT_REFRESH_EXPIRES_DAYS
        self._secrets = {
            ACCESS: self.settings.JWT_ACCESS_SECRET,
            REFRESH: self.settings.JWT_REFRESH_SECRET,
        }

    # Passwords

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Check a plain password against its bcrypt hash."""
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    def get_password_hash(self, password: str) -> str:
        """Hash a password with the configured bcrypt cost."""
        salt = bcrypt.gensalt(rounds=self.settings.BCRYPT_SALT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    # Tokens

    def _encode(self, data: Dict[str, Any], token_type: str, expire: datetime) -> str:
        to_encode = data.copy()
        to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc), "token_type": token_type})
        return jwt.encode(to_encode, self._secrets[token_type], algorithm=self.ALGORITHM)

    def create_access_token(self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token.

        Args:
            data: Claims; must include `sub` (user id)
            expires_delta: Overrides the configured lifetime
        """
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES))
        return self._encode(data, ACCESS, expire)

    def create_refresh_token(self, data: Dict[str, Any]) -> str:
        """Create a signed refresh token."""
        expire = datetime.now(timezone.utc) + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        return self._encode(data, REFRESH, expire)

    def create_token_pair(self, user_id: str, email: str, role: str) -> dict[str, str]:
        claims = {"sub": user_id, "email": email, "role": role}
        return {
            "accessToken": self.create_access_token(claims),
            "refreshToken": self.create_refresh_token({"sub": user_id}),
        }

    def decode_token(self, token: str, token_type: str = ACCESS) -> Dict[str, Any]:
        """
        Decode and verify a token of the given type.

        Raises:
            AuthenticationException: Signature, expiry or type mismatch
        """
        try:
            payload = jwt.decode(token, self._secrets[token_type], algorithms=[self.ALGORITHM])
        except ExpiredSignatureError as e:
            raise AuthenticationException("Your token has expired. Please login again.") from e
        except JWTError as e:
            raise AuthenticationException("Invalid authentication token.") from e

        if payload.get("token_type") != token_type or not payload.get("sub"):
            raise AuthenticationException("Invalid authentication token.")
        return payload
