"""Password hashing and JWT issuing."""

from .token_service import ACCESS, REFRESH, TokenService

__all__ = ["ACCESS", "REFRESH", "TokenService"]
