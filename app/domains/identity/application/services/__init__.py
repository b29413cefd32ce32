from .auth_service import AuthResult, AuthService, RegisterRequest
from .user_service import UserService

__all__ = ["AuthService", "AuthResult", "RegisterRequest", "UserService"]
