"""
Identity API Layer
"""

from app.domains.identity.api.routes import auth_router, users_router

__all__ = ["auth_router", "users_router"]
