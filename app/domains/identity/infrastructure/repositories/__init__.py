from .user_repository import SQLAlchemyUserRepository

__all__ = ["SQLAlchemyUserRepository"]
