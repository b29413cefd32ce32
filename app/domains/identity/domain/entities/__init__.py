from .user import User, UserAddress

__all__ = ["User", "UserAddress"]
