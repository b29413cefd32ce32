"""
Middleware package for FastAPI application.

Request logging and body size limiting.
"""

from app.api.middleware.body_size_middleware import BodySizeLimitMiddleware
from app.api.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "RequestLoggingMiddleware",
]
