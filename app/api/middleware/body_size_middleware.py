"""
Request body size limit.

Rejects oversized bodies with 413 before any route parses them.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from app.core.domain.exceptions import PayloadTooLargeException

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Answer 413 when a request body exceeds `max_body_size` bytes."""

    METHODS_WITH_BODY: tuple[str, ...] = ("POST", "PUT", "PATCH", "DELETE")

    def __init__(self, app: ASGIApp, max_body_size: int) -> None:
        super().__init__(app)
        self.max_body_size = max_body_size

    def _too_large(self, request: Request, size: int) -> Response:
        logger.warning(f"Rejected {request.method} {request.url.path}: body of {size} bytes")
        exc = PayloadTooLargeException(self.max_body_size)
        return JSONResponse(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, content=exc.to_dict())

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        if request.method not in self.METHODS_WITH_BODY:
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"success": False, "message": "Invalid Content-Length header"},
                )
            if declared > self.max_body_size:
                return self._too_large(request, declared)
        elif request.headers.get("transfer-encoding", "").lower() == "chunked":
            body = await request.body()
            if len(body) > self.max_body_size:
                return self._too_large(request, len(body))

        return await call_next(request)
