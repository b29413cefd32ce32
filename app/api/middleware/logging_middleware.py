"""
Request logging middleware for FastAPI application.

Logs method, path, status and duration of every request and tags it with
a correlation id echoed back in `X-Correlation-ID`.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.
    """

    # High-frequency, low-value paths
    EXCLUDE_PATHS: tuple[str, ...] = (
        "/health",
        "/favicon.ico",
        "/docs",
        "/openapi.json",
    )

    def __init__(self, app: ASGIApp, slow_request_ms: float = 1000.0) -> None:
        """
        Args:
            app: ASGI application
            slow_request_ms: Requests slower than this are logged as warnings
        """
        super().__init__(app)
        self._slow_request_ms = slow_request_ms

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(exclude) for exclude in self.EXCLUDE_PATHS)

    @staticmethod
    def _client_ip(request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # First hop is the original client
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex[:8]
        request.state.correlation_id = correlation_id

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        start_time = time.perf_counter()
        logger.info(f"[{correlation_id}] --> {request.method} {request.url.path} from {self._client_ip(request)}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{correlation_id}] <-- {request.method} {request.url.path} ERROR in {duration_ms:.2f}ms: {e}")
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400 or duration_ms > self._slow_request_ms:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO
        logger.log(
            log_level,
            f"[{correlation_id}] <-- {request.method} {request.url.path} {response.status_code} in {duration_ms:.2f}ms",
        )

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
        return response
