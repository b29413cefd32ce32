"""
Exception handlers for FastAPI application.

Every error leaves the API in the same envelope: `{"success": false, "message": ...}`.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.domain.exceptions import DomainException

logger = logging.getLogger(__name__)


def _error_body(message: str, **extra) -> dict:
    return {"success": False, "message": message, **extra}


def _error_sources(errors) -> list[dict[str, str]]:
    sources = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        sources.append({"path": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return sources


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate a DomainException into its HTTP status and the error envelope."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException (including unknown routes) with the envelope."""
    if not isinstance(exc, StarletteHTTPException):
        return await global_exception_handler(request, exc)

    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=_error_body(message), headers=exc.headers)


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Request validation errors answer 400 with one entry per offending field."""
    if not isinstance(exc, (RequestValidationError, ValidationError)):
        return await global_exception_handler(request, exc)

    sources = _error_sources(exc.errors())
    logger.warning(f"Validation error on {request.url.path}: {sources}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation error", errorSources=sources),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
