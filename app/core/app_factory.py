"""
Application factory for FastAPI.

This module follows SRP by handling only FastAPI application creation and configuration.
Uses modern FastAPI patterns and separates concerns into dedicated modules.
"""

import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.middleware import BodySizeLimitMiddleware, RequestLoggingMiddleware
from app.api.router import api_router
from app.config.settings import Settings, get_settings
from app.core.lifecycle import lifespan

logger = logging.getLogger(__name__)


class AppFactory:
    """
    Factory for creating and configuring FastAPI applications.

    Separates application creation from configuration details.
    Each configuration step is handled by a dedicated method.
    """

    def __init__(self, settings: Settings | None = None, use_lifespan: bool = True) -> None:
        """
        Initialize app factory.

        Args:
            settings: Application settings (uses default if not provided)
            use_lifespan: Attach the startup/shutdown lifespan; tests that
                inject their own container turn it off
        """
        self._settings = settings or get_settings()
        self._use_lifespan = use_lifespan
        self._started_at = time.monotonic()

    def create_app(self) -> FastAPI:
        app = self._create_base_app()

        self._configure_middleware(app)
        self._configure_exception_handlers(app)
        self._configure_routes(app)
        self._configure_health_endpoint(app)

        logger.info(f"Application created: {self._settings.PROJECT_NAME}")
        return app

    def _create_base_app(self) -> FastAPI:
        """Create the base FastAPI application with lifespan."""
        return FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{self._settings.API_V1_STR}/docs" if self._settings.DEBUG else None,
            redoc_url=f"{self._settings.API_V1_STR}/redoc" if self._settings.DEBUG else None,
            lifespan=lifespan if self._use_lifespan else None,
        )

    def _configure_middleware(self, app: FastAPI) -> None:
        """
        Configure application middleware.

        Middleware order matters (last added runs first):
        1. CORS (outermost)
        2. Request logging
        3. Body size limit (innermost before handlers)
        """
        app.add_middleware(BodySizeLimitMiddleware, max_body_size=self._settings.MAX_BODY_SIZE)
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._get_cors_origins(),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Correlation-ID", "Content-Disposition"],
        )

        logger.info("Middleware configured")

    def _configure_exception_handlers(self, app: FastAPI) -> None:
        register_exception_handlers(app)

    def _configure_routes(self, app: FastAPI) -> None:
        app.include_router(api_router, prefix=self._settings.API_V1_STR)
        logger.info("Routes configured")

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        """Add health check endpoint."""
        started_at = self._started_at
        environment = self._settings.ENVIRONMENT

        @app.get("/health", tags=["health"])
        async def health_check() -> dict:
            """Liveness probe: process uptime in seconds and environment name."""
            return {
                "success": True,
                "message": "Server is running",
                "uptime": round(time.monotonic() - started_at, 3),
                "environment": environment,
            }

    def _get_cors_origins(self) -> list[str]:
        """Storefront URL plus any extra CORS_ORIGINS; localhost ports in development."""
        origins = [self._settings.FRONTEND_URL, *self._settings.CORS_ORIGINS]
        if self._settings.is_development:
            origins += ["http://localhost:3000", "http://localhost:3001", "http://127.0.0.1:3000"]
        return list(dict.fromkeys(origins))


def create_app(settings: Settings | None = None, use_lifespan: bool = True) -> FastAPI:
    """
    Create FastAPI application using the factory.

    This is the main entry point for application creation.
    """
    factory = AppFactory(settings, use_lifespan=use_lifespan)
    return factory.create_app()
