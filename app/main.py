"""
ASGI entry point: `uvicorn app.main:app`.

Logging and Sentry are configured here, before the factory builds the app,
so import-time log lines from the domains are formatted too.
"""

import logging

import sentry_sdk

from app.config.settings import get_settings
from app.core.app_factory import create_app

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def init_error_tracking() -> None:
    """Report unhandled errors to Sentry when a DSN is configured."""
    if not settings.SENTRY_DSN:
        logger.info("SENTRY_DSN not set, error tracking disabled")
        return
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        release=f"{settings.PROJECT_NAME}@{settings.VERSION}",
        send_default_pii=False,
        traces_sample_rate=0.1,
    )


init_error_tracking()
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Serving {settings.PROJECT_NAME} {settings.VERSION} ({settings.ENVIRONMENT})")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
