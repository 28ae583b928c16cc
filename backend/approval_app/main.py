"""Content Approval Backend - FastAPI Entry Point."""
import sys

# asyncpg is incompatible with Windows ProactorEventLoop (default on Windows).
if sys.platform == "win32":
    import asyncio
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

import structlog
from fastapi import FastAPI

from approval_app import __version__
from approval_app.config import settings
from approval_app.database import engine
from approval_app.middleware.cors import setup_cors
from approval_app.middleware.error_handler import setup_error_handlers
from approval_app.middleware.logging_middleware import LoggingMiddleware, configure_logging
from approval_app.utils.redis_client import close_redis
from approval_app.api.v1 import auth as auth_router
from approval_app.api.v1 import profiles as profiles_router
from approval_app.api.v1 import contents as contents_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.LOG_LEVEL)
    logger.info("startup", env=settings.APP_ENV, timezone=settings.TIMEZONE)
    if settings.SENTRY_DSN:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration

        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            integrations=[FastApiIntegration()],
            traces_sample_rate=0.1 if settings.APP_ENV == "production" else 1.0,
            environment=settings.APP_ENV,
        )
    if not settings.RECAPTCHA_ENABLED:
        logger.warning("recaptcha_disabled")

    yield

    await close_redis()
    await engine.dispose()
    logger.info("shutdown")


def create_app() -> FastAPI:
    application = FastAPI(
        title="Content Approval API",
        description="Agency/client social content review and approval",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Middleware (last added = first executed)
    setup_cors(application)
    setup_error_handlers(application)
    application.add_middleware(LoggingMiddleware)

    application.include_router(auth_router.router, prefix="/api/v1/auth", tags=["Auth"])
    application.include_router(profiles_router.router, prefix="/api/v1/profiles", tags=["Profiles"])
    application.include_router(contents_router.router, prefix="/api/v1/contents", tags=["Contents"])

    @application.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
