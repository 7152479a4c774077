# bitacora/app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from bitacora.app.api.v1.router import api_router
from bitacora.app.core.config import Settings, get_settings
from bitacora.app.core.errors import register_exception_handlers
from bitacora.app.core.logging_config import setup_logging
from bitacora.app.core.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, build_limiter
from bitacora.app.db.session import Database
from bitacora.app.security.jwt import TokenService
from bitacora.app.security.upload import UploadPolicies

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL, structured=settings.LOG_JSON or settings.is_production)

    database: Database = app.state.database
    if not database.is_connected:
        await database.connect()
    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    await database.disconnect()
    logger.info("%s stopped", settings.PROJECT_NAME)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the API.

    Everything stateful lives on ``app.state``: settings, the database
    handle, the token service, the upload policies and the rate limiter.
    Pass an already connected ``database`` to skip connecting at startup.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database(settings)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.upload_policies = UploadPolicies(settings)
    app.state.limiter = build_limiter(settings)

    register_exception_handlers(app, settings)

    # Last added runs first: CORS → gzip → security headers → rate limit
    app.add_middleware(RateLimitMiddleware, limiter=app.state.limiter, limit=settings.RATE_LIMIT)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        return {"success": True, "message": f"Welcome to the {settings.PROJECT_NAME} API"}

    return app
