"""
Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notecards import __version__
from notecards.core.access import AccessPolicy, PublicModePolicy
from notecards.core.config import Settings, settings as default_settings
from notecards.core.env_validation import validate_or_exit
from notecards.core.exceptions import (
    ContentValidationError,
    NotecardsError,
    format_validation_errors,
)
from notecards.core.logging import get_logger, setup_logging
from notecards.db.session import Database, create_database

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan events.
    Handles startup and shutdown tasks.
    """
    config: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "starting_application",
        app_name=config.APP_NAME,
        environment=config.APP_ENV,
        public_mode=not app.state.access_policy.can_mutate(),
        version=__version__,
    )

    validate_or_exit(config)

    # A cold or unreachable database is not fatal here; requests report it
    if await database.warm_up() and config.DB_AUTO_CREATE:
        await database.create_all()

    yield

    logger.info("shutting_down_application")
    await database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": {"code", "message", "details"}}``."""

    @app.exception_handler(NotecardsError)
    async def notecards_error_handler(request: Request, exc: NotecardsError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = format_validation_errors(list(exc.errors()))
        logger.warning(
            "request_validation_failed",
            path=request.url.path,
            method=request.method,
            errors=details,
        )
        error = ContentValidationError(details=details)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.
        """
        logger.error(
            "unhandled_exception",
            error=str(exc),
            path=request.url.path,
            method=request.method,
            exc_info=True,
        )
        return JSONResponse(status_code=500, content=NotecardsError().to_dict())


def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
    policy: Optional[AccessPolicy] = None,
) -> FastAPI:
    """
    Build the application with its collaborators.

    The database handle and access policy are created once here and shared
    by every request through ``app.state``.
    """
    config = config or default_settings
    database = database or create_database(config)
    policy = policy or PublicModePolicy(config.PUBLIC_MODE)

    app = FastAPI(
        title=config.APP_NAME,
        description="notecards - saved content dashboard API",
        version=__version__,
        docs_url="/docs" if config.DEBUG else None,
        redoc_url="/redoc" if config.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.database = database
    app.state.access_policy = policy

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health_check(request: Request) -> JSONResponse:
        """
        Health check endpoint for monitoring.
        Includes database connectivity check.
        """
        db_healthy = await request.app.state.database.check_health()

        return JSONResponse(
            status_code=200 if db_healthy else 503,
            content={
                "status": "healthy" if db_healthy else "unhealthy",
                "app_name": config.APP_NAME,
                "environment": config.APP_ENV,
                "version": __version__,
                "database": "connected" if db_healthy else "disconnected",
            }
        )

    @app.get("/", tags=["root"])
    async def root() -> JSONResponse:
        return JSONResponse(
            content={
                "message": f"Welcome to {config.APP_NAME} API",
                "version": __version__,
                "docs": "/docs" if config.DEBUG else "Documentation disabled in production",
            }
        )

    from notecards.api import api_router
    app.include_router(api_router, prefix=config.API_V1_PREFIX)

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "notecards.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
        log_level=default_settings.LOG_LEVEL.lower(),
    )
