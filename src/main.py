"""
Main FastAPI application entry point.

``create_app`` builds the application from Settings (route prefixes and
paths are configurable); ``app`` is the instance served by uvicorn:

    uvicorn src.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import Settings, get_settings
from src.core.container import (
    get_auth_engine,
    get_database,
    get_logger,
    get_token_store,
)
from src.presentation.routers import (
    create_auth_router,
    create_token_router,
    system_router,
)
from src.presentation.routers.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Create missing tables when a database is configured
    - Shutdown: Drain background tasks, close database and Redis connections

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    logger = get_logger()
    settings = get_settings()
    database = get_database()

    if database is not None:
        await database.create_all()

    logger.info("Application started", app_name=settings.app_name)

    yield

    await get_auth_engine().wait_for_background_tasks()

    store = get_token_store()
    close = getattr(store, "close", None)
    if close is not None:
        await close()
    if database is not None:
        await database.close()

    logger.info("Application stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings used for metadata and route paths (default:
            get_settings()).

    Returns:
        FastAPI: Configured application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication and token lifecycle service",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Register global exception handlers (400 validation, 500 catch-all)
    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(create_auth_router(settings))
    app.include_router(create_token_router(settings))

    return app


app = create_app()
