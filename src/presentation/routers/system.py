"""System router for non-versioned application endpoints.

Lightweight and side-effect free, for health checks and basic diagnostics.
"""

from fastapi import APIRouter, Depends, Response, status

from src.core.config import get_settings
from src.core.container import get_database
from src.infrastructure.persistence.database import Database


system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check."""
    settings = get_settings()
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health(
    response: Response,
    database: Database | None = Depends(get_database),
) -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Reports 503 when a configured database does not answer.
    """
    if database is not None and not await database.check_connection():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unhealthy", "database": "unavailable"}
    return {"status": "healthy"}
