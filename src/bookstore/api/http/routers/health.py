"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.bookstore.api.http.deps import get_database_service
from src.bookstore.core.services import DbSessionService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=None)
def health(
    database: DbSessionService = Depends(get_database_service),
) -> dict[str, str] | JSONResponse:
    """Liveness probe: pings the database without running a data operation.

    Returns 200 when the database answers, 503 with the driver error otherwise.
    """
    status = database.ping()
    if not status.healthy:
        return JSONResponse(
            status_code=503,
            content={"message": "unhealthy", "error": status.error},
        )
    return {"message": "healthy"}


@router.get("/database", response_model=None)
def health_database(
    database: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Database-specific health check with connection pool status."""
    status = database.ping()
    content = {
        "status": "healthy" if status.healthy else "unhealthy",
        "type": database.engine.dialect.name,
        "pool": database.get_pool_status(),
    }
    if not status.healthy:
        content["error"] = status.error
        return JSONResponse(status_code=503, content=content)
    return content
