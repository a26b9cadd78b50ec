"""Health check endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from quickhealth.config import settings
from quickhealth.dependencies import DatabaseSession, SessionStoreDep

router = APIRouter()


class DetailedHealthResponse(BaseModel):
    """Detailed health check response model."""

    status: str
    version: str
    environment: str
    database: str
    sessions: str


@router.get(
    "/health",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check() -> str:
    """Liveness probe; always the literal ``OK``."""
    return "OK"


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check(
    db: DatabaseSession,
    store: SessionStoreDep,
) -> DetailedHealthResponse:
    """
    Detailed health check with database and session store status.

    Returns:
        Detailed health status including dependencies
    """
    try:
        await db.execute(text("SELECT 1"))
        db_healthy = True
    except SQLAlchemyError:
        db_healthy = False

    sessions_healthy = store.ping()

    return DetailedHealthResponse(
        status="healthy" if db_healthy and sessions_healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
        sessions="healthy" if sessions_healthy else "unhealthy",
    )
