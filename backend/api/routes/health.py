"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings
from shared.database import is_supabase_configured

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    identity_provider: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether Supabase (database and auth) is configured. Without it
    the app still serves requests in signed-out, read-only mode.
    """
    settings = get_settings()
    database = "configured" if is_supabase_configured() else "unconfigured"
    identity_provider = (
        "configured"
        if settings.supabase_url and settings.supabase_jwt_secret
        else "unavailable"
    )
    status = "ready" if database == "configured" and identity_provider == "configured" else "degraded"
    return ReadinessResponse(
        status=status,
        database=database,
        identity_provider=identity_provider,
    )
