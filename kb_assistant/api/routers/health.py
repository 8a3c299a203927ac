"""
Health check API endpoints.

Routes: GET /health, HEAD /health

Dependencies: kb_assistant.configs
System role: Health check HTTP API
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from kb_assistant.api.deps import get_settings_dependency
from kb_assistant.configs import Settings


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    version: str
    uptime: int
    environment: str


router = APIRouter(prefix="/health", tags=["health"])


def _uptime_seconds(request: Request) -> int:
    started_at = getattr(request.app.state, "started_at", None) or time.monotonic()
    return int(time.monotonic() - started_at)


@router.get("", response_model=HealthResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> HealthResponse:
    """Basic health check."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        uptime=_uptime_seconds(request),
        environment=settings.environment,
    )


@router.head("")
async def health_check_head() -> Response:
    """Liveness check without a body."""
    return Response(status_code=200)
