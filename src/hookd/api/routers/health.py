"""Health router - ``GET /health`` liveness probe."""

from __future__ import annotations

from fastapi import APIRouter

from hookd import __version__
from hookd.api.deps import Config, Launcher
from hookd.api.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(config: Config, launcher: Launcher) -> HealthResponse:
    """Always healthy while the process serves requests."""
    return HealthResponse(
        version=__version__,
        hooks=len(config.hooks),
        running=len(launcher.running),
    )
