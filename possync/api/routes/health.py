"""
Health check endpoint.
"""

import time

from fastapi import APIRouter, Depends

from possync.api.dependencies import get_app_terminal
from possync.application.dto.responses import HealthResponse
from possync.application.services import Terminal

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    terminal: Terminal = Depends(get_app_terminal),
) -> HealthResponse:
    """
    Basic health check.

    Reports uptime and whether the sale server is currently reachable.
    A terminal that is offline is still healthy: sales are queued.
    """
    settings = terminal.settings
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        terminal_id=settings.terminal_id,
        online=terminal.connectivity.is_online(),
    )
