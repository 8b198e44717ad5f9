"""
Request logging middleware.

Binds a request ID into the structlog context so every event logged while
handling the request (sale submission, sync passes) can be correlated.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from possync.config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by registers and probes; only logged at debug level
QUIET_PATHS = frozenset({"/api/health", "/api/sync/status"})


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        path = request.url.path
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    method=request.method,
                    path=path,
                    error=str(e),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
                raise

            duration_ms = (time.perf_counter() - started) * 1000
            log = logger.debug if path in QUIET_PATHS else logger.info
            log(
                "request_completed",
                method=request.method,
                path=path,
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
