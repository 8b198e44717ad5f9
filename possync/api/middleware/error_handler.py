"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- details: structured context
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from possync.application.dto.responses import ErrorResponse
from possync.config import get_logger
from possync.core.exceptions import (
    ConfigurationError,
    PosSyncError,
    StorageError,
    SubmissionError,
    SyncError,
    SyncUnavailableError,
    TicketNotFoundError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    TicketNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    SyncUnavailableError: status.HTTP_409_CONFLICT,
    SyncError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    SubmissionError: status.HTTP_502_BAD_GATEWAY,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "TICKET_NOT_FOUND": "Check the ticket ID and try GET /api/sales/tickets to list queued tickets.",
    "SYNC_UNAVAILABLE": "Check GET /api/sync/status; sync needs connectivity, an idle queue and pending tickets.",
    "STORAGE_READ_ERROR": "The local queue could not be read. Check the data directory.",
    "STORAGE_WRITE_ERROR": "The local queue could not be written. Check disk space and permissions.",
    "STORAGE_CORRUPT": "The local queue data was garbled and has been set aside. Check the data directory.",
    "DUPLICATE_TICKET": "A ticket with this ID is already queued.",
    "DATABASE_ERROR": "A database operation failed. Check terminal logs.",
    "NETWORK_FAILURE": "The sale server is unreachable. Sales are queued until it comes back.",
    "SERVER_REJECTION": "The sale server refused the request. Check the ticket error and retry.",
    "INVALID_SERVER_RESPONSE": "The sale server answered without an invoice. Check the server version.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the terminal state. Retry later.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check terminal logs.",
    502: "The sale server failed. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)

    if isinstance(exc, PosSyncError):
        error_code = exc.code
        message = exc.message
        details = exc.details
    else:
        error_code = exc.__class__.__name__
        message = str(exc)
        details = {}

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_code=error_code,
        error=message,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            details=details,
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches anything the exception handlers did not.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(PosSyncError)
    async def terminal_exception_handler(
        request: Request,
        exc: PosSyncError,
    ) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report each invalid field, e.g. ``body.items.0.quantity``."""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.info("request_validation_failed", path=request.url.path, errors=len(errors))

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"errors": errors},
                hint=HINT_MAP["VALIDATION_ERROR"],
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
