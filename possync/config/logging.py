"""
Structured logging with structlog.

Every event carries the terminal ID so logs from several registers can be
merged. Credentials never reach the output.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from possync.config.settings import Settings, get_settings

REDACTED = "***"
_SECRET_KEYS = frozenset({"api_token", "authorization", "token", "password"})


def add_terminal_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    settings = get_settings()
    event_dict.setdefault("terminal", settings.terminal_id)
    event_dict["version"] = settings.app_version
    return event_dict


def redact_secrets(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask values of credential-like keys."""
    for key in event_dict.keys() & _SECRET_KEYS:
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def _use_json(settings: Settings) -> bool:
    if settings.log_format == "auto":
        return settings.environment != "development"
    return settings.log_format == "json"


def configure_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib logging on stdout."""
    settings = settings or get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_terminal_context,
        redact_secrets,
    ]
    if _use_json(settings):
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=settings.log_level)

    # The connectivity probe polls every few seconds
    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
