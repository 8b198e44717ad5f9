"""
FastAPI application factory for the register-side terminal API.

The register UI talks to this API on localhost; the terminal behind it
talks to the central sale server.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from possync.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from possync.api.middleware.error_handler import setup_exception_handlers
from possync.api.routes import health_router, sales_router, sync_router
from possync.application.services import Terminal, get_terminal
from possync.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the terminal with the server process and stop it on shutdown."""
    configure_logging()
    terminal: Terminal = app.state.terminal or get_terminal()

    logger.info(
        "application_starting",
        sale_url=terminal.settings.server.sale_url,
        backend=terminal.settings.queue.backend,
    )
    try:
        await terminal.start()
    except Exception as e:
        logger.error("terminal_start_failed", error=str(e))
        raise

    yield

    try:
        await terminal.stop()
    except Exception as e:
        logger.warning("terminal_stop_failed", error=str(e))
    logger.info("application_stopped")


def create_app(terminal: Terminal | None = None) -> FastAPI:
    """
    Create the terminal API.

    Args:
        terminal: Terminal to serve; the global terminal when omitted
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Offline-resilient sale submission for the register",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )
    app.state.terminal = terminal

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    for router in (health_router, sales_router, sync_router):
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "possync.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
