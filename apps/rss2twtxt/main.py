"""FastAPI application entry point.

rss2twtxt web service with endpoints for:
- Feed registration (index page form)
- Feed list (plain text or HTML, negotiated)
- twtxt feed files, media images, and avatars with conditional caching
"""

import logging
import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from apps.rss2twtxt import __version__
from apps.rss2twtxt.config import ServerConfig, validate_environment
from apps.rss2twtxt.core.context import AppContext
from apps.rss2twtxt.core.errors import (
    INTERNAL_ERROR_MESSAGE,
    ErrorCategory,
    MethodNotSupportedError,
    ServiceError,
)
from apps.rss2twtxt.core.responses import bytes_response
from apps.rss2twtxt.observability import clear_context, configure_logging, get_logger, set_context
from apps.rss2twtxt.routers import feeds, index, media

logger = logging.getLogger(__name__)
access = get_logger("apps.rss2twtxt.access")


def _error_response(request: Request, status_code: int, message: str, headers: dict | None = None) -> Response:
    """Minimal plain-text error; HEAD gets the same headers without the body."""
    return bytes_response(request, f"{message}\n".encode("utf-8"), "text/plain", status_code, headers)


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Loads the feed registry and builds the production context on startup.
    Registry writes are synchronous per mutation, so shutdown has nothing
    to flush.
    """
    config = ServerConfig.from_env()

    logger.info("=" * 60)
    logger.info(f"rss2twtxt {__version__} - Web Server Starting")
    logger.info("=" * 60)

    for warning in validate_environment(config):
        logger.warning(warning)

    logger.info(f"Environment: {config.environment}")
    logger.info(f"Data directory: {config.data_dir}")
    logger.info(f"Registry: {config.registry_path}")

    app.state.context = AppContext.from_config(config)
    logger.info(f"Loaded {len(app.state.context.registry)} feeds")

    yield

    logger.info("Web server shutting down...")


# =============================================================================
# FastAPI Application
# =============================================================================


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        context: Optional AppContext for testing. If None, the lifespan
                 builds the production context from the environment.

    Returns:
        Configured FastAPI application
    """
    if context is not None:
        app = FastAPI(
            title="rss2twtxt",
            description="RSS/Atom to twtxt feed aggregator service",
            version=__version__,
        )
        app.state.context = context
    else:
        app = FastAPI(
            title="rss2twtxt",
            description="RSS/Atom to twtxt feed aggregator service",
            version=__version__,
            lifespan=lifespan,
        )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        set_context(request_id=request_id)
        started = time.monotonic()
        try:
            response = await call_next(request)
        finally:
            clear_context()
        access.request_completed(
            request.method,
            request.url.path,
            response.status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
            request_id=request_id,
        )
        return response

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> Response:
        """Convert domain errors to exactly one status and a minimal message."""
        if exc.category == ErrorCategory.IO:
            logger.error(
                f"I/O failure: {exc.message}",
                exc_info=exc,
                extra={"path": request.url.path, "method": request.method},
            )
        return _error_response(request, exc.status_code, exc.public_message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
        """Render routing errors (unknown path, unsupported method) as plain text."""
        if exc.status_code == 405:
            error = MethodNotSupportedError(request.method)
            return _error_response(request, error.status_code, error.public_message, exc.headers)
        return _error_response(request, exc.status_code, str(exc.detail), exc.headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> Response:
        """Last-resort handler; never leaks internal detail."""
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return _error_response(request, 500, INTERNAL_ERROR_MESSAGE)

    # Media first: /media/{name} must win over /{name}/twtxt.txt
    app.include_router(media.router)
    app.include_router(index.router)
    app.include_router(feeds.router)

    return app


# =============================================================================
# Main Entry Point
# =============================================================================


def run() -> None:
    """Run the server (entry point for CLI)."""
    config = ServerConfig.from_env()
    configure_logging(config.log_level, config.log_format)
    uvicorn.run(
        create_app(),
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    run()
