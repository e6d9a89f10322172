"""
Application factory - builds FastAPI app with all middleware and routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdfbridge import __version__
from pdfbridge.config import Settings, get_settings
from pdfbridge.modules.convert.browser import find_browser_executable
from pdfbridge.modules.convert.router import router as convert_router
from pdfbridge.modules.health.router import router as health_router
from pdfbridge.shared.errors import PdfBridgeError
from pdfbridge.shared.ids import generate_request_id
from pdfbridge.shared.logging import (
    clear_request_context,
    get_logger,
    get_request_context,
    set_request_context,
    setup_logging,
)
from pdfbridge.shared.types import RequestContext

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings: Settings = app.state.settings

    logger.info("Starting pdfbridge...")
    browser = find_browser_executable(settings.browser_executable, settings.browser_paths)
    if browser is None:
        logger.warning("No system browser found; Playwright will use its bundled Chromium")

    logger.info(f"pdfbridge started (port {settings.port})")

    yield

    logger.info("pdfbridge stopped")


def build_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings.log_level)

    app = FastAPI(
        title="pdfbridge",
        description="HTML and URL to PDF conversion service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )

    # Request context middleware
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        """Attach request context for logging and tracing."""
        ctx = RequestContext(
            request_id=request.headers.get("X-Request-ID", generate_request_id()),
        )
        set_request_context(ctx)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = ctx.request_id
            return response
        finally:
            clear_request_context()

    # Exception handler for PdfBridgeError
    @app.exception_handler(PdfBridgeError)
    async def pdfbridge_error_handler(request: Request, exc: PdfBridgeError) -> JSONResponse:
        """Handle PdfBridgeError with consistent JSON response."""
        ctx = get_request_context()
        logger.error(f"Unhandled {exc.code}: {exc.message}")

        return JSONResponse(
            status_code=exc.http_status,
            content={
                "error": exc.to_dict(),
                "request_id": ctx.request_id if ctx else None,
            },
        )

    # Register routers
    app.include_router(health_router, tags=["health"])
    app.include_router(convert_router)

    # Root endpoint
    @app.get("/")
    async def root() -> dict[str, str]:
        return {"service": "pdfbridge", "version": __version__}

    return app
