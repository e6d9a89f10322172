"""Health check routes."""

from typing import Any

from fastapi import APIRouter, Request

from pdfbridge import __version__
from pdfbridge.modules.convert.browser import find_browser_executable

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Service liveness plus the browser the renderers would use."""
    settings = request.app.state.settings
    return {
        "status": "ok",
        "version": __version__,
        "browser_executable": find_browser_executable(
            settings.browser_executable, settings.browser_paths
        ),
    }
