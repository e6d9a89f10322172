"""
Error types for pdfbridge.

Every error carries a machine-readable ``code`` and the HTTP status it maps
to, so routes and the app-level handler can render them consistently.
"""

from typing import Any


class PdfBridgeError(Exception):
    """Base error for all pdfbridge failures."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInputError(PdfBridgeError):
    """The request is missing data or carries malformed values."""

    code = "INVALID_INPUT"
    http_status = 400


class InvalidMarginFormat(InvalidInputError):
    """Margin string did not parse to one or four integers."""

    code = "INVALID_MARGIN_FORMAT"

    def __init__(self, value: str, reason: str | None = None):
        message = (
            "Margins must be in format: top,right,bottom,left "
            "or a single value for all sides"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, details={"margin": value})


class RenderError(PdfBridgeError):
    """A renderer failed to produce a PDF."""

    code = "RENDER_FAILED"

    def __init__(self, renderer: str, message: str):
        super().__init__(message, details={"renderer": renderer})
        self.renderer = renderer


class PrimaryRenderFailure(RenderError):
    """The primary (Playwright) renderer failed."""

    code = "PRIMARY_RENDER_FAILED"


class FallbackRenderFailure(RenderError):
    """The fallback (headless CLI) renderer failed."""

    code = "FALLBACK_RENDER_FAILED"


class AllMethodsFailed(PdfBridgeError):
    """Every renderer in the chain failed."""

    code = "ALL_METHODS_FAILED"

    def __init__(self, errors: list[Exception]):
        super().__init__("All conversion methods failed.")
        # Kept for server-side logging only; not part of to_dict().
        self.errors = errors
