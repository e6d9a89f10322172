"""Convert module - HTML/URL to PDF with primary and fallback renderers."""

from .router import router
from .schemas import ConvertRequest
from .service import ConvertService

__all__ = ["router", "ConvertRequest", "ConvertService"]
