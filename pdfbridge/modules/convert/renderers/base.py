"""
Base renderer interface.
"""

from abc import ABC, abstractmethod

from pdfbridge.modules.convert.options import ConversionOptions


class BaseRenderer(ABC):
    """Abstract base class for PDF renderers."""

    name: str = "renderer"

    @abstractmethod
    async def render(self, source: str, options: ConversionOptions) -> bytes:
        """
        Render a source to PDF.

        Args:
            source: URL or raw HTML, as classified in options.source_type
            options: Normalized conversion options

        Returns:
            PDF bytes

        Raises:
            RenderError: any failure, wrapped in the renderer's own subclass
        """
        pass
