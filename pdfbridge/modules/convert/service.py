"""Convert service - primary/fallback PDF conversion."""

from pdfbridge.config.settings import Settings
from pdfbridge.shared.errors import AllMethodsFailed, RenderError
from pdfbridge.shared.logging import get_logger

from .options import ConversionOptions, normalize_options
from .renderers import BaseRenderer, ChromeCliRenderer, PlaywrightRenderer

logger = get_logger(__name__)


class ConvertService:
    """Converts a source to PDF, falling back to a second renderer on failure."""

    def __init__(self, primary: BaseRenderer, fallback: BaseRenderer):
        self.primary = primary
        self.fallback = fallback

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConvertService":
        return cls(
            primary=PlaywrightRenderer(
                browser_executable=settings.browser_executable,
                browser_paths=settings.browser_paths,
                headless=settings.headless,
            ),
            fallback=ChromeCliRenderer(
                browser_executable=settings.browser_executable,
                browser_paths=settings.browser_paths,
                timeout_seconds=settings.fallback_timeout_seconds,
            ),
        )

    async def convert(
        self,
        source: str,
        format: str | None = None,
        orientation: str | None = None,
        margin: str | int | None = None,
        print_background: str | bool | None = None,
    ) -> bytes:
        """
        Convert HTML or a URL to PDF bytes.

        Raises:
            InvalidInputError: options could not be normalized (no renderer runs)
            AllMethodsFailed: both renderers failed
        """
        options = normalize_options(
            source,
            format=format,
            orientation=orientation,
            margin=margin,
            print_background=print_background,
        )
        logger.info(
            f"Converting {options.source_type.value} source "
            f"(format={options.format}, orientation={options.orientation.value})"
        )
        return await self.render(source, options)

    async def render(self, source: str, options: ConversionOptions) -> bytes:
        """Run the primary renderer, then the fallback if it fails."""
        try:
            return await self._render_with(self.primary, source, options)
        except Exception as primary_error:
            logger.warning(
                f"Primary method ({self.primary.name}) failed: {primary_error}. "
                "Trying alternative..."
            )
            try:
                return await self._render_with(self.fallback, source, options)
            except Exception as fallback_error:
                logger.error(
                    f"Alternative method ({self.fallback.name}) failed: {fallback_error}. "
                    "Conversion aborted."
                )
                raise AllMethodsFailed([primary_error, fallback_error]) from fallback_error

    @staticmethod
    async def _render_with(
        renderer: BaseRenderer, source: str, options: ConversionOptions
    ) -> bytes:
        pdf_bytes = await renderer.render(source, options)
        if not pdf_bytes:
            raise RenderError(renderer.name, "Renderer returned an empty PDF")
        return pdf_bytes
