"""Primary renderer - HTML/URL to PDF using Playwright."""

from pathlib import Path

from playwright.async_api import async_playwright

from pdfbridge.config.settings import DEFAULT_BROWSER_PATHS
from pdfbridge.modules.convert.browser import find_browser_executable
from pdfbridge.modules.convert.options import ConversionOptions, SourceType
from pdfbridge.shared.errors import PrimaryRenderFailure
from pdfbridge.shared.logging import get_logger

from .base import BaseRenderer

logger = get_logger(__name__)


# Flags needed to run Chromium inside restricted containers.
CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--single-process",
    "--disable-gpu",
]


class PlaywrightRenderer(BaseRenderer):
    """Render PDFs by driving headless Chromium through Playwright."""

    name = "playwright"

    def __init__(
        self,
        browser_executable: str | Path | None = None,
        browser_paths: list[str] | None = None,
        headless: bool = True,
    ):
        self.browser_executable = browser_executable
        self.browser_paths = browser_paths or list(DEFAULT_BROWSER_PATHS)
        self.headless = headless

    def _launch_options(self) -> dict:
        executable = find_browser_executable(self.browser_executable, self.browser_paths)

        launch_options: dict = {"headless": self.headless, "args": list(CHROMIUM_ARGS)}
        # Without a path Playwright uses its bundled Chromium.
        if executable:
            launch_options["executable_path"] = executable
        return launch_options

    async def render(self, source: str, options: ConversionOptions) -> bytes:
        logger.info("Converting with Playwright...")

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(**self._launch_options())

                try:
                    page = await browser.new_page()

                    if options.source_type is SourceType.URL:
                        await page.goto(source, wait_until="networkidle")
                    else:
                        await page.set_content(source, wait_until="networkidle")

                    pdf_bytes = await page.pdf(
                        format=options.format,
                        landscape=options.landscape,
                        margin=options.margin.as_css(),
                        print_background=options.print_background,
                    )

                    logger.info(f"Playwright generated PDF: {len(pdf_bytes)} bytes")
                    return pdf_bytes

                finally:
                    await browser.close()

        except Exception as e:
            logger.error(f"Playwright conversion error: {e}")
            raise PrimaryRenderFailure(self.name, str(e)) from e
