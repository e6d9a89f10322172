"""
Fallback renderer - the browser's own headless ``--print-to-pdf`` mode.

Uses the same Chrome/Chromium binary as the primary renderer but none of
Playwright: the browser is run as one-shot subprocesses. The command line
has no flags for format or margins, so page setup is expressed through an
injected ``@page`` rule. URL sources are first loaded with ``--dump-dom``;
the serialized DOM gets a ``<base href>`` back to the URL plus the page
rule, and is printed like any other HTML source.
"""

import asyncio
import html
import re
import tempfile
from pathlib import Path

from pdfbridge.config.settings import DEFAULT_BROWSER_PATHS
from pdfbridge.modules.convert.browser import find_browser_executable
from pdfbridge.modules.convert.options import ConversionOptions, SourceType
from pdfbridge.shared.errors import FallbackRenderFailure
from pdfbridge.shared.logging import get_logger

from .base import BaseRenderer

logger = get_logger(__name__)


# Portrait width x height in millimeters, keyed by lowercase format name.
PAGE_SIZES_MM = {
    "letter": (215.9, 279.4),
    "legal": (215.9, 355.6),
    "tabloid": (279.4, 431.8),
    "ledger": (431.8, 279.4),
    "a0": (841, 1189),
    "a1": (594, 841),
    "a2": (420, 594),
    "a3": (297, 420),
    "a4": (210, 297),
    "a5": (148, 210),
    "a6": (105, 148),
}

CLI_ARGS = [
    "--headless=new",
    "--no-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--no-first-run",
    "--no-pdf-header-footer",
]

_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HTML_OPEN_RE = re.compile(r"<html\b[^>]*>", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"^\s*<!DOCTYPE\b[^>]*>", re.IGNORECASE)


def build_page_css(options: ConversionOptions) -> str:
    """CSS carrying the page setup the command line can't express."""
    m = options.margin
    rules = [f"margin: {m.top}mm {m.right}mm {m.bottom}mm {m.left}mm;"]

    size = PAGE_SIZES_MM.get(options.format.lower())
    if size:
        width, height = size
        if options.landscape:
            width, height = height, width
        rules.insert(0, f"size: {width}mm {height}mm;")
    else:
        logger.warning(f"Unknown page format '{options.format}', using browser default size")

    css = "@page { " + " ".join(rules) + " }"
    if options.print_background:
        css += " html { -webkit-print-color-adjust: exact; print-color-adjust: exact; }"
    return css


def insert_into_head(document: str, fragment: str) -> str:
    """
    Insert markup where the parser will put it in <head>.

    Goes right after the <head> tag, else after <html>, else after the
    doctype. Only a bare fragment gets it in front, so a doctype always
    stays first and the page keeps standards mode.
    """
    for pattern in (_HEAD_OPEN_RE, _HTML_OPEN_RE, _DOCTYPE_RE):
        match = pattern.search(document)
        if match:
            return document[:match.end()] + fragment + document[match.end():]
    return fragment + document


def inject_page_css(document: str, css: str) -> str:
    return insert_into_head(document, f"<style>{css}</style>")


def inject_base_href(document: str, url: str) -> str:
    """Point relative links in a dumped DOM back at the original URL."""
    return insert_into_head(document, f'<base href="{html.escape(url, quote=True)}">')


class ChromeCliRenderer(BaseRenderer):
    """Render PDFs with headless browser subprocesses."""

    name = "chrome-cli"

    def __init__(
        self,
        browser_executable: str | Path | None = None,
        browser_paths: list[str] | None = None,
        timeout_seconds: float = 60.0,
    ):
        self.browser_executable = browser_executable
        self.browser_paths = browser_paths or list(DEFAULT_BROWSER_PATHS)
        self.timeout_seconds = timeout_seconds

    async def render(self, source: str, options: ConversionOptions) -> bytes:
        logger.info("Converting with headless browser CLI...")

        executable = find_browser_executable(self.browser_executable, self.browser_paths)
        if not executable:
            raise FallbackRenderFailure(self.name, "No Chrome/Chromium executable found")

        try:
            with tempfile.TemporaryDirectory(prefix="pdfbridge-") as tmp:
                workdir = Path(tmp)
                base_cmd = [executable, *CLI_ARGS, f"--user-data-dir={workdir / 'profile'}"]

                if options.source_type is SourceType.URL:
                    dom = await self._run([*base_cmd, "--dump-dom", source])
                    if not dom.strip():
                        raise FallbackRenderFailure(self.name, f"Browser returned no DOM for {source}")
                    document = inject_base_href(dom.decode("utf-8", errors="replace"), source)
                else:
                    document = source

                input_path = workdir / "input.html"
                input_path.write_text(
                    inject_page_css(document, build_page_css(options)),
                    encoding="utf-8",
                )

                output_path = workdir / "output.pdf"
                await self._run([*base_cmd, f"--print-to-pdf={output_path}", input_path.as_uri()])

                if not output_path.exists() or output_path.stat().st_size == 0:
                    raise FallbackRenderFailure(self.name, "Browser produced no PDF output")

                pdf_bytes = output_path.read_bytes()
                logger.info(f"Headless CLI generated PDF: {len(pdf_bytes)} bytes")
                return pdf_bytes

        except FallbackRenderFailure as e:
            logger.error(f"Headless CLI conversion error: {e}")
            raise
        except Exception as e:
            logger.error(f"Headless CLI conversion error: {e}")
            raise FallbackRenderFailure(self.name, str(e)) from e

    async def _run(self, cmd: list[str]) -> bytes:
        """Run the browser to completion and return its stdout; kill it on timeout or error."""
        logger.debug(f"Running: {' '.join(cmd)}")
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise FallbackRenderFailure(
                self.name, f"Browser timed out after {self.timeout_seconds}s"
            ) from None
        finally:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()[-500:]
            raise FallbackRenderFailure(
                self.name, f"Browser exited with code {proc.returncode}: {detail}"
            )
        return stdout
