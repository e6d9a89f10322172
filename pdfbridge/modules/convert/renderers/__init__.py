"""PDF renderers."""

from .base import BaseRenderer
from .chrome_cli import ChromeCliRenderer
from .playwright_renderer import PlaywrightRenderer

__all__ = ["BaseRenderer", "ChromeCliRenderer", "PlaywrightRenderer"]
