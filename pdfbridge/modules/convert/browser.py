"""Locate an installed Chrome/Chromium executable."""

import shutil
from collections.abc import Iterable
from pathlib import Path

from pdfbridge.config.settings import DEFAULT_BROWSER_PATHS
from pdfbridge.shared.logging import get_logger

logger = get_logger(__name__)

BROWSER_COMMANDS = [
    "google-chrome",
    "google-chrome-stable",
    "chromium",
    "chromium-browser",
]


def find_browser_executable(
    explicit: str | Path | None = None,
    candidates: Iterable[str] = DEFAULT_BROWSER_PATHS,
    commands: Iterable[str] = BROWSER_COMMANDS,
) -> str | None:
    """
    Find a browser binary.

    Checks the explicit path first, then each candidate path, then falls
    back to a PATH lookup of the usual command names.

    Returns:
        Path to the executable, or None if nothing was found.
    """
    if explicit:
        if Path(explicit).is_file():
            logger.debug(f"Using configured browser: {explicit}")
            return str(explicit)
        logger.warning(f"Configured browser not found: {explicit}")

    for path in candidates:
        if Path(path).is_file():
            logger.debug(f"Found browser at: {path}")
            return path

    for command in commands:
        resolved = shutil.which(command)
        if resolved and Path(resolved).is_file():
            logger.debug(f"Found browser on PATH: {resolved}")
            return resolved

    logger.warning("Could not find a Chrome/Chromium executable")
    return None
