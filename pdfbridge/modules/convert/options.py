"""
Source classification and conversion option normalization.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

from pdfbridge.shared.errors import InvalidMarginFormat

DEFAULT_FORMAT = "A4"
DEFAULT_MARGIN_MM = 10

# Schemes whose URLs need an authority component to be usable.
_HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_MARGIN_PART_RE = re.compile(r"^(\d+)\s*(?:mm)?$", re.IGNORECASE)


class SourceType(str, Enum):
    URL = "url"
    HTML = "html"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class Margin:
    """Page margin in millimeters, one value per side."""

    top: int
    right: int
    bottom: int
    left: int

    @classmethod
    def uniform(cls, value: int) -> "Margin":
        return cls(top=value, right=value, bottom=value, left=value)

    def as_css(self) -> dict[str, str]:
        """Margins as CSS length strings, keyed by side."""
        return {
            "top": f"{self.top}mm",
            "right": f"{self.right}mm",
            "bottom": f"{self.bottom}mm",
            "left": f"{self.left}mm",
        }


@dataclass(frozen=True)
class ConversionOptions:
    """Fully-populated options handed to a renderer."""

    source_type: SourceType
    margin: Margin = field(default_factory=lambda: Margin.uniform(DEFAULT_MARGIN_MM))
    format: str = DEFAULT_FORMAT
    orientation: Orientation = Orientation.PORTRAIT
    print_background: bool = True

    @property
    def landscape(self) -> bool:
        return self.orientation is Orientation.LANDSCAPE


def classify_source(source: str) -> SourceType:
    """
    Decide whether a source string is a URL or raw HTML.

    A source counts as a URL when it is a well-formed absolute URL: a valid
    scheme, no embedded whitespace, and a host for the web schemes. Anything
    else, including input the URL parser rejects, is treated as HTML.
    """
    candidate = source.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return SourceType.HTML

    try:
        parts = urlsplit(candidate)
    except ValueError:
        return SourceType.HTML

    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return SourceType.HTML

    scheme = parts.scheme.lower()
    if scheme in _HOST_SCHEMES:
        try:
            hostname = parts.hostname
        except ValueError:
            return SourceType.HTML
        return SourceType.URL if hostname else SourceType.HTML

    # file:, data:, about:, mailto: ... only need something after the colon
    remainder = candidate[len(parts.scheme) + 1:]
    return SourceType.URL if remainder else SourceType.HTML


def parse_margin(value: str | int) -> Margin:
    """
    Parse a margin specification into four sides.

    Accepts a single value ("10") applied to every side, or four
    comma-separated values ("10,20,10,20") for top, right, bottom, left.
    Each value is a non-negative integer in millimeters; a trailing "mm"
    is tolerated.

    Raises:
        InvalidMarginFormat: on any other count or a non-integer part.
    """
    raw = str(value)
    numbers: list[int] = []
    for part in raw.split(","):
        match = _MARGIN_PART_RE.match(part.strip())
        if not match:
            raise InvalidMarginFormat(raw, reason=f"'{part.strip()}' is not an integer")
        numbers.append(int(match.group(1)))

    if len(numbers) == 1:
        return Margin.uniform(numbers[0])
    if len(numbers) == 4:
        top, right, bottom, left = numbers
        return Margin(top=top, right=right, bottom=bottom, left=left)
    raise InvalidMarginFormat(raw, reason=f"got {len(numbers)} values")


def _parse_print_background(value: str | bool | None) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    return value.strip().lower() != "false"


def _parse_orientation(value: str | None) -> Orientation:
    if value and value.strip().lower() == Orientation.LANDSCAPE.value:
        return Orientation.LANDSCAPE
    return Orientation.PORTRAIT


def normalize_options(
    source: str,
    *,
    format: str | None = None,
    orientation: str | None = None,
    margin: str | int | None = None,
    print_background: str | bool | None = None,
) -> ConversionOptions:
    """Build ConversionOptions from raw request fields, applying defaults."""
    if margin is None or (isinstance(margin, str) and not margin.strip()):
        parsed_margin = Margin.uniform(DEFAULT_MARGIN_MM)
    else:
        parsed_margin = parse_margin(margin)

    return ConversionOptions(
        source_type=classify_source(source),
        margin=parsed_margin,
        format=(format or "").strip() or DEFAULT_FORMAT,
        orientation=_parse_orientation(orientation),
        print_background=_parse_print_background(print_background),
    )
