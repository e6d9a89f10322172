"""
Logging setup and request-scoped context.

Request context lives in a ContextVar so concurrent requests on the same
event loop never see each other's IDs.
"""

import logging
import sys
from contextvars import ContextVar

from pdfbridge.shared.types import RequestContext

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_request_context: ContextVar[RequestContext | None] = ContextVar(
    "request_context", default=None
)


class RequestContextFilter(logging.Filter):
    """Stamp the current request ID onto every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _request_context.get()
        record.request_id = ctx.request_id if ctx else "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_pdfbridge", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RequestContextFilter())
    handler._pdfbridge = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)


def set_request_context(ctx: RequestContext) -> None:
    _request_context.set(ctx)


def get_request_context() -> RequestContext | None:
    return _request_context.get()


def clear_request_context() -> None:
    _request_context.set(None)
