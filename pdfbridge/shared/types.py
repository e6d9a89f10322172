"""Shared type definitions."""

from dataclasses import dataclass


@dataclass
class RequestContext:
    """Per-request context attached by middleware."""

    request_id: str
