"""
Shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from pdfbridge.app import build_app
from pdfbridge.config import Settings, init_settings, reset_settings
from pdfbridge.modules.convert.options import ConversionOptions
from pdfbridge.modules.convert.renderers import BaseRenderer
from pdfbridge.modules.convert.router import get_service
from pdfbridge.modules.convert.service import ConvertService

FAKE_PDF = b"%PDF-1.4 fake pdf content\n%%EOF"


class FakeRenderer(BaseRenderer):
    """Renderer double that records calls and returns or raises on demand."""

    def __init__(self, name: str, result: bytes | None = FAKE_PDF, error: Exception | None = None):
        self.name = name
        self.result = result
        self.error = error
        self.calls: list[tuple[str, ConversionOptions]] = []

    async def render(self, source: str, options: ConversionOptions) -> bytes:
        self.calls.append((source, options))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def settings(tmp_path):
    """Settings that never touch a real browser installation."""
    reset_settings()
    s = Settings(browser_paths=[str(tmp_path / "no-such-chrome")])
    init_settings(s)
    yield s
    reset_settings()


@pytest.fixture
def primary():
    return FakeRenderer("primary")


@pytest.fixture
def fallback():
    return FakeRenderer("fallback", result=b"%PDF-1.4 from fallback")


@pytest.fixture
def app(settings, primary, fallback):
    app = build_app(settings)
    app.dependency_overrides[get_service] = lambda: ConvertService(primary, fallback)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
