"""
Tests for the headless CLI (fallback) renderer.

The browser subprocess is replaced by a fake that writes the PDF file the
way Chrome does for --print-to-pdf.
"""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from pdfbridge.modules.convert.options import normalize_options
from pdfbridge.modules.convert.renderers.chrome_cli import (
    ChromeCliRenderer,
    build_page_css,
    inject_base_href,
    inject_page_css,
)
from pdfbridge.shared.errors import FallbackRenderFailure

MODULE = "pdfbridge.modules.convert.renderers.chrome_cli"


REMOTE_DOM = b"<html><head><title>remote</title></head><body><img src='logo.png'></body></html>"


class FakeProcess:
    """Stand-in for asyncio.subprocess.Process."""

    def __init__(
        self, cmd, returncode=0, pdf=b"%PDF-1.4 cli", dom=REMOTE_DOM, stderr=b"", hang=False
    ):
        self.cmd = list(cmd)
        self.final_returncode = returncode
        self.pdf = pdf
        self.dom = dom
        self.stderr = stderr
        self.hang = hang
        self.returncode = None
        self.killed = False
        self.seen_input = None

    @property
    def workdir(self) -> Path:
        arg = next(a for a in self.cmd if a.startswith("--user-data-dir="))
        return Path(arg.split("=", 1)[1]).parent

    @property
    def output_path(self) -> Path:
        return self.workdir / "output.pdf"

    async def communicate(self):
        if self.hang:
            await asyncio.sleep(30)
        self.returncode = self.final_returncode
        if "--dump-dom" in self.cmd:
            return self.dom, self.stderr
        self.seen_input = (self.workdir / "input.html").read_text(encoding="utf-8")
        if self.pdf is not None:
            self.output_path.write_bytes(self.pdf)
        return b"", self.stderr

    def kill(self):
        self.killed = True
        self.returncode = -9

    async def wait(self):
        return self.returncode


def _spawn(**process_kwargs):
    """Patchable create_subprocess_exec that records the processes it makes."""
    spawned: list[FakeProcess] = []

    async def fake_exec(*cmd, **kwargs):
        proc = FakeProcess(cmd, **process_kwargs)
        spawned.append(proc)
        return proc

    return fake_exec, spawned


def _render(renderer, source, **option_fields):
    return asyncio.run(renderer.render(source, normalize_options(source, **option_fields)))


@pytest.fixture
def renderer():
    return ChromeCliRenderer(timeout_seconds=5)


@pytest.fixture(autouse=True)
def fake_browser():
    with patch(f"{MODULE}.find_browser_executable", return_value="/opt/chrome/chrome") as mock_find:
        yield mock_find


def test_build_page_css_portrait_a4():
    css = build_page_css(normalize_options("<p/>", margin="1,2,3,4"))

    assert "size: 210mm 297mm;" in css
    assert "margin: 1mm 2mm 3mm 4mm;" in css
    assert "print-color-adjust: exact" in css


def test_build_page_css_landscape_swaps_dimensions():
    css = build_page_css(normalize_options("<p/>", format="letter", orientation="landscape"))

    assert "size: 279.4mm 215.9mm;" in css


def test_build_page_css_without_background_or_known_size():
    css = build_page_css(normalize_options("<p/>", format="B7", print_background="false"))

    assert "size:" not in css
    assert "print-color-adjust" not in css
    assert css.startswith("@page {")


def test_inject_page_css_into_head():
    html = "<!DOCTYPE html><html><HEAD lang='en'><title>t</title></HEAD><body>x</body></html>"

    result = inject_page_css(html, "@page { margin: 0; }")

    assert result.startswith("<!DOCTYPE html><html><HEAD lang='en'><style>@page { margin: 0; }</style>")
    assert result.endswith("<body>x</body></html>")


def test_inject_page_css_without_head():
    assert inject_page_css("<h1>Hi</h1>", "x{}") == "<style>x{}</style><h1>Hi</h1>"


def test_render_html_writes_styled_input_file(renderer):
    fake_exec, spawned = _spawn()

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        result = _render(renderer, "<h1>Hi</h1>", orientation="landscape")

    assert result == b"%PDF-1.4 cli"
    proc = spawned[0]
    assert proc.cmd[0] == "/opt/chrome/chrome"
    assert "--headless=new" in proc.cmd
    assert "--no-sandbox" in proc.cmd
    assert proc.cmd[-1].startswith("file://")
    assert "<h1>Hi</h1>" in proc.seen_input
    assert "size: 297mm 210mm;" in proc.seen_input


def test_render_url_dumps_dom_then_prints_with_page_setup(renderer):
    fake_exec, spawned = _spawn()

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        result = _render(
            renderer,
            "https://example.com/report",
            orientation="landscape",
            format="Letter",
            margin="0",
        )

    assert result == b"%PDF-1.4 cli"
    dump, printer = spawned
    assert dump.cmd[-2:] == ["--dump-dom", "https://example.com/report"]
    assert printer.cmd[-1].startswith("file://")
    assert "size: 279.4mm 215.9mm;" in printer.seen_input
    assert "margin: 0mm 0mm 0mm 0mm;" in printer.seen_input
    assert '<base href="https://example.com/report">' in printer.seen_input
    assert "<img src='logo.png'>" in printer.seen_input
    assert not printer.workdir.exists()


def test_render_url_with_empty_dom_fails(renderer):
    fake_exec, spawned = _spawn(dom=b"  \n")

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        with pytest.raises(FallbackRenderFailure, match="no DOM"):
            _render(renderer, "https://example.com")

    assert len(spawned) == 1


def test_inject_page_css_keeps_doctype_first():
    result = inject_page_css("<!DOCTYPE html><html><body>x</body></html>", "x{}")

    assert result == "<!DOCTYPE html><html><style>x{}</style><body>x</body></html>"


def test_inject_page_css_after_bare_doctype():
    result = inject_page_css("<!doctype html>\n<p>x</p>", "x{}")

    assert result == "<!doctype html><style>x{}</style>\n<p>x</p>"


def test_inject_page_css_ignores_header_element():
    result = inject_page_css("<html><header>h</header></html>", "x{}")

    assert result == "<html><style>x{}</style><header>h</header></html>"


def test_inject_base_href_escapes_url():
    result = inject_base_href("<html><head></head></html>", 'https://e.com/?a=1&b="2"')

    assert result == '<html><head><base href="https://e.com/?a=1&amp;b=&quot;2&quot;"></head></html>'


def test_temp_files_removed_after_render(renderer):
    fake_exec, spawned = _spawn()

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        _render(renderer, "<p>x</p>")

    assert not spawned[0].output_path.parent.exists()


def test_nonzero_exit_raises(renderer):
    fake_exec, spawned = _spawn(returncode=21, stderr=b"crashpad: boom")

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        with pytest.raises(FallbackRenderFailure) as exc_info:
            _render(renderer, "<p>x</p>")

    assert "code 21" in str(exc_info.value)
    assert "boom" in str(exc_info.value)
    assert not spawned[0].output_path.parent.exists()


def test_missing_output_raises(renderer):
    fake_exec, _ = _spawn(pdf=None)

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        with pytest.raises(FallbackRenderFailure, match="no PDF output"):
            _render(renderer, "<p>x</p>")


def test_timeout_kills_process():
    renderer = ChromeCliRenderer(timeout_seconds=0.05)
    fake_exec, spawned = _spawn(hang=True)

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        with pytest.raises(FallbackRenderFailure, match="timed out"):
            _render(renderer, "<p>x</p>")

    assert spawned[0].killed is True
    assert not spawned[0].output_path.parent.exists()


def test_no_executable_fails_without_spawning(renderer, fake_browser):
    fake_browser.return_value = None
    fake_exec, spawned = _spawn()

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=fake_exec):
        with pytest.raises(FallbackRenderFailure, match="No Chrome/Chromium"):
            _render(renderer, "<p>x</p>")

    assert spawned == []


def test_spawn_error_wrapped(renderer):
    async def broken_exec(*cmd, **kwargs):
        raise PermissionError("Permission denied: '/opt/chrome/chrome'")

    with patch(f"{MODULE}.asyncio.create_subprocess_exec", new=broken_exec):
        with pytest.raises(FallbackRenderFailure) as exc_info:
            _render(renderer, "<p>x</p>")

    assert exc_info.value.renderer == "chrome-cli"
    assert isinstance(exc_info.value.__cause__, PermissionError)
