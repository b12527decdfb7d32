"""
Pytest configuration and shared fixtures.

Provides small on-disk images and a stand-in for Playwright so the
conversion pipeline can run without launching Chromium.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import pytest

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def vault(tmp_path):
    """
    Obsidian-style vault:

        vault/.obsidian/
        vault/attachments/photo.png
        vault/notes/daily/note.md
    """
    root = tmp_path / "vault"
    (root / ".obsidian").mkdir(parents=True)
    (root / "attachments").mkdir()
    (root / "attachments" / "photo.png").write_bytes(PNG_BYTES)
    notes = root / "notes" / "daily"
    notes.mkdir(parents=True)
    (notes / "note.md").write_text("# Daily\n\n![[photo.png]]\n", encoding="utf-8")
    return root


@pytest.fixture
def fake_playwright(monkeypatch):
    """
    Replace Playwright with a context manager yielding a sentinel and make
    render_pdf write placeholder bytes. Returns the list of rendered calls.
    """
    import mdtopdf.converter as converter

    rendered = []
    sentinel = object()

    @asynccontextmanager
    async def _fake_async_playwright():
        yield sentinel

    async def _fake_render_pdf(playwright, html, destination, config):
        assert playwright is sentinel
        rendered.append((Path(destination), html))
        Path(destination).write_bytes(b"%PDF-1.4\n%fake\n")

    monkeypatch.setattr(converter, "async_playwright", _fake_async_playwright)
    monkeypatch.setattr(converter, "render_pdf", _fake_render_pdf)
    return rendered
