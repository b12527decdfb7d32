"""
Tests for single-file and directory conversion.

Chromium is replaced by the ``fake_playwright`` fixture; render_pdf itself
is exercised against mocked browser objects.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

import mdtopdf.converter as converter
from mdtopdf.config import ConvertConfig
from mdtopdf.converter import (
    convert_directory,
    convert_file,
    convert_single,
    render_pdf,
)
from mdtopdf.utils import iter_markdown_files, output_pdf_path


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_render_pdf_uses_print_options(tmp_path):
    page = AsyncMock()
    browser = AsyncMock()
    browser.new_page.return_value = page
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    destination = tmp_path / "out.pdf"

    await render_pdf(playwright, "<html></html>", destination, ConvertConfig())

    playwright.chromium.launch.assert_awaited_once_with(headless=True)
    page.set_content.assert_awaited_once_with("<html></html>", wait_until="networkidle")
    page.pdf.assert_awaited_once_with(
        path=str(destination),
        format="A4",
        print_background=True,
        margin={"top": "20px", "bottom": "20px", "left": "20px", "right": "20px"},
    )
    browser.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_render_pdf_closes_browser_on_failure(tmp_path):
    page = AsyncMock()
    page.pdf.side_effect = RuntimeError("printing failed")
    browser = AsyncMock()
    browser.new_page.return_value = page
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    with pytest.raises(RuntimeError, match="printing failed"):
        await render_pdf(playwright, "<html></html>", tmp_path / "x.pdf", ConvertConfig())

    browser.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_convert_file_missing_source(tmp_path, fake_playwright):
    with pytest.raises(FileNotFoundError):
        await convert_file(object(), tmp_path / "nope.md", tmp_path / "out", ConvertConfig())
    assert fake_playwright == []


@pytest.mark.asyncio
async def test_convert_single_writes_beside_source(vault, fake_playwright):
    source = vault / "notes" / "daily" / "note.md"

    result = await convert_single(source)

    expected = vault / "notes" / "daily" / "ExportPDF" / "note.pdf"
    assert result.ok
    assert result.output_path == expected
    assert expected.read_bytes().startswith(b"%PDF")
    (destination, html), = fake_playwright
    assert destination == expected
    assert "data:image/png;base64," in html


@pytest.mark.asyncio
async def test_convert_single_reports_failure(tmp_path, monkeypatch):
    source = _write(tmp_path / "doc.md", "# Doc\n")

    async def _failing_render(playwright, html, destination, config):
        raise RuntimeError("browser crashed")

    class _FakePlaywright:
        async def __aenter__(self):
            return object()

        async def __aexit__(self, *exc_info):
            return False

    monkeypatch.setattr(converter, "async_playwright", _FakePlaywright)
    monkeypatch.setattr(converter, "render_pdf", _failing_render)

    result = await convert_single(source)

    assert not result.ok
    assert result.error == "browser crashed"


@pytest.mark.asyncio
async def test_convert_directory_produces_one_pdf_per_file(tmp_path, fake_playwright):
    _write(tmp_path / "a.md", "# A\n")
    _write(tmp_path / "sub" / "b.md", "B body\n")
    _write(tmp_path / "sub" / "deeper" / "c.md", "![[missing.png]]\n")
    _write(tmp_path / "notes.txt", "ignored")

    results = await convert_directory(tmp_path, ConvertConfig(workers=2))

    assert len(results) == 3
    assert all(result.ok for result in results)
    export = tmp_path / "ExportPDF"
    assert sorted(p.name for p in export.iterdir()) == ["a.pdf", "b.pdf", "c.pdf"]


@pytest.mark.asyncio
async def test_convert_directory_isolates_failures(tmp_path, monkeypatch, fake_playwright):
    for name in ("one", "two", "three"):
        _write(tmp_path / f"{name}.md", f"# {name}\n")

    real_prepare = converter.prepare_html

    def _prepare(source, config):
        if Path(source).stem == "two":
            raise ValueError("bad document")
        return real_prepare(source, config)

    monkeypatch.setattr(converter, "prepare_html", _prepare)

    results = await convert_directory(tmp_path, ConvertConfig(workers=3))

    by_name = {result.source_path.stem: result for result in results}
    assert set(by_name) == {"one", "two", "three"}
    assert by_name["two"].error == "bad document"
    assert by_name["one"].ok and by_name["three"].ok
    assert (tmp_path / "ExportPDF" / "one.pdf").exists()
    assert (tmp_path / "ExportPDF" / "three.pdf").exists()
    assert not (tmp_path / "ExportPDF" / "two.pdf").exists()


@pytest.mark.asyncio
async def test_convert_directory_defaults_to_cwd(tmp_path, monkeypatch, fake_playwright):
    _write(tmp_path / "here.md", "# Here\n")
    monkeypatch.chdir(tmp_path)

    results = await convert_directory()

    assert [result.output_path for result in results] == [
        tmp_path.resolve() / "ExportPDF" / "here.pdf"
    ]


@pytest.mark.asyncio
async def test_convert_directory_missing_root(tmp_path, fake_playwright):
    with pytest.raises(FileNotFoundError):
        await convert_directory(tmp_path / "absent")


@pytest.mark.asyncio
async def test_convert_directory_empty(tmp_path, fake_playwright):
    assert await convert_directory(tmp_path) == []
    assert fake_playwright == []


def test_iter_markdown_files_is_sorted_and_recursive(tmp_path):
    _write(tmp_path / "z.md", "")
    _write(tmp_path / "a" / "y.md", "")
    _write(tmp_path / "a" / "x.txt", "")

    assert iter_markdown_files(tmp_path) == [tmp_path / "a" / "y.md", tmp_path / "z.md"]


def test_output_pdf_path_is_flat(tmp_path):
    source = tmp_path / "deep" / "tree" / "file.md"
    assert output_pdf_path(source, tmp_path / "out") == tmp_path / "out" / "file.pdf"
