"""High-level orchestration for turning Markdown files into PDFs."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional, Union

from playwright.async_api import Playwright, async_playwright

from .config import ConvertConfig
from .markdown import prepare_html
from .models import ConversionResult
from .utils import iter_markdown_files, output_pdf_path

logger = logging.getLogger("mdtopdf")


async def render_pdf(
    playwright: Playwright,
    html: str,
    destination: Path,
    config: ConvertConfig,
) -> None:
    """Print an HTML document to ``destination`` using headless Chromium."""
    browser = await playwright.chromium.launch(headless=config.headless)
    try:
        page = await browser.new_page()
        await page.set_content(html, wait_until=config.wait_until)
        margin = config.page_margin
        await page.pdf(
            path=str(destination),
            format=config.page_format,
            print_background=config.print_background,
            margin={"top": margin, "bottom": margin, "left": margin, "right": margin},
        )
    finally:
        await browser.close()


async def convert_file(
    playwright: Playwright,
    source: Union[str, Path],
    output_dir: Union[str, Path],
    config: ConvertConfig,
) -> Path:
    """Convert one Markdown file and return the path of the written PDF."""
    source_path = Path(source)
    if not source_path.is_file():
        raise FileNotFoundError(f"The specified file does not exist: {source_path}")

    destination = output_pdf_path(source_path, Path(output_dir))
    destination.parent.mkdir(parents=True, exist_ok=True)

    html = await asyncio.to_thread(prepare_html, source_path, config)
    logger.debug("Rendering %s (%d characters of HTML)", destination, len(html))
    await render_pdf(playwright, html, destination, config)
    return destination


async def _convert_with_result(
    playwright: Playwright,
    source: Path,
    output_dir: Path,
    config: ConvertConfig,
) -> ConversionResult:
    start = time.perf_counter()
    try:
        output_path = await convert_file(playwright, source, output_dir, config)
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Conversion of %s failed", source, exc_info=True)
        return ConversionResult(
            source_path=source,
            output_path=output_pdf_path(source, output_dir),
            total_seconds=time.perf_counter() - start,
            error=str(exc) or exc.__class__.__name__,
        )
    return ConversionResult(
        source_path=source,
        output_path=output_path,
        total_seconds=time.perf_counter() - start,
    )


async def convert_single(
    source: Union[str, Path],
    config: Optional[ConvertConfig] = None,
) -> ConversionResult:
    """Convert one file into an export folder next to it."""
    config = config or ConvertConfig()
    source_path = Path(source)
    output_dir = source_path.parent / config.output_dir_name
    async with async_playwright() as playwright:
        result = await _convert_with_result(playwright, source_path, output_dir, config)
    if result.ok:
        logger.info("✔ Processed individual file: %s", source_path)
    else:
        logger.error("✘ Error processing file %s: %s", source_path, result.error)
    return result


async def convert_directory(
    root: Union[str, Path, None] = None,
    config: Optional[ConvertConfig] = None,
) -> List[ConversionResult]:
    """Convert every Markdown file below ``root`` concurrently.

    Outputs land flat in ``root / config.output_dir_name``. Results are
    returned in completion order and a failing file never stops the others.
    """
    config = config or ConvertConfig()
    root_path = Path(root if root is not None else Path.cwd()).resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"The specified directory does not exist: {root_path}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root_path}")

    output_dir = root_path / config.output_dir_name
    files = iter_markdown_files(root_path)
    if not files:
        logger.info("No Markdown files found under %s", root_path)
        return []

    logger.info("Converting %d file(s) with %d worker(s)", len(files), config.workers)
    semaphore = asyncio.Semaphore(max(1, config.workers))
    results: List[ConversionResult] = []

    async with async_playwright() as playwright:

        async def _bounded(source: Path) -> ConversionResult:
            async with semaphore:
                return await _convert_with_result(playwright, source, output_dir, config)

        tasks = [asyncio.create_task(_bounded(path)) for path in files]
        for finished in asyncio.as_completed(tasks):
            result = await finished
            if result.ok:
                logger.info("✔ Processed file: %s", result.source_path)
            else:
                logger.error(
                    "✘ Error processing file %s: %s", result.source_path, result.error
                )
            results.append(result)
    return results
