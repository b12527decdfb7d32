"""Utility helpers for file discovery and output naming."""

from __future__ import annotations

from pathlib import Path
from typing import List

MARKDOWN_GLOB = "*.md"


def iter_markdown_files(root: Path) -> List[Path]:
    """List Markdown files below ``root`` recursively, sorted by path."""
    return sorted(path for path in root.rglob(MARKDOWN_GLOB) if path.is_file())


def output_pdf_path(source: Path, output_dir: Path) -> Path:
    """Flattened destination: ``output_dir/<stem>.pdf``."""
    return output_dir / f"{source.stem}.pdf"
