"""Configuration objects and constants for the converter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_OUTPUT_DIR_NAME = "ExportPDF"
DEFAULT_VAULT_MARKER = ".obsidian"
DEFAULT_MAX_ANCESTOR_LEVELS = 5

DEFAULT_HTML_LANG = "es"

MARKDOWN_EXTENSIONS = ("extra", "sane_lists")


def _default_workers() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ConvertConfig:
    """Settings shared read-only by every conversion in a run."""

    output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME
    vault_marker: str = DEFAULT_VAULT_MARKER
    max_ancestor_levels: int = DEFAULT_MAX_ANCESTOR_LEVELS
    page_format: str = "A4"
    page_margin: str = "20px"
    print_background: bool = True
    wait_until: str = "networkidle"
    headless: bool = True
    html_lang: str = DEFAULT_HTML_LANG
    workers: int = field(default_factory=_default_workers)
