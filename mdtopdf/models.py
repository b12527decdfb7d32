"""Data models used throughout the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ImageReference:
    """Image embed parsed out of the Markdown source."""

    raw: str
    name: str
    alt_text: str = ""
    width: Optional[str] = None
    style: str = "standard"  # "standard" or "wikilink"


@dataclass
class ResolvedImage:
    """Image file located on disk and encoded for inlining."""

    path: Path
    mime_type: str
    payload: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"


@dataclass
class ConversionResult:
    """Outcome of converting a single Markdown file."""

    source_path: Path
    output_path: Path
    total_seconds: float
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
