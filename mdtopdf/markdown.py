"""Markdown preprocessing and HTML assembly helpers."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import unquote

import markdown as markdown_engine
from bs4 import BeautifulSoup

from .config import DEFAULT_HTML_LANG, MARKDOWN_EXTENSIONS, ConvertConfig
from .images import encode_data_uri, locate_image
from .models import ImageReference

logger = logging.getLogger("mdtopdf")

WIKILINK_PATTERN = re.compile(r"!\[\[(.*?)\]\]")
STANDARD_IMAGE_PATTERN = re.compile(r"!\[(.*?)\]\((.*?)\)")
FRONT_MATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?:.*?\r?\n)?(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)

HTML_SHELL = """<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <style>
        body {{ font-family: 'Segoe UI', Arial, sans-serif; padding: 40px; line-height: 1.6; color: #333; }}
        img {{ max-width: 100%; height: auto; display: block; margin: 20px auto; }}
        h1 {{ color: #ADD8E6; text-align: center; margin-bottom: 30px; }}
        pre {{ background: #f4f4f4; padding: 15px; border-radius: 5px; overflow-x: auto; }}
        p {{ margin-bottom: 15px; }}
        table {{ border-collapse: collapse; margin: 15px 0; }}
        th, td {{ border: 1px solid #ccc; padding: 6px 12px; }}
    </style>
</head>
<body>{body}</body>
</html>"""


def is_remote(path: str) -> bool:
    """Return True for references that must be left to the browser."""
    return path.lower().startswith("http")


def parse_wikilink(raw: str) -> ImageReference:
    """Parse the inside of ``![[...]]`` into name, width and alt text."""
    parts = raw.split("|")
    width: Optional[str] = None
    alt_text = ""
    for modifier in parts[1:]:
        modifier = modifier.strip()
        try:
            int(modifier)
        except ValueError:
            alt_text = modifier
        else:
            width = modifier
    return ImageReference(
        raw=f"![[{raw}]]",
        name=unquote(parts[0]).strip(),
        alt_text=alt_text,
        width=width,
        style="wikilink",
    )


def parse_standard(alt_text: str, path: str) -> ImageReference:
    """Build a reference from the pieces of ``![alt](path)``."""
    return ImageReference(
        raw=f"![{alt_text}]({path})",
        name=unquote(path.strip()),
        alt_text=alt_text,
    )


def _img_tag(data_uri: str, reference: ImageReference) -> str:
    width_attr = f' width="{reference.width}"' if reference.width is not None else ""
    alt = html.escape(reference.alt_text)
    return f'<img src="{data_uri}" alt="{alt}"{width_attr} />'


def _inline_reference(
    reference: ImageReference,
    source_dir: Path,
    config: ConvertConfig,
) -> Optional[str]:
    located = locate_image(reference.name, source_dir, config)
    if located is None:
        logger.debug(
            "Leaving unresolved %s image reference %s", reference.style, reference.raw
        )
        return None
    data_uri = encode_data_uri(located)
    if data_uri is None:
        return None
    return _img_tag(data_uri, reference)


def rewrite_image_references(
    text: str,
    source_dir: Union[str, Path],
    config: Optional[ConvertConfig] = None,
) -> str:
    """Inline local image embeds as ``<img>`` tags with data URIs.

    Obsidian wikilinks are rewritten first, then standard Markdown images.
    Remote images and references that cannot be resolved are kept verbatim.
    """
    config = config or ConvertConfig()
    source = Path(source_dir)

    def _replace_wikilink(match: re.Match) -> str:
        reference = parse_wikilink(match.group(1))
        return _inline_reference(reference, source, config) or match.group(0)

    def _replace_standard(match: re.Match) -> str:
        reference = parse_standard(match.group(1), match.group(2))
        if is_remote(reference.name):
            return match.group(0)
        return _inline_reference(reference, source, config) or match.group(0)

    text = WIKILINK_PATTERN.sub(_replace_wikilink, text)
    return STANDARD_IMAGE_PATTERN.sub(_replace_standard, text)


def strip_front_matter(text: str) -> str:
    """Remove a leading YAML ``---`` block; it is never rendered."""
    return FRONT_MATTER_PATTERN.sub("", text, count=1)


def markdown_to_html(text: str, extensions: Optional[List[str]] = None) -> str:
    """Render Markdown to an HTML fragment; front matter is dropped."""
    converter = markdown_engine.Markdown(
        extensions=list(extensions or MARKDOWN_EXTENSIONS),
        output_format="html",
    )
    return converter.convert(strip_front_matter(text))


def ensure_title(body_html: str, title: str) -> str:
    """Prepend an ``<h1>`` with ``title`` when the fragment has none."""
    soup = BeautifulSoup(body_html, "html.parser")
    if soup.find("h1"):
        return body_html
    return f"<h1>{html.escape(title)}</h1>\n{body_html}"


def build_html_document(body_html: str, lang: str = DEFAULT_HTML_LANG) -> str:
    """Wrap an HTML fragment in the print stylesheet shell."""
    return HTML_SHELL.format(lang=lang, body=body_html)


def prepare_html(source: Union[str, Path], config: Optional[ConvertConfig] = None) -> str:
    """Read a Markdown file and produce the full HTML page to print."""
    config = config or ConvertConfig()
    source_path = Path(source).resolve()
    text = source_path.read_text(encoding="utf-8")
    text = rewrite_image_references(text, source_path.parent, config)
    body_html = markdown_to_html(text)
    body_html = ensure_title(body_html, source_path.stem)
    return build_html_document(body_html, lang=config.html_lang)
