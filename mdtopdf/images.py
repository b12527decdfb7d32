"""Image lookup and data URI encoding utilities."""

from __future__ import annotations

import base64
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_VAULT_MARKER, ConvertConfig
from .models import ResolvedImage

logger = logging.getLogger("mdtopdf")

PathLike = Union[str, os.PathLike]

DEFAULT_MIME_TYPE = "image/png"
MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".bmp": "image/bmp",
}


def guess_mime_type(path: PathLike) -> str:
    """Map a file extension to an image MIME type, defaulting to PNG."""
    return MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


def load_image(path: PathLike) -> Optional[ResolvedImage]:
    """Read an image file and base64-encode it; None if it cannot be read."""
    image_path = Path(path)
    try:
        data = image_path.read_bytes()
    except OSError as exc:
        logger.warning("Failed to read image %s: %s", image_path, exc)
        return None
    return ResolvedImage(
        path=image_path,
        mime_type=guess_mime_type(image_path),
        payload=base64.b64encode(data).decode("ascii"),
    )


def encode_data_uri(path: PathLike) -> Optional[str]:
    """Return a ``data:`` URI holding the file's bytes, or None on failure."""
    image = load_image(path)
    return image.data_uri if image else None


def find_vault_root(start_dir: PathLike, marker: str = DEFAULT_VAULT_MARKER) -> Optional[Path]:
    """Walk upward from ``start_dir`` to the first directory holding ``marker``."""
    current = Path(start_dir)
    for candidate in (current, *current.parents):
        try:
            if (candidate / marker).is_dir():
                return candidate
        except OSError:
            continue
    return None


def _raise_scan_error(exc: OSError) -> None:
    raise exc


def _search_tree(root: Path, filename: str) -> Optional[Path]:
    """Depth-first search below ``root`` for a file called ``filename``.

    Directories are visited top-down in name order so the first match is
    stable between runs. An unreadable directory anywhere in the tree aborts
    the whole search, which then counts as no match.
    """
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_scan_error):
            dirnames.sort()
            if filename in filenames:
                candidate = Path(dirpath) / filename
                if candidate.is_file():
                    return candidate
    except OSError as exc:
        logger.debug("Skipping search below %s: %s", root, exc)
    return None


def locate_image(
    image_name: str,
    source_dir: PathLike,
    config: Optional[ConvertConfig] = None,
) -> Optional[Path]:
    """Find an image referenced from a document living in ``source_dir``.

    Lookup order, first hit wins:

    1. ``image_name`` as an absolute path.
    2. ``image_name`` relative to ``source_dir``.
    3. Any file with the same base name inside the enclosing Obsidian vault.
    4. Any file with the same base name below ``source_dir`` or one of its
       ancestors, up to ``config.max_ancestor_levels`` directories in total.
    """
    if not image_name:
        return None
    config = config or ConvertConfig()
    source = Path(source_dir)
    candidate = Path(image_name)

    try:
        if candidate.is_absolute() and candidate.is_file():
            return candidate
        direct = source / candidate
        if direct.is_file():
            return direct
    except OSError as exc:
        logger.debug("Direct lookup of %s failed: %s", image_name, exc)

    filename = candidate.name
    if not filename:
        return None

    vault_root = find_vault_root(source, config.vault_marker)
    if vault_root is not None:
        found = _search_tree(vault_root, filename)
        if found is not None:
            logger.debug("Found %s in vault %s", filename, vault_root)
            return found

    current: Optional[Path] = source
    for _ in range(config.max_ancestor_levels):
        if current is None:
            break
        found = _search_tree(current, filename)
        if found is not None:
            logger.debug("Found %s below %s", filename, current)
            return found
        parent = current.parent
        current = parent if parent != current else None

    logger.debug("Could not locate image %s from %s", image_name, source)
    return None
