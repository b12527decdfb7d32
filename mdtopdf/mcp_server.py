"""MCP server exposing mdtopdf conversion tools."""

from __future__ import annotations

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import ConvertConfig
from .converter import convert_directory as run_directory
from .converter import convert_single

logger = logging.getLogger("mdtopdf.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="mdtopdf")


@mcp.tool()
async def convert_file(path: str) -> str:
    """Convert one Markdown file to PDF and return the PDF path."""

    source = Path(path).expanduser()
    if not source.is_file():
        raise FileNotFoundError(f"Markdown file does not exist: {source}")

    result = await convert_single(source, ConvertConfig())
    if not result.ok:
        raise RuntimeError(f"Failed to convert {source}: {result.error}")
    return str(result.output_path)


@mcp.tool()
async def convert_directory(path: str) -> str:
    """Convert every Markdown file below a directory; one status line per file."""

    root = Path(path).expanduser()
    results = await run_directory(root, ConvertConfig())
    if not results:
        return f"No Markdown files found under {root}"
    lines = []
    for result in sorted(results, key=lambda item: str(item.source_path)):
        if result.ok:
            lines.append(f"✔ {result.source_path} -> {result.output_path}")
        else:
            lines.append(f"✘ {result.source_path}: {result.error}")
    return "\n".join(lines)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
