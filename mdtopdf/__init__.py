"""Convert Markdown notes and Obsidian vaults into self-contained PDFs."""

__version__ = "0.1.0"
