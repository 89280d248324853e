"""
Markdown rendering — thin wrapper over Python-Markdown.

Produces block-level HTML (no <html>/<body> shell).  The default
extension set gives tables, fenced code blocks and line-break-on-newline
semantics; mdpress.yml can replace the list.
"""

from __future__ import annotations

import logging

import markdown

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("tables", "fenced_code", "nl2br")


class RenderError(Exception):
    """Raised when Markdown → HTML conversion fails or yields nothing."""


def render_markdown(text: str, extensions: list[str] | None = None) -> str:
    """Convert Markdown text to HTML.

    Args:
        text: Markdown source.
        extensions: Python-Markdown extension names
            (default: ``DEFAULT_EXTENSIONS``).

    Returns:
        Block-level HTML.

    Raises:
        RenderError: If the library fails, or non-blank input renders
            to an empty string.
    """
    exts = list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS)

    try:
        md = markdown.Markdown(extensions=exts, output_format="html")
        html = md.convert(text)
    except (ImportError, ValueError, AttributeError) as e:
        # Unknown extension names surface as ImportError / ValueError
        raise RenderError(f"Markdown conversion failed: {e}") from e

    if text.strip() and not html.strip():
        raise RenderError("Markdown conversion produced no output")

    logger.debug("Rendered %d chars of Markdown into %d chars of HTML", len(text), len(html))
    return html
