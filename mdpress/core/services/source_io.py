"""
Source I/O — reading Markdown sources and writing conversion output.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """Raised when the source file is missing, unreadable or empty."""


def read_source(path: Path) -> str:
    """Read a UTF-8 Markdown source.

    Raises:
        SourceError: If the file does not exist, is not a regular file,
            cannot be read or decoded, or contains only whitespace.
    """
    if not path.exists():
        raise SourceError(f"File not found: {path}")
    if not path.is_file():
        raise SourceError(f"Not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SourceError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise SourceError(f"Cannot read {path}: {e}") from e

    if not content.strip():
        raise SourceError(f"File is empty: {path}")

    logger.debug("Read %d chars from %s", len(content), path)
    return content


def write_output(path: Path, text: str) -> Path:
    """Write UTF-8 text, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d chars to %s", len(text), path)
    return path


def default_output(source: Path, suffix: str) -> Path:
    """Output path next to the source: ``notes.md`` → ``notes.html``.

    Sources without an extension keep their full name
    (``Release notes`` → ``Release notes.html``).
    """
    if source.suffix.lower() in (".md", ".markdown", ".mdown", ".txt"):
        return source.with_suffix(suffix)
    return source.with_name(source.name + suffix)
