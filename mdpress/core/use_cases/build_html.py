"""
Build HTML use case — Markdown source → styled preview page.

Used by ``mdpress build`` and, through ``rebuild_and_notify``, by the
watcher behind ``mdpress watch``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from mdpress.core.models.settings import PressConfig
from mdpress.core.services.event_bus import bus
from mdpress.core.services.html_document import render_preview_page
from mdpress.core.services.md_render import RenderError, render_markdown
from mdpress.core.services.md_transforms import enhance as enhance_html
from mdpress.core.services.md_transforms import extract_title
from mdpress.core.services.source_io import SourceError, read_source, write_output

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of one HTML build."""

    source: Path
    output: Path
    title: str = ""
    enhanced: bool = False
    chars: int = 0
    duration_s: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "source": str(self.source),
            "output": str(self.output),
            "title": self.title,
            "enhanced": self.enhanced,
            "chars": self.chars,
            "duration_s": round(self.duration_s, 3),
            "error": self.error,
        }


def build_html(
    source: Path,
    output: Path,
    config: PressConfig | None = None,
    *,
    enhance: bool | None = None,
) -> BuildResult:
    """Convert ``source`` to a standalone HTML page at ``output``.

    Args:
        source: Markdown file.
        output: HTML file to write.
        config: Settings (default: ``PressConfig()``).
        enhance: Run the HTML enhancer; ``None`` uses ``preview.enhance``.

    Returns:
        BuildResult — ``error`` is set instead of raising for input,
        render and write failures.
    """
    config = config or PressConfig()
    use_enhancer = config.preview.enhance if enhance is None else enhance
    result = BuildResult(source=source, output=output, enhanced=use_enhancer)
    started = time.monotonic()

    try:
        markdown_text = read_source(source)
        result.title = extract_title(markdown_text).title

        content = render_markdown(markdown_text, config.markdown.extensions)
        if use_enhancer:
            content = enhance_html(content, config.enhance)

        page = render_preview_page(content, title=result.title, lang=config.lang)
        write_output(output, page)
        result.chars = len(page)
    except (SourceError, RenderError) as e:
        result.error = str(e)
    except OSError as e:
        result.error = f"Cannot write {output}: {e}"

    result.duration_s = time.monotonic() - started
    if result.ok:
        logger.info("Built %s (%d chars, %.2fs)", output.name, result.chars, result.duration_s)
    else:
        logger.error("Build of %s failed: %s", source.name, result.error)
    return result


def rebuild_and_notify(
    source: Path,
    output: Path,
    config: PressConfig | None = None,
    *,
    enhance: bool | None = None,
) -> BuildResult:
    """Rebuild after a source change and tell connected browsers.

    Publishes ``doc:reload`` on success and ``doc:error`` on failure,
    so a broken edit never reloads the page away from the last good
    build.
    """
    result = build_html(source, output, config, enhance=enhance)
    if result.ok:
        bus.publish(
            "doc:reload",
            key=output.name,
            data={"title": result.title, "chars": result.chars},
            duration_s=result.duration_s,
        )
    else:
        bus.publish("doc:error", key=output.name, error=result.error or "")
    return result
