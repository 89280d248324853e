"""
Build PDF use case — Markdown source → enhanced print page → PDF.

Pipeline:
    read source → extract title → render Markdown → enhance HTML
    → print page → (optional HTML copy) → headless-browser PDF
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from mdpress.core.models.settings import PressConfig
from mdpress.core.services.html_document import render_print_page
from mdpress.core.services.md_render import RenderError, render_markdown
from mdpress.core.services.md_transforms import enhance, extract_title
from mdpress.core.services.pdf_export import PdfExportError, export_pdf
from mdpress.core.services.source_io import SourceError, read_source, write_output

logger = logging.getLogger(__name__)


@dataclass
class PdfResult:
    """Outcome of one PDF build."""

    source: Path
    output: Path
    title: str = ""
    subtitle: str = ""
    source_chars: int = 0
    html_chars: int = 0
    html_copy: Path | None = None
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
            "subtitle": self.subtitle,
            "source_chars": self.source_chars,
            "html_chars": self.html_chars,
            "html_copy": str(self.html_copy) if self.html_copy else None,
            "duration_s": round(self.duration_s, 3),
            "error": self.error,
        }


def build_pdf(
    source: Path,
    output: Path,
    config: PressConfig | None = None,
    *,
    keep_html: Path | None = None,
) -> PdfResult:
    """Convert ``source`` to a styled PDF at ``output``.

    Args:
        source: Markdown file.
        output: PDF file to write.
        config: Settings (default: ``PressConfig()``).
        keep_html: Also write the print page HTML here.

    Returns:
        PdfResult — ``error`` is set instead of raising.
    """
    config = config or PressConfig()
    result = PdfResult(source=source, output=output)
    started = time.monotonic()

    try:
        markdown_text = read_source(source)
        result.source_chars = len(markdown_text)

        doc_title = extract_title(markdown_text)
        result.title, result.subtitle = doc_title.title, doc_title.subtitle
        logger.info("Title: %s", result.title)

        content = render_markdown(markdown_text, config.markdown.extensions)
        content = enhance(content, config.enhance)

        page = render_print_page(
            content,
            title=doc_title.title,
            subtitle=doc_title.subtitle,
            doc_date=config.pdf.doc_date,
            date_label=config.pdf.date_label,
            lang=config.lang,
            page_size=config.pdf.page_format,
            page_margin=config.pdf.margin,
        )
        result.html_chars = len(page)

        if keep_html is not None:
            result.html_copy = write_output(keep_html, page)

        export_pdf(page, output, config.pdf)
    except (SourceError, RenderError, PdfExportError) as e:
        result.error = str(e)
    except OSError as e:
        result.error = f"Cannot write {keep_html}: {e}"

    result.duration_s = time.monotonic() - started
    if result.ok:
        logger.info("PDF written: %s (%.2fs)", output, result.duration_s)
    else:
        logger.error("PDF build of %s failed: %s", source.name, result.error)
    return result
