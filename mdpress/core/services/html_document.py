"""
Page templates — wrap converted content in a complete HTML document.

Two pages are produced from the Jinja2 templates in ``templates/``:

  - preview.html: screen stylesheet + "last updated" stamp, used by
    ``mdpress build`` and the live-preview server
  - print.html: print stylesheet with ``@page`` setup, header band and
    footer, handed to the PDF exporter

Metadata (title, subtitle, dates) is autoescaped; the content HTML is
inserted as-is.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    keep_trailing_newline=True,
)


def render_preview_page(
    content_html: str,
    *,
    title: str,
    lang: str = "en",
    updated_at: datetime | None = None,
) -> str:
    """Render the live-preview page around ``content_html``."""
    stamp = (updated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return _env.get_template("preview.html").render(
        content=content_html,
        title=title,
        lang=lang,
        updated_at=stamp,
    )


def render_print_page(
    content_html: str,
    *,
    title: str,
    subtitle: str = "",
    doc_date: str = "",
    date_label: str = "Published",
    lang: str = "en",
    page_size: str = "A4",
    page_margin: str = "12.7mm",
    created: datetime | None = None,
) -> str:
    """Render the print page (header band, content, footer) for PDF export."""
    return _env.get_template("print.html").render(
        content=content_html,
        title=title,
        subtitle=subtitle,
        doc_date=doc_date,
        date_label=date_label,
        lang=lang,
        page_size=page_size,
        page_margin=page_margin,
        created=(created or datetime.now()).strftime("%B %Y"),
    )
