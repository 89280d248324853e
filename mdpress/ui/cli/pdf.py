"""
CLI command for PDF output — ``mdpress pdf``.

Thin wrapper over ``mdpress.core.use_cases.build_pdf``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from mdpress.ui.cli.common import apply_overrides, fail, load_config_or_exit


@click.command("pdf")
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="PDF file to write (default: next to SOURCE).")
@click.option("--format", "page_format", default=None, help="Paper format, e.g. A4 or Letter.")
@click.option("--margin", default=None, help="Page margin on all sides, e.g. 12.7mm or 0.5in.")
@click.option("--timeout", "timeout_ms", type=int, default=None,
              help="Browser timeout in milliseconds.")
@click.option("--date", "doc_date", default=None, help="Date shown in the header band.")
@click.option("--keep-html", type=click.Path(path_type=Path), default=None,
              help="Also write the print-ready HTML to this path.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def pdf(
    ctx: click.Context,
    source: Path,
    output: Path | None,
    page_format: str | None,
    margin: str | None,
    timeout_ms: int | None,
    doc_date: str | None,
    keep_html: Path | None,
    as_json: bool,
) -> None:
    """Convert a Markdown file to a styled PDF via headless Chromium."""
    from mdpress.core.services.source_io import default_output
    from mdpress.core.use_cases.build_pdf import build_pdf

    config = apply_overrides(
        load_config_or_exit(ctx),
        "pdf",
        page_format=page_format,
        margin=margin,
        timeout_ms=timeout_ms,
        doc_date=doc_date,
    )
    output = output or default_output(source, ".pdf")
    quiet = ctx.obj.get("quiet", False)

    if not quiet and not as_json:
        click.secho(f"📄 {source} → {output}", fg="cyan", bold=True)

    result = build_pdf(source, output, config, keep_html=keep_html)

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        if not result.ok:
            ctx.exit(1)
        return

    if not result.ok:
        fail(result.error or "PDF generation failed")

    if not quiet:
        click.echo(f"   Title:    {result.title}")
        if result.subtitle:
            click.echo(f"   Subtitle: {result.subtitle}")
        click.echo(f"   HTML:     {result.html_chars:,} chars")
        if result.html_copy:
            click.echo(f"   Copy:     {result.html_copy}")
        click.secho(f"✅ Done in {result.duration_s:.2f}s: {result.output}", fg="green")
