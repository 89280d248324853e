"""
CLI commands for HTML output — ``mdpress build`` and ``mdpress title``.

Thin wrappers over ``mdpress.core.use_cases.build_html``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from mdpress.ui.cli.common import fail, load_config_or_exit


@click.command("build")
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="HTML file to write (default: next to SOURCE).")
@click.option("--enhance/--plain", default=None,
              help="Apply callout/badge/section enhancement (default: from config).")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def build(
    ctx: click.Context,
    source: Path,
    output: Path | None,
    enhance: bool | None,
    as_json: bool,
) -> None:
    """Convert a Markdown file to a standalone HTML page."""
    from mdpress.core.services.source_io import default_output
    from mdpress.core.use_cases.build_html import build_html

    config = load_config_or_exit(ctx)
    output = output or default_output(source, ".html")

    result = build_html(source, output, config, enhance=enhance)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            ctx.exit(1)
        return

    if not result.ok:
        fail(result.error or "Build failed")

    if not ctx.obj.get("quiet"):
        click.secho(f"✅ HTML written: {result.output}", fg="green")
        click.echo(f"   Title: {result.title}")
        click.echo(f"   {result.chars:,} chars in {result.duration_s:.2f}s")


@click.command("title")
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def title(source: Path, as_json: bool) -> None:
    """Show the title and subtitle taken from the first # heading."""
    from mdpress.core.services.md_transforms import extract_title
    from mdpress.core.services.source_io import SourceError, read_source

    try:
        doc_title = extract_title(read_source(source))
    except SourceError as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps(doc_title.model_dump(), ensure_ascii=False, indent=2))
        return

    click.echo(f"Title:    {doc_title.title}")
    click.echo(f"Subtitle: {doc_title.subtitle or '-'}")
