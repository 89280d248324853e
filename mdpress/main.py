"""
mdpress — CLI entrypoint.

Usage:
    mdpress --help
    mdpress build notes.md
    mdpress pdf notes.md --date 2026-01-12
    mdpress watch notes.md --port 3000
    mdpress config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from mdpress import __version__
from mdpress.core.observability.logging_config import setup_logging


def _console_level(debug: bool, verbose: bool, quiet: bool) -> str:
    """Flags win over MDPRESS_LOG_LEVEL; the most verbose flag wins."""
    for flag, level in ((debug, "DEBUG"), (verbose, "INFO"), (quiet, "ERROR")):
        if flag:
            return level
    return os.environ.get("MDPRESS_LOG_LEVEL", "WARNING")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="mdpress")
@click.option("-v", "--verbose", is_flag=True, help="Log progress (INFO).")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors.")
@click.option("--debug", is_flag=True, help="Log everything, including library output.")
@click.option("-c", "--config", "config_file", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="mdpress.yml to use instead of searching upwards.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool, config_file: Path | None) -> None:
    """mdpress — Markdown to styled HTML and PDF, with live preview."""
    ctx.obj = {
        "config_path": config_file,
        "quiet": quiet,
        "verbose": verbose,
        "debug": debug,
    }
    setup_logging(
        level=_console_level(debug, verbose, quiet),
        log_file=os.environ.get("MDPRESS_LOG_FILE"),
        log_file_level=os.environ.get("MDPRESS_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


@cli.group("config")
def config_group() -> None:
    """Inspect mdpress.yml."""


@config_group.command("check")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate mdpress.yml and report problems."""
    from mdpress.core.use_cases.config_check import check_config

    report = check_config(config_path=ctx.obj["config_path"])

    if as_json:
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_report(report)

    if not report.valid:
        sys.exit(1)


def _print_report(report) -> None:  # type: ignore[no-untyped-def]
    if report.valid:
        cfg = report.config
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Source:     {report.config_path or 'built-in defaults'}")
        click.echo(f"   Page:       {cfg.pdf.page_format}, margin {cfg.pdf.margin}")
        click.echo(f"   Extensions: {', '.join(cfg.markdown.extensions) or '-'}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for problem in report.errors:
            click.echo(f"   • {problem}")

    if report.warnings:
        click.secho("⚠️  Warnings:", fg="yellow")
        for note in report.warnings:
            click.echo(f"   • {note}")


# ── Commands in mdpress/ui/cli/ ─────────────────────────────────────

from mdpress.ui.cli.build import build, title  # noqa: E402
from mdpress.ui.cli.pdf import pdf  # noqa: E402
from mdpress.ui.cli.watch import watch  # noqa: E402

for _command in (build, title, pdf, watch):
    cli.add_command(_command)


if __name__ == "__main__":
    cli()
