"""
CLI command for live preview — ``mdpress watch``.

Builds once, watches the source for changes, and serves the result with
a reload hook so open browser tabs refresh after every rebuild.
"""

from __future__ import annotations

import threading
from functools import partial
from pathlib import Path

import click

from mdpress.ui.cli.common import apply_overrides, fail, load_config_or_exit


@click.command("watch")
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="HTML file to keep rebuilt (default: next to SOURCE).")
@click.option("--host", default=None, help="Bind address.")
@click.option("--port", "-p", type=int, default=None, help="Port number.")
@click.option("--open/--no-open", "open_browser", default=None,
              help="Open the preview in a browser.")
@click.option("--enhance/--plain", default=None,
              help="Apply callout/badge/section enhancement.")
@click.pass_context
def watch(
    ctx: click.Context,
    source: Path,
    output: Path | None,
    host: str | None,
    port: int | None,
    open_browser: bool | None,
    enhance: bool | None,
) -> None:
    """Rebuild SOURCE on every save and live-reload the browser."""
    from mdpress.core.services.source_io import default_output
    from mdpress.core.services.source_watcher import start_watcher
    from mdpress.core.use_cases.build_html import build_html, rebuild_and_notify
    from mdpress.ui.web.server import create_app, run_server

    config = apply_overrides(
        load_config_or_exit(ctx),
        "preview",
        host=host,
        port=port,
        open_browser=open_browser,
        enhance=enhance,
    )
    settings = config.preview
    output = output or default_output(source, ".html")

    result = build_html(source, output, config)
    if not result.ok:
        fail(result.error or "Initial build failed")

    url = f"http://{settings.host}:{settings.port}/"

    click.echo()
    click.secho("👀 mdpress — live preview", bold=True)
    click.echo(f"   Source:  {source}")
    click.echo(f"   Output:  {output}")
    click.echo(f"   Preview: {url}")
    click.echo("   Press Ctrl+C to stop.")
    click.echo()

    start_watcher(
        source,
        partial(rebuild_and_notify, output=output, config=config),
        interval=settings.poll_interval,
    )

    if settings.open_browser:
        # Give the server a moment to bind before the browser asks for the page.
        threading.Timer(1.0, click.launch, args=(url,)).start()

    app = create_app(output)
    run_server(app, host=settings.host, port=settings.port, debug=ctx.obj.get("debug", False))
