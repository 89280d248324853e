"""
Live-preview server — Flask app factory.

Serves one built HTML document plus its sibling assets, and pushes
``doc:reload`` events to open tabs over SSE.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask

logger = logging.getLogger(__name__)


def create_app(output_path: Path) -> Flask:
    """Create the preview application.

    Args:
        output_path: The HTML file the watcher keeps rebuilding.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__, static_folder=None)

    app.config["OUTPUT_PATH"] = str(output_path.resolve())

    from mdpress.ui.web.routes_events import events_bp
    from mdpress.ui.web.routes_preview import preview_bp

    app.register_blueprint(events_bp, url_prefix="/api")
    app.register_blueprint(preview_bp)

    logger.info("Preview app created (output=%s)", output_path)
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 3000,
    debug: bool = False,
) -> None:
    """Run the Flask development server (threaded, for SSE)."""
    logger.info("Starting preview server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)
