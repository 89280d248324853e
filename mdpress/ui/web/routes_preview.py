"""
Preview page routes.

``GET /`` serves the built HTML with the live-reload client injected;
any other path is served from the output's directory so relative image
and asset links in the document keep working.
"""

from __future__ import annotations

import re
from pathlib import Path

from flask import Blueprint, Response, abort, current_app, send_from_directory

preview_bp = Blueprint("preview", __name__)

RELOAD_SCRIPT = """<script>
(function () {
  var source = new EventSource("/api/events");
  source.addEventListener("doc:reload", function () { window.location.reload(); });
  source.addEventListener("doc:error", function (e) {
    console.warn("mdpress: rebuild failed", JSON.parse(e.data).error);
  });
})();
</script>
"""

_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)


def inject_reload_script(html: str) -> str:
    """Insert the live-reload client before ``</body>`` (or append it)."""
    matches = list(_BODY_CLOSE_RE.finditer(html))
    if not matches:
        return html + RELOAD_SCRIPT
    pos = matches[-1].start()
    return html[:pos] + RELOAD_SCRIPT + html[pos:]


def _output_path() -> Path:
    return Path(current_app.config["OUTPUT_PATH"])


@preview_bp.route("/")
def index():  # type: ignore[no-untyped-def]
    """The current build of the document, with live reload."""
    output = _output_path()
    try:
        html = output.read_text(encoding="utf-8")
    except OSError:
        return Response(
            f"{output.name} has not been built yet.",
            status=404,
            mimetype="text/plain",
        )

    return Response(
        inject_reload_script(html),
        mimetype="text/html",
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )


@preview_bp.route("/<path:filename>")
def asset(filename: str):  # type: ignore[no-untyped-def]
    """Files next to the output (images, downloads)."""
    output = _output_path()
    if filename == output.name:
        return index()
    if filename.startswith("api/"):
        abort(404)
    return send_from_directory(output.parent, filename)
