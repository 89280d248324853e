"""
Live-reload event stream.

``GET /api/events`` relays the reload bus to the preview page as
Server-Sent Events, one frame per event::

    event: doc:reload
    id: 12
    data: {"v": 1, "seq": 12, "type": "doc:reload", "key": "notes.html", ...}

When ``EventSource`` reconnects it sends ``Last-Event-Id``; events the
tab missed are replayed from the bus history.
"""

from __future__ import annotations

import json

from flask import Blueprint, Response, request

from mdpress.core.services.event_bus import bus

events_bp = Blueprint("events", __name__)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",  # nginx must not buffer the stream
    "Connection": "keep-alive",
}


def sse_frame(event: dict) -> str:
    """Format one bus event as an SSE frame."""
    payload = json.dumps(event, ensure_ascii=False, default=str)
    return f"event: {event['type']}\nid: {event['seq']}\ndata: {payload}\n\n"


def _resume_point() -> int:
    """Highest of ``?since=`` and a numeric ``Last-Event-Id`` header."""
    since = request.args.get("since", 0, type=int)
    header = request.headers.get("Last-Event-Id", "")
    if header.isdigit():
        since = max(since, int(header))
    return since


@events_bp.route("/events")
def events():  # type: ignore[no-untyped-def]
    """Stream reload events until the tab goes away."""
    since = _resume_point()
    stream = (sse_frame(event) for event in bus.subscribe(since=since))
    return Response(stream, mimetype="text/event-stream", headers=_STREAM_HEADERS)
