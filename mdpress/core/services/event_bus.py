"""
Reload bus — in-process fan-out of document events to preview tabs.

The watcher thread publishes here after every rebuild; each open
preview tab holds one subscription through ``GET /api/events``.

Events are plain dicts so they serialize straight onto the SSE wire::

    {"v": 1, "ts": 1739648400.1, "seq": 12, "type": "doc:reload",
     "key": "notes.html", "data": {"title": "Notes", "chars": 5120}}

Broadcast types (kept for replay):
    doc:reload    rebuild succeeded, the page should refresh
    doc:error     rebuild failed, the page keeps the last good build

Per-connection types (sent to one subscriber, never replayed):
    sys:ready     first event of every subscription
    sys:heartbeat keeps idle connections open through proxies

All shared state sits behind one lock; each subscriber drains its own
bounded ``queue.Queue``.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections import deque
from typing import Any, Iterator

logger = logging.getLogger(__name__)

EVENT_VERSION = 1


class EventBus:
    """Broadcast document events with a bounded replay history.

    Parameters
    ----------
    buffer_size : int
        How many broadcast events a reconnecting tab can catch up on.
    subscriber_queue_size : int
        Pending events allowed per subscriber before it is considered
        gone and dropped.
    """

    def __init__(self, *, buffer_size: int = 100, subscriber_queue_size: int = 50) -> None:
        self._lock = threading.Lock()
        self._seq = 0
        self._history: deque[dict] = deque(maxlen=buffer_size)
        self._queues: list[queue.Queue[dict]] = []
        self._queue_size = subscriber_queue_size
        self._started = time.strftime("%Y-%m-%dT%H:%M:%S")

    @property
    def instance_id(self) -> str:
        """Boot timestamp; lets a tab notice the server was restarted."""
        return self._started

    @property
    def seq(self) -> int:
        with self._lock:
            return self._seq

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._queues)

    def _stamp(self, event_type: str, key: str, data: dict[str, Any] | None, extra: dict) -> dict:
        # caller holds the lock
        self._seq += 1
        return {
            "v": EVENT_VERSION,
            "ts": time.time(),
            "seq": self._seq,
            "type": event_type,
            "key": key,
            "data": data or {},
            **extra,
        }

    def publish(
        self,
        event_type: str,
        *,
        key: str = "",
        data: dict[str, Any] | None = None,
        **extra: Any,
    ) -> dict:
        """Send an event to every subscriber and keep it for replay.

        Keyword arguments beyond ``key`` and ``data`` (``error``,
        ``duration_s``) are added as top-level fields.
        """
        with self._lock:
            event = self._stamp(event_type, key, data, extra)
            self._history.append(event)

            stalled = []
            for q in self._queues:
                try:
                    q.put_nowait(event)
                except queue.Full:
                    stalled.append(q)
            for q in stalled:
                self._queues.remove(q)
            listeners = len(self._queues)

        if stalled:
            logger.info("Dropped %d stalled preview connection(s)", len(stalled))
        logger.debug("%s %s -> %d listener(s)", event_type, key or "-", listeners)
        return event

    def history(self, since: int = 0) -> list[dict]:
        """Buffered broadcast events with ``seq`` greater than ``since``."""
        with self._lock:
            return [event for event in self._history if event["seq"] > since]

    def subscribe(self, *, since: int = 0, heartbeat_interval: float = 30.0) -> Iterator[dict]:
        """Stream events for one connection until the consumer closes it.

        Yields ``sys:ready`` first, then (when ``since > 0``) the
        buffered events the client missed, then live events.  After
        ``heartbeat_interval`` idle seconds a ``sys:heartbeat`` is
        yielded to this subscriber only.
        """
        q: queue.Queue[dict] = queue.Queue(maxsize=self._queue_size)

        with self._lock:
            ready = self._stamp("sys:ready", "", {"instance_id": self._started}, {})
            if since > 0:
                missed = [event for event in self._history if event["seq"] > since]
                # a client further behind than the queue only needs the newest
                for event in missed[-self._queue_size:]:
                    q.put_nowait(event)
            self._queues.append(q)

        logger.info("Preview connected (since=%d)", since)
        try:
            yield ready
            while True:
                try:
                    yield q.get(timeout=heartbeat_interval)
                except queue.Empty:
                    with self._lock:
                        beat = self._stamp("sys:heartbeat", "", None, {})
                    yield beat
        finally:
            with self._lock:
                if q in self._queues:
                    self._queues.remove(q)
            logger.info("Preview disconnected")


bus = EventBus()
"""Process-wide bus shared by the watcher and the SSE route."""
