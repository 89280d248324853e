"""
Source watcher — mtime polling of one Markdown file.

A daemon thread stats the source every ``interval`` seconds and calls
``on_change(source)`` once per modification.  Polling keeps the watcher
dependency-free and copes with editors that save by replace-and-rename:
a file that briefly disappears is simply skipped for that cycle.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 0.5
"""Seconds between polls."""

OnChange = Callable[[Path], None]


def start_watcher(
    source: Path,
    on_change: OnChange,
    *,
    interval: float = POLL_INTERVAL_S,
    stop: threading.Event | None = None,
) -> threading.Thread:
    """Start a daemon thread that watches ``source`` for changes.

    Args:
        source: The file to watch.
        on_change: Called with ``source`` after each detected change.
        interval: Poll interval in seconds.
        stop: Optional event; setting it ends the loop.

    Returns:
        The started daemon thread.
    """
    t = threading.Thread(
        target=_poll_loop,
        args=(source, on_change, interval, stop or threading.Event()),
        daemon=True,
        name="source-watcher",
    )
    t.start()
    logger.info("Watching %s (poll every %.1fs)", source, interval)
    return t


def _poll_loop(
    source: Path,
    on_change: OnChange,
    interval: float,
    stop: threading.Event,
) -> None:
    last_mtime = _mtime(source)
    while not stop.wait(interval):
        last_mtime = check_once(source, last_mtime, on_change)


def check_once(source: Path, last_mtime: float, on_change: OnChange) -> float:
    """Run one poll cycle.

    Returns:
        The mtime to compare against next cycle.  Unchanged when the
        file is missing or was not modified.
    """
    current = _mtime(source)
    if current == 0 or current == last_mtime:
        return last_mtime

    logger.info("Change detected: %s", source.name)
    try:
        on_change(source)
    except Exception:
        logger.exception("Change handler failed for %s", source)
    return current


def _mtime(path: Path) -> float:
    """Modification time, or 0 when the file cannot be stat'ed."""
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0
