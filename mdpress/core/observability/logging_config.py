"""
Logging setup for the mdpress process.

``mdpress.main`` configures logging once, before a command runs; modules
only ever call ``logging.getLogger(__name__)``.

Console level, highest precedence first:
    --debug, --verbose, --quiet, MDPRESS_LOG_LEVEL, WARNING

MDPRESS_LOG_FILE adds a file log, at MDPRESS_LOG_FILE_LEVEL if set.
"""

from __future__ import annotations

import logging
import sys

# Console layout by level: the CLI prints its own status lines, so
# warnings and errors are shown bare.
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s %(name)s: %(message)s", "%H:%M:%S"),
}
_CONSOLE_BARE = ("%(message)s", None)

_FILE_FORMAT = ("%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s", "%Y-%m-%d %H:%M:%S")

# Flask's dev server logs each request; Python-Markdown logs extension loading.
QUIET_LIBRARIES = ("werkzeug", "MARKDOWN", "urllib3", "asyncio")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install the console (and optional file) handler on the root logger.

    Calling it again replaces the handlers instead of stacking them.

    Args:
        level: Console level name; unknown names mean WARNING.
        log_file: Also log to this file.
        log_file_level: File level name (default: the console level).
        quiet_third_party: Keep ``QUIET_LIBRARIES`` at WARNING unless
            the console is at DEBUG.
    """
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_handler(logging.StreamHandler(sys.stderr), console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, _FILE_FORMAT))

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in QUIET_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A closed stream (e.g. piped into head) must not print tracebacks.
    logging.raiseExceptions = False


def _handler(
    handler: logging.Handler,
    level: int,
    layout: tuple[str, str | None] | None = None,
) -> logging.Handler:
    fmt, datefmt = layout or _CONSOLE_FORMATS.get(level, _CONSOLE_BARE)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(name: str | None) -> int:
    """``"info"`` → ``logging.INFO``; anything unrecognised → WARNING."""
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else logging.WARNING
