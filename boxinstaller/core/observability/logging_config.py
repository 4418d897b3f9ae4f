"""
Logging setup for the boxinstaller CLI.

``main.cli`` calls ``setup_logging`` once per invocation; modules only do
``logger = logging.getLogger(__name__)``.  User-facing progress is printed
by the CLI, so the console log stays quiet (WARNING) unless asked:

    --debug  >  --verbose  >  --quiet  >  BOXINSTALLER_LOG_LEVEL  >  WARNING

A log file (BOXINSTALLER_LOG_FILE) always gets the detailed format and
may use its own level (BOXINSTALLER_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import sys

_DETAILED = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"

# (upper bound, format, datefmt) — first row whose bound covers the level wins
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(name)s: %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
]


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """(Re)configure the root logger.

    Existing root handlers are replaced, so repeated calls (one per CLI
    invocation in tests) never stack output.
    """
    console_level = _parse_level(level)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.addHandler(_console_handler(console_level))

    root_level = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root.addHandler(_file_handler(log_file, file_level))
        root_level = min(root_level, file_level)
    root.setLevel(root_level)

    logging.raiseExceptions = False


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next(
        (f, d) for bound, f, d in _CONSOLE_FORMATS if level <= bound
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _parse_level(name: str | None) -> int:
    """Level name to number; unknown or empty names mean WARNING."""
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else logging.WARNING
