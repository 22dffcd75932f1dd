"""Logging for trackdesk.

One package logger, ``trackdesk``, with a child per component. Output goes
to the file named by ``logging.file`` or ``TRACKDESK_LOG``; without one,
to stderr only when it is a terminal, so the rich panes stay clean when
output is piped.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trackdesk.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_ENV = "TRACKDESK_LOG"
DEFAULT_LEVEL = logging.WARNING

logger = logging.getLogger("trackdesk")

_configured = False

# -v count: 0 errors only .. 4 everything
_VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)


class _LowercaseLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Effective level: ``verbose`` wins over ``level``; unknown names fall back to WARNING."""
    if config is None:
        return DEFAULT_LEVEL
    if config.verbose is not None:
        index = max(0, min(config.verbose, len(_VERBOSITY_LEVELS) - 1))
        return _VERBOSITY_LEVELS[index]
    if config.level:
        level = logging.getLevelName(config.level.upper())
        return level if isinstance(level, int) else DEFAULT_LEVEL
    return DEFAULT_LEVEL


def _log_path(config: LoggingConfig | None) -> str | None:
    path = (config.file if config else None) or os.environ.get(LOG_ENV)
    return os.path.expanduser(path) if path else None


def _attach(handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(
        _LowercaseLevelFormatter("%(asctime)s %(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install handlers once per process; later calls do nothing."""
    global _configured
    if _configured:
        return
    _configured = True

    level = resolve_level(config)
    logger.setLevel(level)

    path = _log_path(config)
    if path:
        try:
            _attach(logging.FileHandler(path, mode="a", encoding="utf-8"), level)
            return
        except OSError as e:
            if sys.stderr.isatty():
                print(f"[trackdesk] cannot open log file {path}: {e}", file=sys.stderr)

    if sys.stderr.isatty():
        _attach(logging.StreamHandler(sys.stderr), level)


def get_logger(name: str | None = None) -> logging.Logger:
    """The package logger, or its child ``trackdesk.<name>``."""
    return logger.getChild(name) if name else logger
