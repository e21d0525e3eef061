"""Logging for the ``loadprobe`` namespace.

Log calls may attach context with ``extra``, e.g.
``logger.debug("Worker finished", extra={"worker_id": 3})``. Text output
appends such fields as ``key=value`` pairs, JSON output adds them as keys.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import TextIO

ROOT_LOGGER = "loadprobe"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class _TextFormatter(logging.Formatter):
    """``2024-01-01 12:00:00 [DEBUG   ] loadprobe.engine.worker: msg worker_id=3``."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _context_fields(record)
        if not fields:
            return line
        head, sep, tail = line.partition("\n")
        pairs = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return f"{head} {pairs}{sep}{tail}"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Fixed keys are ``timestamp``, ``level``, ``logger`` and ``message``, plus
    ``exception`` when one is attached. Context fields follow; values that JSON
    cannot encode are written as their ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        for key, value in _context_fields(record).items():
            entry.setdefault(key, value)
        return json.dumps(entry, default=str)


class _LoadProbeHandler(logging.StreamHandler):
    """Marks the handler installed by ``setup_logging``."""


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h, _LoadProbeHandler)]


def setup_logging(
    level: int = logging.INFO,
    *,
    json_format: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install the ``loadprobe`` handler, or retune the one already there.

    A second call keeps the existing handler and its stream and applies the
    new level. The output format changes only when ``json_format`` is given,
    so ``LoadTestRunner.run()`` keeps the JSON output the CLI configured.
    Handlers added by the host application are left alone.

    Args:
        level: Logging level, e.g. ``logging.DEBUG``.
        json_format: Emit JSON lines instead of human-readable text. ``None``
            keeps the current format, which is text for a new handler.
        stream: Destination for a newly created handler. Defaults to
            ``sys.stderr`` so log lines never mix with a report on stdout.

    Returns:
        The ``loadprobe`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    handlers = _own_handlers(logger)
    if not handlers:
        handler = _LoadProbeHandler(stream or sys.stderr)
        handler.setFormatter(_TextFormatter())
        logger.addHandler(handler)
        handlers = [handler]

    for handler in handlers:
        handler.setLevel(level)
        if json_format is not None:
            handler.setFormatter(_JsonFormatter() if json_format else _TextFormatter())

    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove the handler installed by ``setup_logging`` and restore defaults."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in _own_handlers(logger):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return ``loadprobe.<name>``, e.g. ``get_logger("engine.worker")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
