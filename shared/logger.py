"""
Keyspace Structured Logger
===========================

Provides :class:`KeyspaceLogger`, a small facade over :mod:`logging` that
writes colour-coded Rich output to stderr and, optionally, plain-text or
JSON-lines records to a rotating log file.

Passphrases must never be passed to the logger; log their length instead.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_ROOT_LOGGER_NAME = "keyspace"
_MAX_LOG_BYTES = 5 * 1024 * 1024
_LOG_BACKUPS = 3
_PLAIN_FORMAT = "%(asctime)s %(levelname)-8s [%(component)s] %(message)s"

_STDERR = Console(
    theme=Theme(
        {
            "log.level.debug": "dim cyan",
            "log.level.info": "bold bright_blue",
            "log.level.warning": "bold yellow",
        }
    ),
    stderr=True,
)


class _JSONLinesFormatter(logging.Formatter):
    """One JSON object per record, carrying the component, operation and
    any keyword fields passed to the log call (under ``extra``)."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": getattr(record, "component", None),
            "message": record.getMessage(),
        }
        operation = getattr(record, "operation", None)
        if operation:
            entry["operation"] = operation
        fields = getattr(record, "fields", None)
        if fields:
            entry["extra"] = fields
        return json.dumps(entry, ensure_ascii=False, default=str)


def _file_handler(path: Path, json_logs: bool) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    if json_logs:
        handler.setFormatter(_JSONLinesFormatter())
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    return handler


class KeyspaceLogger:
    """Logger bound to one Keyspace component (``keyspace.<component>``).

    Keyword arguments given to a log call are attached to the record as
    structured fields; they only show up in JSON log files::

        log = KeyspaceLogger("engine", log_file="keyspace.log", json_logs=True)
        with log.operation("batch"):
            log.info("Analysed %d passphrases", count, workers=4)

    Creating a second logger for the same component replaces the first
    one's handlers.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._operation: str | None = None

        self._logger = logging.getLogger(f"{_ROOT_LOGGER_NAME}.{component}")
        self._logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        self._logger.propagate = False
        self._logger.handlers.clear()

        if console_output:
            self._logger.addHandler(
                RichHandler(console=_STDERR, show_path=False, markup=False)
            )
        if log_file is not None:
            self._logger.addHandler(_file_handler(Path(log_file), json_logs))
        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

    @contextmanager
    def operation(self, name: str) -> Iterator[KeyspaceLogger]:
        """Tag records logged inside the block with *name*."""
        previous, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = previous

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log how long the block took, at INFO."""
        start = time.perf_counter()
        self.debug("Started: %s", label)
        try:
            yield
        finally:
            self.info("Completed: %s (%.3f sec)", label, time.perf_counter() - start)

    def _log(self, level: int, msg: str, args: tuple[Any, ...], fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        context = {
            "component": self._component,
            "operation": self._operation,
            "fields": fields,
        }
        self._logger.log(level, msg, *args, extra=context)

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, args, fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, msg, args, fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.WARNING, msg, args, fields)
