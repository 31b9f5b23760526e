"""Diagnostic logging for wadeploy.

Log records go to stderr so that stdout only carries the status line or
the structured report.
"""

import logging
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

PACKAGE = "wadeploy"
PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.name)

    @classmethod
    def for_flags(cls, verbose: int, quiet: bool, configured: "LogLevel") -> "LogLevel":
        """-vv is debug, -v is info, -q is error, otherwise the configured level."""
        if verbose >= 2:
            return cls.DEBUG
        if verbose == 1:
            return cls.INFO
        if quiet:
            return cls.ERROR
        return configured


def _stderr_handler(rich_output: bool) -> logging.Handler:
    if rich_output:
        return RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))
    return handler


def setup_logging(level: LogLevel = LogLevel.WARNING, rich_output: bool = True) -> logging.Logger:
    """Replace the root handlers with a single stderr handler at ``level``."""
    root = logging.getLogger()
    root.handlers = [_stderr_handler(rich_output)]
    root.setLevel(level.numeric)
    return logging.getLogger(PACKAGE)


class StructuredLogger:
    """Logger that appends ``key=value`` fields to each message.

    Fields bound with :meth:`bind` are carried on every record; fields whose
    value is None are left out.
    """

    def __init__(self, name: str, **fields: Any):
        if not name.startswith(PACKAGE):
            name = f"{PACKAGE}.{name}"
        self._logger = logging.getLogger(name)
        self._fields = fields

    def bind(self, **fields: Any) -> "StructuredLogger":
        return StructuredLogger(self._logger.name, **{**self._fields, **fields})

    def _log(self, level: int, event: str, fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        merged = {**self._fields, **fields}
        pairs = " ".join(f"{k}={v}" for k, v in merged.items() if v is not None)
        self._logger.log(level, f"{event} [{pairs}]" if pairs else event)

    def debug(self, event: str, **fields: Any) -> None:
        self._log(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log(logging.WARNING, event, fields)
