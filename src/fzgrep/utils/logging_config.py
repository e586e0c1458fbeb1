"""
Diagnostics for fzgrep.

Everything fzgrep has to say besides results (skipped inputs, run progress,
state transitions) goes through a ``SearchLogger``. Its console handler
writes to stderr so diagnostics never interleave with results on stdout;
an optional rotating log file receives the same records.

Verbosity maps onto levels: warnings (skipped inputs) are always shown,
``-v`` adds run progress and ``-vv`` adds debug detail.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from enum import Enum
from pathlib import Path
from typing import Any

import orjson


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def number(self) -> int:
        return getattr(logging, self.value)

    @classmethod
    def from_verbosity(cls, verbosity: int) -> LogLevel:
        """Map the number of ``-v`` switches to a level; warnings are always on."""
        if verbosity <= 0:
            return cls.WARNING
        if verbosity == 1:
            return cls.INFO
        return cls.DEBUG


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"
    STRUCTURED = "structured"


# Attributes every LogRecord has; anything else was passed through ``extra``
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": record.created,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_extra_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode()


class StructuredFormatter(logging.Formatter):
    """Human-readable line followed by ``key=value`` pairs for ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{self.formatTime(record, self.datefmt)} [{record.levelname}] "
            f"{record.name}: {record.getMessage()}"
        )
        extras = _extra_fields(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def make_formatter(format_type: LogFormat) -> logging.Formatter:
    if format_type == LogFormat.JSON:
        return JsonFormatter()
    if format_type == LogFormat.STRUCTURED:
        return StructuredFormatter()
    if format_type == LogFormat.DETAILED:
        return logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(module)s:%(lineno)d: %(message)s"
        )
    return logging.Formatter("%(name)s: %(levelname)s: %(message)s")


class SearchLogger:
    """
    Logging front-end used by the engine and the CLI.

    Args:
        name: Name of the underlying ``logging.Logger``
        level: Minimum level that is emitted
        format_type: Record layout for every handler
        log_file: Rotating log file, used when ``enable_file`` is set
        enable_console: Write records to stderr
        enable_file: Write records to ``log_file``
    """

    def __init__(
        self,
        name: str = "fzgrep",
        level: LogLevel = LogLevel.WARNING,
        format_type: LogFormat = LogFormat.SIMPLE,
        log_file: Path | None = None,
        max_file_size: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        enable_console: bool = True,
        enable_file: bool = False,
    ) -> None:
        self.name = name
        self.level = level
        self.format_type = format_type
        self.log_file = log_file

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.number)
        # records never reach the root logger's handlers
        self.logger.propagate = False
        self.logger.handlers.clear()

        handlers: list[logging.Handler] = []
        if enable_console:
            handlers.append(logging.StreamHandler(sys.stderr))
        if enable_file and log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    log_file, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
                )
            )
        for handler in handlers:
            self._attach(handler)
        if not handlers:
            self.logger.addHandler(logging.NullHandler())

    def _attach(self, handler: logging.Handler) -> None:
        handler.setLevel(self.level.number)
        handler.setFormatter(make_formatter(self.format_type))
        self.logger.addHandler(handler)

    def set_level(self, level: LogLevel) -> None:
        self.level = level
        self.logger.setLevel(level.number)
        for handler in self.logger.handlers:
            handler.setLevel(level.number)

    def debug(self, message: str, **extra: Any) -> None:
        self.logger.debug(message, extra=extra)

    def info(self, message: str, **extra: Any) -> None:
        self.logger.info(message, extra=extra)

    def warning(self, message: str, **extra: Any) -> None:
        self.logger.warning(message, extra=extra)

    def error(self, message: str, **extra: Any) -> None:
        self.logger.error(message, extra=extra)

    def log_search_start(self, query: str, paths: list[str], **extra: Any) -> None:
        targets = ", ".join(paths) if paths else "-"
        self.info(
            f"Searching for '{query}' in {targets}",
            operation="search_start",
            query=query,
            paths=paths,
            **extra,
        )

    def log_search_complete(
        self, query: str, results_count: int, elapsed_ms: float, **extra: Any
    ) -> None:
        self.info(
            f"Search completed: query='{query}', results={results_count}, time={elapsed_ms:.2f}ms",
            operation="search_complete",
            query=query,
            results_count=results_count,
            elapsed_ms=elapsed_ms,
            **extra,
        )

    def log_file_error(self, file_path: str, error: str, **extra: Any) -> None:
        """Report a skipped input as ``<path>: <reason> (skipped)``."""
        extra.setdefault("operation", "file_error")
        self.warning(f"{file_path}: {error} (skipped)", file_path=file_path, error=error, **extra)


_global_logger: SearchLogger | None = None


def get_logger() -> SearchLogger:
    """Return the process-wide logger, creating a default one on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = SearchLogger()
    return _global_logger


def configure_logging(
    level: LogLevel = LogLevel.WARNING,
    format_type: LogFormat = LogFormat.SIMPLE,
    log_file: Path | None = None,
    enable_console: bool = True,
    enable_file: bool = False,
    **kwargs: Any,
) -> SearchLogger:
    """Replace the process-wide logger and return it."""
    global _global_logger
    _global_logger = SearchLogger(
        level=level,
        format_type=format_type,
        log_file=log_file,
        enable_console=enable_console,
        enable_file=enable_file,
        **kwargs,
    )
    return _global_logger


def disable_logging() -> None:
    if _global_logger is not None:
        _global_logger.logger.setLevel(logging.CRITICAL + 1)


def enable_debug_logging() -> None:
    if _global_logger is not None:
        _global_logger.set_level(LogLevel.DEBUG)
