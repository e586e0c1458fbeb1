"""
Error handling and reporting for fzgrep.

fzgrep distinguishes two kinds of failures:

    Fatal errors abort a run before any output is produced: an invalid query,
    an invalid glob pattern or a root target that does not exist. They are
    raised as ``ConfigurationError`` or ``TargetNotFoundError`` and the CLI
    exits with a non-zero status.

    Per-item errors affect a single input (a file that cannot be read, is
    binary or is not valid text). The item is skipped, the error is recorded
    in an ``ErrorCollector`` and a diagnostic naming the path is logged; the
    run carries on.

A query that matches nothing is not an error at all.

Example:
    >>> from fzgrep.utils.error_handling import ErrorCollector, handle_file_error
    >>> from pathlib import Path
    >>>
    >>> collector = ErrorCollector()
    >>> try:
    ...     Path("missing.txt").open()
    ... except OSError as e:
    ...     handle_file_error(Path("missing.txt"), "read", e, collector)
    >>> collector.get_summary()["total_errors"]
    1
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCategory(str, Enum):
    """What went wrong, used to group skipped inputs in reports."""

    FILE_ACCESS = "file_access"
    PERMISSION = "permission"
    ENCODING = "encoding"
    BINARY = "binary"
    CONFIGURATION = "configuration"
    TARGET = "target"
    SCORING = "scoring"
    UNKNOWN = "unknown"


class SearchError(Exception):
    """
    Base exception for fzgrep errors.

    Subclasses fix ``category`` and whether the error is fatal; instances
    carry the message, the offending path (if any) and free-form context.
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    fatal: bool = False

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.file_path = file_path
        self.context: dict[str, Any] = dict(context or {})

    @property
    def is_fatal(self) -> bool:
        return self.fatal

    def describe(self) -> str:
        if self.file_path is None:
            return self.message
        return f"{self.file_path}: {self.message}"


class FileAccessError(SearchError):
    """A single input could not be opened or read."""

    category = ErrorCategory.FILE_ACCESS


class AccessDeniedError(FileAccessError):
    """The operating system refused access to a single input."""

    category = ErrorCategory.PERMISSION


class EncodingError(SearchError):
    """File content is not valid text in the configured encoding."""

    category = ErrorCategory.ENCODING

    def __init__(self, message: str, file_path: Path, encoding: str = "unknown") -> None:
        super().__init__(message, file_path, context={"encoding": encoding})

    @property
    def encoding(self) -> str:
        return self.context["encoding"]


class BinaryFileError(SearchError):
    """File content looks binary and is not searched."""

    category = ErrorCategory.BINARY


class ConfigurationError(SearchError):
    """Settings that cannot produce a valid run."""

    category = ErrorCategory.CONFIGURATION
    fatal = True


class TargetNotFoundError(SearchError):
    """A root target does not exist or cannot be accessed."""

    category = ErrorCategory.TARGET
    fatal = True


class ScoringError(SearchError):
    """The scoring function returned an inconsistent result."""

    category = ErrorCategory.SCORING
    fatal = True


@dataclass(frozen=True)
class SkippedInput:
    """One recorded failure."""

    category: ErrorCategory
    message: str
    file_path: Path | None
    exception_type: str

    def describe(self) -> str:
        if self.file_path is None:
            return self.message
        return f"{self.file_path}: {self.message}"


class ErrorCollector:
    """
    Records the inputs skipped during a run.

    At most ``max_errors`` entries are kept, but every error is counted so
    the summary stays accurate for very noisy runs.
    """

    def __init__(self, max_errors: int = 100) -> None:
        self.max_errors = max_errors
        self.errors: list[SkippedInput] = []
        self.counts: Counter[ErrorCategory] = Counter()

    def add_error(self, error: SearchError) -> None:
        self.counts[error.category] += 1
        if len(self.errors) < self.max_errors:
            self.errors.append(
                SkippedInput(
                    category=error.category,
                    message=error.message,
                    file_path=error.file_path,
                    exception_type=type(error).__name__,
                )
            )

    def get_errors_by_category(self, category: ErrorCategory) -> list[SkippedInput]:
        return [e for e in self.errors if e.category == category]

    def get_summary(self) -> dict[str, Any]:
        return {
            "total_errors": sum(self.counts.values()),
            "by_category": {cat.value: n for cat, n in self.counts.items()},
            "dropped": sum(self.counts.values()) - len(self.errors),
        }

    def clear(self) -> None:
        self.errors.clear()
        self.counts.clear()


def classify_error(file_path: Path, operation: str, exception: Exception) -> SearchError:
    """Wrap a low-level exception raised while handling ``file_path``."""
    if isinstance(exception, SearchError):
        return exception
    if isinstance(exception, PermissionError):
        return AccessDeniedError(f"Permission denied during {operation}", file_path)
    if isinstance(exception, UnicodeDecodeError):
        return EncodingError(
            f"Not valid {exception.encoding} text (byte offset {exception.start})",
            file_path,
            encoding=exception.encoding,
        )
    if isinstance(exception, OSError):
        reason = exception.strerror or str(exception)
        return FileAccessError(f"Cannot {operation}: {reason}", file_path)
    return SearchError(f"Unexpected error during {operation}: {exception}", file_path)


def handle_file_error(
    file_path: Path,
    operation: str,
    exception: Exception,
    error_collector: ErrorCollector | None = None,
    logger: Any | None = None,
) -> SearchError:
    """
    Classify a per-item failure, record it and log a diagnostic.

    Args:
        file_path: Path to the input that caused the error
        operation: Operation being performed (e.g. "open", "read", "list")
        exception: The exception that occurred
        error_collector: Optional error collector to add the error to
        logger: Optional ``SearchLogger`` to report the diagnostic through

    Returns:
        The classified ``SearchError``
    """
    error = classify_error(file_path, operation, exception)

    if error_collector is not None:
        error_collector.add_error(error)

    if logger is not None:
        logger.log_file_error(str(file_path), error.message, operation=operation)

    return error


def create_error_report(error_collector: ErrorCollector) -> str:
    """Human-readable report of skipped inputs, grouped by category."""
    summary = error_collector.get_summary()
    if not summary["total_errors"]:
        return "No inputs were skipped."

    lines = [f"Skipped inputs: {summary['total_errors']}"]
    for category, count in sorted(summary["by_category"].items()):
        lines.append(f"  {category}: {count}")
    for error in error_collector.errors:
        lines.append(f"  - {error.describe()}")
    if summary["dropped"]:
        lines.append(f"  ... and {summary['dropped']} more")
    return "\n".join(lines)
