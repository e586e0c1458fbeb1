"""
Utility functions and helper modules.

This module contains the supporting pieces used throughout fzgrep:
- Output formatting and emphasis
- Error handling and reporting
- Logging configuration
- File discovery and binary detection
"""

from .error_handling import (
    AccessDeniedError,
    BinaryFileError,
    ConfigurationError,
    EncodingError,
    ErrorCollector,
    FileAccessError,
    SearchError,
    TargetNotFoundError,
    create_error_report,
    handle_file_error,
)
from .formatter import format_result, to_json_lines
from .logging_config import configure_logging, disable_logging, enable_debug_logging, get_logger

__all__ = [
    # Error handling
    "AccessDeniedError",
    "BinaryFileError",
    "ConfigurationError",
    "EncodingError",
    "ErrorCollector",
    "FileAccessError",
    "SearchError",
    "TargetNotFoundError",
    "create_error_report",
    "handle_file_error",
    # Formatting
    "format_result",
    "to_json_lines",
    # Logging
    "configure_logging",
    "disable_logging",
    "enable_debug_logging",
    "get_logger",
]
