"""
Command-line interface implementation.

This module provides the ``fzgrep`` command:
- Argument parsing and validation
- Color and color-override handling
- Writing ranked results and diagnostics
"""

from .main import cli, main

__all__ = [
    "cli",
    "main",
]
