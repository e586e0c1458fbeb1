"""
Configuration module for fzgrep.

This module defines the SearchConfig class, the single object that describes
one search run: what to search for, where to look and how candidates are
matched. Presentation settings (color, markers, line numbers) live with the
presenter and are resolved by the CLI, so the pipeline stays a pure function
of its inputs.

Classes:
    ContextSize: Number of context lines kept around a content match
    SearchConfig: Main configuration class with all search parameters

Example:
    Searching a tree for Rust sources only:
        >>> from fzgrep.core.config import SearchConfig
        >>>
        >>> config = SearchConfig(
        ...     query="fzg",
        ...     paths=["src"],
        ...     include=["*.rs"],
        ...     limit=10,
        ... )
        >>> config.validate()
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field

from ..utils.error_handling import ConfigurationError
from .types import CaseSensitivity, SearchMode

STDIN_TARGET = "-"


@dataclass(frozen=True, slots=True)
class ContextSize:
    before: int = 0
    after: int = 0

    @classmethod
    def symmetric(cls, lines: int) -> ContextSize:
        return cls(before=lines, after=lines)

    @property
    def enabled(self) -> bool:
        return self.before > 0 or self.after > 0


@dataclass(slots=True)
class SearchConfig:
    query: str = ""

    # Scope
    paths: list[str] = field(default_factory=list)  # empty = standard input
    recursive: bool = False
    include: list[str] | None = None  # None = every walked file
    exclude: list[str] | None = None  # None = use defaults
    max_depth: int | None = None  # None = unlimited; 1 = direct children only
    follow_symlinks: bool = False

    # Matching
    mode: SearchMode = SearchMode.CONTENT
    case: CaseSensitivity = CaseSensitivity.INSENSITIVE
    invert: bool = False
    limit: int | None = None
    context: ContextSize = field(default_factory=ContextSize)

    # Reading
    encoding: str = "utf-8"
    binary_probe_bytes: int = 8192

    def validate(self) -> None:
        """Raise ConfigurationError for settings that cannot produce a valid run."""
        if "\n" in self.query or "\r" in self.query:
            raise ConfigurationError(
                "Query must not contain line breaks", context={"query": self.query}
            )
        if self.limit is not None and self.limit < 0:
            raise ConfigurationError(f"Result limit must not be negative: {self.limit}")
        if self.max_depth is not None and self.max_depth < 1:
            raise ConfigurationError(f"Maximum depth must be at least 1: {self.max_depth}")
        if self.context.before < 0 or self.context.after < 0:
            raise ConfigurationError("Context size must not be negative")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding: {self.encoding}") from e

    def get_targets(self) -> list[str]:
        """Resolve the effective targets; ``-`` stands for standard input."""
        if self.paths:
            return list(self.paths)
        if self.recursive or self.mode == SearchMode.FILENAMES:
            return ["."]
        return [STDIN_TARGET]

    def get_include_patterns(self) -> list[str]:
        if self.include is not None:
            return self.include
        return []

    def get_exclude_patterns(self) -> list[str]:
        """Get exclude patterns, using defaults if not specified."""
        if self.exclude is not None:
            return self.exclude

        return [
            ".git/",
            ".hg/",
            ".svn/",
            "__pycache__/",
            ".venv/",
            "node_modules/",
        ]

    @property
    def uses_stdin(self) -> bool:
        return STDIN_TARGET in self.get_targets()
