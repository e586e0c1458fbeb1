"""
Core functionality for fzgrep.

This module contains the pieces every run is built from:
- FuzzyGrep (core.api): the engine that drives one search run
- SearchConfig: configuration for a run
- Core data types (candidates, matches, results)
"""

from .config import ContextSize, SearchConfig
from .types import (
    Candidate,
    CaseSensitivity,
    ColorChoice,
    FileOrigin,
    Match,
    MatchContext,
    OutputFormat,
    RunState,
    SearchMode,
    SearchResult,
    SearchStats,
    StreamOrigin,
)

__all__ = [
    "SearchConfig",
    "ContextSize",
    "Candidate",
    "CaseSensitivity",
    "ColorChoice",
    "FileOrigin",
    "Match",
    "MatchContext",
    "OutputFormat",
    "RunState",
    "SearchMode",
    "SearchResult",
    "SearchStats",
    "StreamOrigin",
]
