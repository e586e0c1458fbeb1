"""
fzgrep: fuzzy grep for files, directory trees and standard input.

fzgrep reads candidate lines (or file paths), keeps those that contain the
query as a fuzzy subsequence, ranks them best first and prints them with the
matched characters emphasized.

Key Features:
    - **Fuzzy Matching**: Subsequence scoring that rewards consecutive runs,
      word starts, separators and camelCase humps
    - **Deterministic Ranking**: Score first, then path, then line number
    - **Directory Walking**: gitwildmatch include/exclude globs, depth limit
    - **Context Lines**: Leading and trailing context per match
    - **Output Formats**: Plain or ANSI-emphasized text, JSON lines
    - **Error Handling**: Unreadable and binary inputs are skipped with a diagnostic

Main Classes:
    FuzzyGrep: Engine that drives one search run
    SearchConfig: Configuration of a run
    SearchResult: Ranked matches plus run statistics

Example Usage:
    API usage:
        >>> from fzgrep import FuzzyGrep, SearchConfig
        >>> engine = FuzzyGrep(SearchConfig(query="fzg", paths=["src"]))
        >>> result = engine.search()
        >>> for match in result.matches:
        ...     print(match.origin.display_name, match.score)

    CLI usage:
        $ fzgrep -r -n fzg
        $ git ls-files | fzgrep --top 5 mainpy
"""

from .core.api import FuzzyGrep
from .core.config import ContextSize, SearchConfig
from .core.types import (
    Candidate,
    CaseSensitivity,
    FileOrigin,
    Match,
    MatchContext,
    OutputFormat,
    SearchMode,
    SearchResult,
    SearchStats,
    StreamOrigin,
)
from .search.fuzzy import fuzzy_score
from .utils.error_handling import ConfigurationError, SearchError, TargetNotFoundError
from .utils.logging_config import configure_logging, disable_logging, get_logger

# Package metadata
__version__ = "0.1.0"
__description__ = "Fuzzy grep for files, directory trees and standard input"

# Public API
__all__ = [
    # Main classes
    "FuzzyGrep",
    "SearchConfig",
    "ContextSize",
    # Data types
    "Candidate",
    "CaseSensitivity",
    "FileOrigin",
    "Match",
    "MatchContext",
    "OutputFormat",
    "SearchMode",
    "SearchResult",
    "SearchStats",
    "StreamOrigin",
    # Scoring
    "fuzzy_score",
    # Errors
    "ConfigurationError",
    "SearchError",
    "TargetNotFoundError",
    # Logging
    "configure_logging",
    "disable_logging",
    "get_logger",
]
