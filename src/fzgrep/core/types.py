"""
Core type definitions for fzgrep.

This module contains the data types shared by every stage of the
matching-and-ranking pipeline: where a candidate comes from, the candidate
itself, the match produced for it and the result handed to the presenter.

Key Types:
    FileOrigin / StreamOrigin: Location of a candidate
    Candidate: One unit of text eligible for matching
    Match: A scored candidate with the indices of its matched characters
    SearchResult: Ranked matches plus run statistics
    RunState: States of a single search run

Example:
    Building a match by hand:
        >>> from pathlib import Path
        >>> from fzgrep.core.types import Candidate, FileOrigin, Match
        >>>
        >>> cand = Candidate(FileOrigin(Path("src/main.rs"), 3), "fn main() {")
        >>> m = Match(cand, score=17, matched_positions=(0, 1))
        >>> m.origin.display_name
        'src/main.rs'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

STDIN_DISPLAY_NAME = "(standard input)"


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class SearchMode(str, Enum):
    """What a candidate is: a line of content or a file path."""

    CONTENT = "content"
    FILENAMES = "filenames"


class CaseSensitivity(str, Enum):
    INSENSITIVE = "insensitive"
    SENSITIVE = "sensitive"
    SMART = "smart"  # sensitive only when the query has an upper-case character


class ColorChoice(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class RunState(str, Enum):
    """Linear states of one search run; FAILED is only reachable from TRAVERSING."""

    IDLE = "idle"
    TRAVERSING = "traversing"
    SCORING = "scoring"
    RANKING = "ranking"
    PRESENTING = "presenting"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FileOrigin:
    """A line of a file, or the file itself when ``line_number`` is None."""

    path: Path
    line_number: int | None = None

    @property
    def display_name(self) -> str:
        return str(self.path)

    def sort_key(self) -> tuple[str, int]:
        return (self.path.as_posix(), self.line_number or 0)


@dataclass(frozen=True, slots=True)
class StreamOrigin:
    """A line read from standard input."""

    line_number: int
    name: str = STDIN_DISPLAY_NAME

    @property
    def display_name(self) -> str:
        return self.name

    def sort_key(self) -> tuple[str, int]:
        return (self.name, self.line_number)


Origin = Union[FileOrigin, StreamOrigin]


@dataclass(frozen=True, slots=True)
class Candidate:
    origin: Origin
    text: str


@dataclass(frozen=True, slots=True)
class MatchContext:
    """Lines surrounding a matching line within the same source."""

    before: tuple[str, ...] = ()
    after: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Match:
    """
    A candidate that satisfied the query.

    ``matched_positions`` are character indices into ``candidate.text``; they
    are checked at construction to be strictly increasing and in range.
    """

    candidate: Candidate
    score: int
    matched_positions: tuple[int, ...] = ()
    context: MatchContext = field(default_factory=MatchContext)

    def __post_init__(self) -> None:
        length = len(self.candidate.text)
        prev = -1
        for pos in self.matched_positions:
            if pos <= prev:
                raise ValueError(
                    f"matched positions must be strictly increasing: {self.matched_positions!r}"
                )
            if pos >= length:
                raise ValueError(
                    f"matched position {pos} is out of range for text of length {length}"
                )
            prev = pos

    @property
    def origin(self) -> Origin:
        return self.candidate.origin

    @property
    def text(self) -> str:
        return self.candidate.text


@dataclass(slots=True)
class SearchStats:
    files_scanned: int = 0
    files_skipped: int = 0
    candidates: int = 0
    matches: int = 0
    elapsed_ms: float = 0.0


@dataclass(slots=True)
class SearchResult:
    matches: list[Match] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)
