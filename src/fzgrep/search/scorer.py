"""
Scoring adapter.

The pipeline never calls a scoring algorithm directly. It goes through
``Scorer``, which owns the query and the case policy and hides the concrete
algorithm behind a small callable interface, so any fuzzy matcher with the
``(query, text, case_sensitive) -> match | None`` shape can be plugged in.

The adapter also guards the data model: whatever the algorithm returns, the
positions handed on are strictly increasing and index-valid.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..core.types import CaseSensitivity
from ..utils.error_handling import ScoringError
from .fuzzy import fuzzy_score

# Score given to every candidate when the query is empty, and to inverted matches
MINIMAL_SCORE = 0


class ScoredLike(Protocol):
    score: int
    positions: Sequence[int]


ScoreFunction = Callable[[str, str, bool], Optional[ScoredLike]]


@dataclass(frozen=True, slots=True)
class ScoredText:
    score: int
    positions: tuple[int, ...]


def resolve_case_sensitivity(query: str, case: CaseSensitivity) -> bool:
    if case == CaseSensitivity.SENSITIVE:
        return True
    if case == CaseSensitivity.SMART:
        return any(ch.isupper() for ch in query)
    return False


class Scorer:
    """Binds a query and case policy to a scoring function."""

    def __init__(
        self,
        query: str,
        case: CaseSensitivity = CaseSensitivity.INSENSITIVE,
        score_fn: ScoreFunction = fuzzy_score,
    ) -> None:
        self.query = query
        self.case = case
        self.case_sensitive = resolve_case_sensitivity(query, case)
        self._score_fn = score_fn

    def score(self, text: str) -> ScoredText | None:
        """Score one candidate text; None means no match."""
        if not self.query:
            return ScoredText(score=MINIMAL_SCORE, positions=())

        result = self._score_fn(self.query, text, self.case_sensitive)
        if result is None:
            return None

        positions = tuple(result.positions)
        self._check_positions(text, positions)
        return ScoredText(score=result.score, positions=positions)

    def _check_positions(self, text: str, positions: tuple[int, ...]) -> None:
        prev = -1
        for pos in positions:
            if pos <= prev or pos >= len(text):
                raise ScoringError(
                    f"Scoring function returned invalid positions {positions!r} "
                    f"for a text of length {len(text)}",
                    context={"query": self.query, "text": text},
                )
            prev = pos
