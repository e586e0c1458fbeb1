"""
Match pipeline.

Consumes candidates one at a time, asks the scorer about each and keeps the
ones that qualify. Nothing is printed or read here; the only effect is the
accumulated list of matches handed to the ranker.

Context lines are collected on the fly: a bounded window remembers the last
few lines of the current source, and a match that wants trailing context
stays pending until enough following lines of the same source have been seen
(or the source ends). The ``Match`` is only built once its context is
complete, so matches are never modified after creation.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.config import ContextSize
from ..core.types import Candidate, Match, MatchContext, Origin, SearchStats
from .scorer import MINIMAL_SCORE, ScoredText, Scorer


@dataclass(slots=True)
class _PendingMatch:
    candidate: Candidate
    scored: ScoredText
    before: tuple[str, ...]
    remaining: int
    after: list[str] = field(default_factory=list)

    def build(self) -> Match:
        return Match(
            candidate=self.candidate,
            score=self.scored.score,
            matched_positions=self.scored.positions,
            context=MatchContext(before=self.before, after=tuple(self.after)),
        )


def _source_key(origin: Origin) -> str:
    return origin.sort_key()[0]


class MatchPipeline:
    """Scores a stream of candidates and accumulates the matches."""

    def __init__(
        self,
        scorer: Scorer,
        invert: bool = False,
        context: ContextSize | None = None,
        stats: SearchStats | None = None,
    ) -> None:
        self.scorer = scorer
        self.invert = invert
        self.context = context or ContextSize()
        self.stats = stats if stats is not None else SearchStats()

    def select(self, candidate: Candidate) -> ScoredText | None:
        """Apply the scorer and the invert policy to one candidate."""
        scored = self.scorer.score(candidate.text)
        if self.invert:
            return ScoredText(score=MINIMAL_SCORE, positions=()) if scored is None else None
        return scored

    def run(self, candidates: Iterable[Candidate]) -> list[Match]:
        matches: list[Match] = []
        window: deque[str] = deque(maxlen=self.context.before)
        pending: list[_PendingMatch] = []
        current_source: str | None = None

        for candidate in candidates:
            source = _source_key(candidate.origin)
            if source != current_source:
                # Context never crosses source boundaries
                matches.extend(p.build() for p in pending)
                pending = []
                window.clear()
                current_source = source

            self.stats.candidates += 1

            if pending:
                still_pending = []
                for p in pending:
                    p.after.append(candidate.text)
                    p.remaining -= 1
                    if p.remaining == 0:
                        matches.append(p.build())
                    else:
                        still_pending.append(p)
                pending = still_pending

            scored = self.select(candidate)
            if scored is not None:
                before = tuple(window)
                if self.context.after > 0:
                    pending.append(_PendingMatch(candidate, scored, before, self.context.after))
                else:
                    matches.append(
                        Match(
                            candidate=candidate,
                            score=scored.score,
                            matched_positions=scored.positions,
                            context=MatchContext(before=before),
                        )
                    )

            if self.context.before > 0:
                window.append(candidate.text)

        matches.extend(p.build() for p in pending)
        self.stats.matches = len(matches)
        return matches
