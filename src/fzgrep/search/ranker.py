"""
Result ranking.

Matches are ordered by score, best first. Equal scores fall back to the
origin path (lexicographic, POSIX form) and then the line number, so the
order is a total one and output is identical from run to run.

A result limit is applied only after the full sort, which makes the limited
output a prefix of the unlimited one for every limit value.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..core.types import Match


def rank_key(match: Match) -> tuple[int, str, int]:
    path, line_number = match.origin.sort_key()
    return (-match.score, path, line_number)


def rank(matches: Iterable[Match], limit: int | None = None) -> list[Match]:
    ordered = sorted(matches, key=rank_key)
    if limit is not None:
        return ordered[:limit]
    return ordered
