"""
Character-level fuzzy scoring.

This is the scoring algorithm popularised by Visual Studio Code's quick-open:
the query must appear in the target as a subsequence, and every matched
character earns points that reward consecutive runs, word starts, characters
following a separator and camel-case humps. A dynamic-programming table picks
the best-scoring alignment and a back-track through the table recovers the
matched character indices.

Example:
    >>> from fzgrep.search.fuzzy import fuzzy_score
    >>> m = fuzzy_score("fzg", "fzgrep.rs")
    >>> m.positions
    (0, 1, 2)
    >>> fuzzy_score("fzg", "frozen.rs") is None
    True
"""

from __future__ import annotations

from dataclasses import dataclass

PATH_SEPARATORS = frozenset("/\\")
REGULAR_SEPARATORS = frozenset("_-. '\":")


class Score:
    """Points awarded per matched character."""

    NONE = 0
    REGULAR = 1
    CONSECUTIVE_MATCH = 5
    EXACT_MATCH = 1
    WORD_START = 8
    AFTER_SEPARATOR = 4
    AFTER_PATH_SEPARATOR = 5
    CAMEL_CASE = 2


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    """Represents a fuzzy match result."""

    score: int
    positions: tuple[int, ...]


def is_separator(ch: str | None) -> bool:
    return ch is not None and (ch in REGULAR_SEPARATORS or ch in PATH_SEPARATORS)


def chars_equal(query_char: str, target_char: str, case_sensitive: bool = False) -> bool:
    """Compare one query character to one target character."""
    if query_char == target_char:
        return True
    # Either slash style matches either slash style
    if query_char in PATH_SEPARATORS:
        return target_char in PATH_SEPARATORS
    if case_sensitive:
        return False
    return query_char.lower() == target_char.lower()


def is_subsequence(query: str, target: str, case_sensitive: bool = False) -> bool:
    """Cheap pre-check: does every query character occur, in order, in target?"""
    it = iter(target)
    return all(any(chars_equal(qc, tc, case_sensitive) for tc in it) for qc in query)


def char_score(
    query_char: str,
    target_char: str,
    prev_char: str | None,
    target_index: int,
    sequence_length: int,
    case_sensitive: bool = False,
) -> int:
    """Score a single aligned character pair; ``Score.NONE`` if they differ."""
    if not chars_equal(query_char, target_char, case_sensitive):
        return Score.NONE

    score = Score.REGULAR + Score.CONSECUTIVE_MATCH * sequence_length

    if query_char == target_char:
        score += Score.EXACT_MATCH

    if target_index == 0:
        score += Score.WORD_START

    if prev_char is not None:
        if prev_char in PATH_SEPARATORS:
            score += Score.AFTER_PATH_SEPARATOR
        elif prev_char in REGULAR_SEPARATORS:
            score += Score.AFTER_SEPARATOR

    if not is_separator(prev_char) and target_char.isupper():
        score += Score.CAMEL_CASE

    return score


def fuzzy_score(query: str, target: str, case_sensitive: bool = False) -> FuzzyMatch | None:
    """
    Score ``target`` against ``query``.

    Args:
        query: Characters to look for, in order
        target: Text to search in
        case_sensitive: Whether letters must match case exactly

    Returns:
        FuzzyMatch with the total score and the ascending character indices
        of the matched characters, or None if ``query`` is not a subsequence
        of ``target``. An empty query never matches here; the scoring
        adapter decides what an empty query means.
    """
    q_len, t_len = len(query), len(target)
    if q_len == 0 or t_len < q_len:
        return None
    if not is_subsequence(query, target, case_sensitive):
        return None

    scores = [[Score.NONE] * t_len for _ in range(q_len)]
    # length of the consecutive run ending at each cell; 0 = no match chosen here
    runs = [[0] * t_len for _ in range(q_len)]

    for qi, qc in enumerate(query):
        row, run_row = scores[qi], runs[qi]
        prev_row = scores[qi - 1] if qi > 0 else None
        prev_run_row = runs[qi - 1] if qi > 0 else None
        for ti, tc in enumerate(target):
            left = row[ti - 1] if ti > 0 else Score.NONE
            if prev_row is not None and prev_run_row is not None and ti > 0:
                diag = prev_row[ti - 1]
                sequence_length = prev_run_row[ti - 1]
            else:
                diag = Score.NONE
                sequence_length = 0

            if qi > 0 and diag == Score.NONE:
                score = Score.NONE
            else:
                prev_char = target[ti - 1] if ti > 0 else None
                score = char_score(qc, tc, prev_char, ti, sequence_length, case_sensitive)

            if score != Score.NONE and diag + score >= left:
                run_row[ti] = sequence_length + 1
                row[ti] = diag + score
            else:
                run_row[ti] = 0
                row[ti] = left

    total = scores[q_len - 1][t_len - 1]
    if total == Score.NONE:
        return None

    positions: list[int] = []
    qi, ti = q_len - 1, t_len - 1
    while qi >= 0 and ti >= 0:
        if runs[qi][ti] == 0:
            ti -= 1
        else:
            positions.append(ti)
            qi -= 1
            ti -= 1
    positions.reverse()

    return FuzzyMatch(score=total, positions=tuple(positions))
