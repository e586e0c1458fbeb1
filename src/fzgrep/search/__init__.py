"""
Matching and ranking.

This module contains the stages between reading input and printing it:
- Fuzzy scoring algorithm and the scoring adapter around it
- Candidate source (files, directory trees, standard input)
- Match pipeline (scoring, invert policy, context lines)
- Ranker (deterministic total order and result limit)
"""

from .fuzzy import FuzzyMatch, fuzzy_score
from .pipeline import MatchPipeline
from .ranker import rank, rank_key
from .scorer import Scorer, ScoredText
from .sources import CandidateSource

__all__ = [
    "FuzzyMatch",
    "fuzzy_score",
    "MatchPipeline",
    "rank",
    "rank_key",
    "Scorer",
    "ScoredText",
    "CandidateSource",
]
