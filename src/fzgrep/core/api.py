"""
Main API module for fzgrep.

This module provides the FuzzyGrep class, the entry point for programmatic
use of the search engine. One instance drives one run through a fixed
sequence of states:

    IDLE -> TRAVERSING -> SCORING -> RANKING -> PRESENTING -> DONE

Fatal problems (bad configuration, invalid glob patterns, missing or
unreadable root targets) are detected while TRAVERSING, before any input is
read, and move the run to FAILED. Everything after that point is
non-fatal: unreadable, binary or undecodable inputs are skipped, recorded in
the error collector and reported through the logger.

Example:
    >>> from fzgrep.core.api import FuzzyGrep
    >>> from fzgrep.core.config import SearchConfig
    >>>
    >>> config = SearchConfig(query="fzg", paths=["src"], recursive=True, limit=10)
    >>> engine = FuzzyGrep(config)
    >>> result = engine.search()
    >>> print(engine.render(result))
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from typing import TextIO

from ..search.pipeline import MatchPipeline
from ..search.ranker import rank
from ..search.scorer import Scorer
from ..search.sources import CandidateSource
from ..utils.error_handling import ErrorCollector, SearchError, create_error_report
from ..utils.formatter import PresentationOptions, format_result, iter_result_lines
from ..utils.logging_config import SearchLogger, get_logger
from .config import ContextSize, SearchConfig
from .types import OutputFormat, RunState, SearchMode, SearchResult, SearchStats


class FuzzyGrep:
    """
    Search engine for a single fuzzy grep run.

    The engine wires the candidate source, the match pipeline and the ranker
    together, keeps per-run statistics and collects non-fatal errors.

    Attributes:
        config: Run configuration
        logger: Logger receiving progress and skip diagnostics
        errors: Collector for skipped inputs
        stats: Counters for the current run
        state: Current position in the run state machine
    """

    def __init__(
        self,
        config: SearchConfig,
        logger: SearchLogger | None = None,
        stdin: TextIO | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger()
        self.errors = ErrorCollector()
        self.stats = SearchStats()
        self.state = RunState.IDLE
        self._stdin = stdin

    def _enter(self, state: RunState) -> None:
        self.logger.debug(f"run state: {self.state.value} -> {state.value}")
        self.state = state

    def search(self) -> SearchResult:
        """
        Run traversal, scoring and ranking.

        Returns:
            SearchResult with the ranked (and limited) matches and run statistics

        Raises:
            SearchError: A fatal error detected before any input was read
            RuntimeError: If the engine was already used for a run
        """
        if self.state != RunState.IDLE:
            raise RuntimeError(f"search() called in state {self.state.value}")

        cfg = self.config
        started = time.perf_counter()
        self.logger.log_search_start(cfg.query, cfg.paths)

        self._enter(RunState.TRAVERSING)
        source = CandidateSource(
            cfg, errors=self.errors, logger=self.logger, stdin=self._stdin, stats=self.stats
        )
        try:
            source.validate()
        except SearchError:
            self._enter(RunState.FAILED)
            raise

        # Traversal is lazy: the pipeline pulls candidates while scoring
        self._enter(RunState.SCORING)
        context = cfg.context if cfg.mode == SearchMode.CONTENT else ContextSize()
        pipeline = MatchPipeline(
            Scorer(cfg.query, cfg.case), invert=cfg.invert, context=context, stats=self.stats
        )
        matches = pipeline.run(source)

        self._enter(RunState.RANKING)
        ranked = rank(matches, cfg.limit)

        self.stats.elapsed_ms = (time.perf_counter() - started) * 1000.0
        self.logger.log_search_complete(cfg.query, len(ranked), self.stats.elapsed_ms)
        if self.errors.errors:
            self.logger.debug(f"{len(self.errors.errors)} input(s) skipped")
        return SearchResult(matches=ranked, stats=self.stats)

    def iter_output(
        self,
        result: SearchResult,
        fmt: OutputFormat = OutputFormat.TEXT,
        options: PresentationOptions | None = None,
    ) -> Iterator[str]:
        """Yield output lines for ``result`` and finish the run once exhausted."""
        self._enter(RunState.PRESENTING)
        yield from iter_result_lines(result, fmt, options)
        self._enter(RunState.DONE)

    def render(
        self,
        result: SearchResult,
        fmt: OutputFormat = OutputFormat.TEXT,
        options: PresentationOptions | None = None,
    ) -> str:
        """Render the whole result as a single string."""
        self._enter(RunState.PRESENTING)
        text = format_result(result, fmt, options)
        self._enter(RunState.DONE)
        return text

    def has_errors(self) -> bool:
        return bool(self.errors.errors)

    def get_error_report(self) -> str:
        return create_error_report(self.errors)
