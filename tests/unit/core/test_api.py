"""Tests for fzgrep.core.api."""

import io

import pytest

from fzgrep.core.api import FuzzyGrep
from fzgrep.core.config import ContextSize, SearchConfig
from fzgrep.core.types import OutputFormat, RunState, SearchMode
from fzgrep.utils.error_handling import ConfigurationError, TargetNotFoundError
from fzgrep.utils.formatter import PresentationOptions


def _engine(config, logger, text=""):
    return FuzzyGrep(config, logger=logger, stdin=io.StringIO(text))


class TestSearch:
    def test_reference_scenario(self, quiet_logger):
        engine = _engine(SearchConfig(query="fzg"), quiet_logger, "fzgrep.rs\nfrozen.rs\n")
        result = engine.search()
        assert [m.text for m in result.matches] == ["fzgrep.rs"]
        assert result.matches[0].score == 29
        assert result.matches[0].matched_positions == (0, 1, 2)
        assert engine.state == RunState.RANKING

    def test_empty_query_keeps_input_order(self, quiet_logger):
        engine = _engine(SearchConfig(query=""), quiet_logger, "c\na\nb\n")
        result = engine.search()
        assert [m.text for m in result.matches] == ["c", "a", "b"]
        assert all(m.score == 0 for m in result.matches)

    def test_invert(self, quiet_logger):
        engine = _engine(SearchConfig(query="xyz", invert=True), quiet_logger, "abc\nxyz\n")
        assert [m.text for m in engine.search().matches] == ["abc"]

    def test_limit(self, quiet_logger):
        text = "fzg\nfuzzy grep\nf z g\nnothing\n"
        full = _engine(SearchConfig(query="fzg"), quiet_logger, text).search().matches
        top = _engine(SearchConfig(query="fzg", limit=2), quiet_logger, text).search().matches
        assert top == full[:2]

    def test_stats(self, quiet_logger):
        engine = _engine(SearchConfig(query="fzg"), quiet_logger, "fzg\nnope\n")
        stats = engine.search().stats
        assert stats.candidates == 2
        assert stats.matches == 1
        assert stats.elapsed_ms >= 0

    def test_tree_search(self, sample_tree, quiet_logger):
        config = SearchConfig(query="fzg", paths=[str(sample_tree)])
        engine = FuzzyGrep(config, logger=quiet_logger)
        result = engine.search()
        names = {m.origin.path.name for m in result.matches}
        assert names == {"fzgrep.rs", "notes.txt", "main.rs", "inner.txt"}
        assert result.stats.files_skipped == 1
        assert engine.has_errors()
        assert "blob.bin" in engine.get_error_report()

    def test_context_ignored_in_filename_mode(self, sample_tree, quiet_logger):
        config = SearchConfig(
            query="main",
            paths=[str(sample_tree)],
            mode=SearchMode.FILENAMES,
            context=ContextSize.symmetric(2),
        )
        result = FuzzyGrep(config, logger=quiet_logger).search()
        assert result.matches
        assert all(not m.context.before and not m.context.after for m in result.matches)

    def test_deterministic(self, sample_tree, quiet_logger):
        config = SearchConfig(query="fz", paths=[str(sample_tree)])
        first = FuzzyGrep(config, logger=quiet_logger).search().matches
        second = FuzzyGrep(config, logger=quiet_logger).search().matches
        assert first == second


class TestFailures:
    def test_missing_root(self, tmp_path, quiet_logger):
        engine = FuzzyGrep(SearchConfig(query="x", paths=[str(tmp_path / "nope")]), quiet_logger)
        with pytest.raises(TargetNotFoundError):
            engine.search()
        assert engine.state == RunState.FAILED

    def test_invalid_glob(self, tmp_path, quiet_logger):
        config = SearchConfig(query="x", paths=[str(tmp_path)], exclude=["foo\\"])
        engine = FuzzyGrep(config, quiet_logger)
        with pytest.raises(ConfigurationError):
            engine.search()
        assert engine.state == RunState.FAILED
        assert engine.stats.candidates == 0

    def test_single_use(self, quiet_logger):
        engine = _engine(SearchConfig(query="x"), quiet_logger)
        engine.search()
        with pytest.raises(RuntimeError):
            engine.search()


class TestPresentation:
    def test_render_finishes_run(self, quiet_logger):
        engine = _engine(SearchConfig(query="fzg"), quiet_logger, "fzgrep\n")
        result = engine.search()
        text = engine.render(result, OutputFormat.TEXT, PresentationOptions(show_score=True))
        assert text == "fzgrep (score 29)"
        assert engine.state == RunState.DONE

    def test_iter_output(self, quiet_logger):
        engine = _engine(SearchConfig(query="fzg"), quiet_logger, "fzgrep\nfzg\n")
        result = engine.search()
        lines = list(engine.iter_output(result))
        assert len(lines) == 2
        assert engine.state == RunState.DONE
