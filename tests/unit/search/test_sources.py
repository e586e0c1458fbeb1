"""Tests for fzgrep.search.sources."""

import io

import pytest

from fzgrep.core.config import SearchConfig
from fzgrep.core.types import STDIN_DISPLAY_NAME, FileOrigin, SearchMode, SearchStats, StreamOrigin
from fzgrep.search.sources import CandidateSource
from fzgrep.utils.error_handling import (
    BinaryFileError,
    ConfigurationError,
    ErrorCollector,
    TargetNotFoundError,
)


def _texts(source):
    return [c.text for c in source]


class TestValidate:
    def test_missing_root(self, tmp_path):
        source = CandidateSource(SearchConfig(query="x", paths=[str(tmp_path / "nope")]))
        with pytest.raises(TargetNotFoundError) as exc:
            source.validate()
        assert exc.value.is_fatal
        assert "No such file or directory" in exc.value.message

    def test_invalid_glob(self, tmp_path):
        source = CandidateSource(SearchConfig(query="x", paths=[str(tmp_path)], include=["foo\\"]))
        with pytest.raises(ConfigurationError):
            source.validate()

    def test_invalid_config(self):
        source = CandidateSource(SearchConfig(query="x", limit=-1))
        with pytest.raises(ConfigurationError):
            source.validate()

    def test_stdin_needs_no_checks(self):
        CandidateSource(SearchConfig(query="x")).validate()


class TestStdin:
    def test_lines_are_numbered_from_one(self):
        stdin = io.StringIO("alpha\nbeta\r\ngamma")
        source = CandidateSource(SearchConfig(query="x"), stdin=stdin)
        result = list(source)
        assert [c.text for c in result] == ["alpha", "beta", "gamma"]
        assert [c.origin for c in result] == [StreamOrigin(1), StreamOrigin(2), StreamOrigin(3)]
        assert result[0].origin.display_name == STDIN_DISPLAY_NAME

    def test_dash_is_stdin(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_text("from file\n")
        stdin = io.StringIO("from stdin\n")
        source = CandidateSource(SearchConfig(query="x", paths=[str(f), "-", "-"]), stdin=stdin)
        assert _texts(source) == ["from file", "from stdin"]


class TestFiles:
    def test_single_file(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_text("one\ntwo\n")
        stats = SearchStats()
        result = list(CandidateSource(SearchConfig(query="x", paths=[str(f)]), stats=stats))
        assert [c.origin for c in result] == [FileOrigin(f, 1), FileOrigin(f, 2)]
        assert stats.files_scanned == 1

    def test_empty_lines_are_candidates(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_text("one\n\nthree\n")
        assert _texts(CandidateSource(SearchConfig(query="x", paths=[str(f)]))) == [
            "one",
            "",
            "three",
        ]

    def test_bare_carriage_return_does_not_split_lines(self, tmp_path):
        f = tmp_path / "progress.log"
        f.write_bytes(b"progress 10%\rprogress 100%\nnext\r\n")
        result = list(CandidateSource(SearchConfig(query="x", paths=[str(f)])))
        assert [(c.origin.line_number, c.text) for c in result] == [
            (1, "progress 10%\rprogress 100%"),
            (2, "next"),
        ]

    def test_directory_walk_is_sorted_and_skips_vcs(self, sample_tree):
        source = CandidateSource(SearchConfig(query="x", paths=[str(sample_tree)]))
        files = []
        for candidate in source:
            if candidate.origin.path not in files:
                files.append(candidate.origin.path)
        rel = [p.relative_to(sample_tree).as_posix() for p in files]
        assert rel == ["fzgrep.rs", "notes.txt", "src/main.rs", "src/deep/inner.txt"]

    def test_duplicate_targets_are_searched_once(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_text("only\n")
        config = SearchConfig(query="x", paths=[str(f), str(tmp_path), str(f)])
        assert _texts(CandidateSource(config)) == ["only"]

    def test_include_and_exclude(self, sample_tree):
        config = SearchConfig(
            query="x", paths=[str(sample_tree)], include=["*.txt"], exclude=["deep/"]
        )
        paths = {c.origin.path.name for c in CandidateSource(config)}
        assert paths == {"notes.txt"}

    def test_max_depth(self, sample_tree):
        config = SearchConfig(query="x", paths=[str(sample_tree)], max_depth=1)
        paths = {c.origin.path.name for c in CandidateSource(config)}
        assert paths == {"fzgrep.rs", "notes.txt"}

    def test_binary_file_is_skipped(self, sample_tree):
        errors = ErrorCollector()
        stats = SearchStats()
        source = CandidateSource(
            SearchConfig(query="x", paths=[str(sample_tree / "blob.bin")]),
            errors=errors,
            stats=stats,
        )
        assert list(source) == []
        assert stats.files_skipped == 1
        assert errors.errors[0].exception_type == BinaryFileError.__name__
        assert errors.errors[0].category.value == "binary"

    def test_decode_error_keeps_earlier_lines(self, tmp_path):
        f = tmp_path / "latin.txt"
        f.write_bytes(b"good line\n" * 2000 + b"caf\xe9\n" * 4)
        errors = ErrorCollector()
        stats = SearchStats()
        source = CandidateSource(
            SearchConfig(query="x", paths=[str(f)]), errors=errors, stats=stats
        )
        texts = _texts(source)
        assert texts
        assert set(texts) == {"good line"}
        assert stats.files_skipped == 1
        assert errors.errors[0].category.value == "encoding"

    def test_other_encoding(self, tmp_path):
        f = tmp_path / "latin.txt"
        f.write_bytes(b"caf\xe9\n")
        config = SearchConfig(query="x", paths=[str(f)], encoding="latin-1")
        assert _texts(CandidateSource(config)) == ["café"]

    @pytest.mark.parametrize("encoding", ["utf-16", "utf-16-le", "utf-32"])
    def test_wide_encodings_are_not_binary(self, tmp_path, encoding):
        f = tmp_path / "wide.txt"
        f.write_text("fzgrep line\nsecond\n", encoding=encoding)
        errors = ErrorCollector()
        config = SearchConfig(query="x", paths=[str(f)], encoding=encoding)
        assert _texts(CandidateSource(config, errors=errors)) == ["fzgrep line", "second"]
        assert errors.errors == []

    def test_nul_in_wide_text_is_binary(self, tmp_path):
        f = tmp_path / "wide.bin"
        f.write_text("fzg\x00\x00\x00data\n", encoding="utf-16")
        errors = ErrorCollector()
        config = SearchConfig(query="x", paths=[str(f)], encoding="utf-16")
        assert _texts(CandidateSource(config, errors=errors)) == []
        assert errors.errors[0].category.value == "binary"


class TestFilenameMode:
    def test_paths_are_candidates(self, sample_tree):
        config = SearchConfig(query="x", paths=[str(sample_tree)], mode=SearchMode.FILENAMES)
        result = list(CandidateSource(config))
        assert all(c.origin.line_number is None for c in result)
        assert all(c.text == str(c.origin.path) for c in result)
        # binary files are still valid names
        assert any(c.text.endswith("blob.bin") for c in result)


class TestSinglePass:
    def test_second_iteration_fails(self):
        source = CandidateSource(SearchConfig(query="x"), stdin=io.StringIO(""))
        list(source)
        with pytest.raises(RuntimeError):
            iter(source)
