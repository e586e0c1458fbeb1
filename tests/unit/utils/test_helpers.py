"""Tests for fzgrep.utils.helpers."""

import pytest

from fzgrep.utils.error_handling import ConfigurationError
from fzgrep.utils.helpers import (
    build_pathspec,
    compile_patterns,
    iter_files,
    looks_binary,
)


def _rel(paths, root):
    return [p.relative_to(root).as_posix() for p in paths]


class TestPatterns:
    def test_invalid_pattern_names_the_kind(self):
        with pytest.raises(ConfigurationError) as exc:
            compile_patterns(["ok/", "foo\\"], "include")
        assert "include" in exc.value.message
        assert "foo" in exc.value.message

    def test_no_include_means_everything(self):
        inc, exc = build_pathspec(None, [])
        assert inc is None
        assert not exc.match_file("anything.txt")


class TestIterFiles:
    def test_sorted_walk(self, sample_tree):
        files = _rel(iter_files(sample_tree), sample_tree)
        assert files == [
            "blob.bin",
            "fzgrep.rs",
            "notes.txt",
            ".git/config",
            "src/main.rs",
            "src/deep/inner.txt",
        ]

    def test_excluded_directory_is_pruned(self, sample_tree):
        files = _rel(iter_files(sample_tree, exclude=[".git/", "src/"]), sample_tree)
        assert files == ["blob.bin", "fzgrep.rs", "notes.txt"]

    def test_include_filters_files(self, sample_tree):
        files = _rel(iter_files(sample_tree, include=["*.rs"]), sample_tree)
        assert files == ["fzgrep.rs", "src/main.rs"]

    def test_max_depth(self, sample_tree):
        files = _rel(iter_files(sample_tree, exclude=[".git/"], max_depth=2), sample_tree)
        assert "src/main.rs" in files
        assert "src/deep/inner.txt" not in files

    def test_file_root(self, sample_tree):
        assert list(iter_files(sample_tree / "notes.txt")) == [sample_tree / "notes.txt"]


class TestLooksBinary:
    def test_text(self):
        assert not looks_binary(b"plain text\n")

    def test_empty(self):
        assert not looks_binary(b"")

    def test_nul_byte(self):
        assert looks_binary(b"abc\x00def")

    def test_mostly_control_characters(self):
        assert looks_binary(b"\x01\x02\x03\x04\x05\x06a")

    def test_utf8_text(self):
        assert not looks_binary("café naïve".encode())


    def test_invalid_utf8_is_binary(self):
        assert looks_binary(b"\xff\xfe\xfd\xfc\xfb\xfa")

    @pytest.mark.parametrize("encoding", ["utf-16", "utf-16-be", "utf-32-le"])
    def test_wide_text_is_not_binary(self, encoding):
        assert not looks_binary("fzgrep line\n".encode(encoding), encoding)

    def test_wide_text_is_binary_for_byte_encodings(self):
        assert looks_binary("fzgrep line\n".encode("utf-16"))

    def test_nul_character_in_wide_text(self):
        assert looks_binary("fzg\x00data".encode("utf-16-le"), "utf-16-le")

    def test_block_ending_inside_a_character(self):
        chunk = ("é" * 100).encode()[:-1]
        assert not looks_binary(chunk)
