"""
Candidate source.

Turns the configured targets into a lazy, single-pass stream of
``Candidate`` objects:

    - no targets (or ``-``): one candidate per line of standard input
    - a file: one candidate per line, numbered from 1
    - a directory: every file found by ``iter_files`` after glob filtering
    - filename mode: one candidate per file, whose text is the path itself

Files are read line by line and never loaded whole. An input that cannot be
read, looks binary or is not valid text is skipped with a diagnostic; only
``validate()`` raises, and it does so before anything is read.
"""

from __future__ import annotations

import io
import os
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from ..core.config import STDIN_TARGET, SearchConfig
from ..core.types import (
    STDIN_DISPLAY_NAME,
    Candidate,
    FileOrigin,
    SearchMode,
    SearchStats,
    StreamOrigin,
)
from ..utils.error_handling import (
    BinaryFileError,
    ErrorCollector,
    TargetNotFoundError,
    handle_file_error,
)
from ..utils.helpers import build_pathspec, iter_files, looks_binary
from ..utils.logging_config import SearchLogger


def _strip_newline(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    return line[:-1] if line.endswith("\n") else line


class CandidateSource:
    """Lazy, single-pass producer of candidates for one run."""

    def __init__(
        self,
        config: SearchConfig,
        errors: ErrorCollector | None = None,
        logger: SearchLogger | None = None,
        stdin: TextIO | None = None,
        stats: SearchStats | None = None,
    ) -> None:
        self.config = config
        self.errors = errors if errors is not None else ErrorCollector()
        self.logger = logger
        self.stats = stats if stats is not None else SearchStats()
        self._stdin = stdin
        self._consumed = False

    def validate(self) -> None:
        """Fatal checks: configuration, glob syntax and root targets."""
        self.config.validate()
        build_pathspec(self.config.get_include_patterns(), self.config.get_exclude_patterns())
        for target in self.config.get_targets():
            if target == STDIN_TARGET:
                continue
            path = Path(target)
            if not path.exists():
                raise TargetNotFoundError(f"{target}: No such file or directory", path)
            if not os.access(path, os.R_OK):
                raise TargetNotFoundError(f"{target}: Permission denied", path)

    def __iter__(self) -> Iterator[Candidate]:
        if self._consumed:
            raise RuntimeError("A candidate source can only be iterated once")
        self._consumed = True
        return self._generate()

    def _generate(self) -> Iterator[Candidate]:
        seen: set[str] = set()
        for target in self.config.get_targets():
            if target == STDIN_TARGET:
                if STDIN_TARGET in seen:
                    continue
                seen.add(STDIN_TARGET)
                yield from self._stream_candidates()
                continue

            for file_path in self._expand(Path(target)):
                key = os.path.realpath(file_path)
                if key in seen:
                    if self.logger:
                        self.logger.debug(f"{file_path}: already searched")
                    continue
                seen.add(key)
                if self.config.mode == SearchMode.FILENAMES:
                    self.stats.files_scanned += 1
                    yield Candidate(FileOrigin(file_path), str(file_path))
                else:
                    yield from self._file_candidates(file_path)

    def _expand(self, path: Path) -> Iterator[Path]:
        if not path.is_dir():
            yield path
            return
        yield from iter_files(
            path,
            include=self.config.get_include_patterns(),
            exclude=self.config.get_exclude_patterns(),
            max_depth=self.config.max_depth,
            follow_symlinks=self.config.follow_symlinks,
            on_error=self._walk_error,
        )

    def _file_candidates(self, path: Path) -> Iterator[Candidate]:
        try:
            with path.open("rb") as fh:
                probe = fh.read(self.config.binary_probe_bytes)
                if looks_binary(probe, self.config.encoding):
                    raise BinaryFileError("Binary file, not searched", path)
                fh.seek(0)
                self.stats.files_scanned += 1
                reader = io.TextIOWrapper(
                    fh, encoding=self.config.encoding, errors="strict", newline="\n"
                )
                for number, line in enumerate(reader, start=1):
                    yield Candidate(FileOrigin(path, number), _strip_newline(line))
        except (OSError, UnicodeDecodeError, BinaryFileError) as e:
            self._skip(path, "read", e)

    def _stream_candidates(self) -> Iterator[Candidate]:
        stream = self._stdin if self._stdin is not None else sys.stdin
        try:
            for number, line in enumerate(stream, start=1):
                yield Candidate(StreamOrigin(number), _strip_newline(line))
        except (OSError, UnicodeDecodeError) as e:
            self._skip(Path(STDIN_DISPLAY_NAME), "read", e)

    def _walk_error(self, error: OSError) -> None:
        self._skip(Path(error.filename or "."), "list", error)

    def _skip(self, path: Path, operation: str, error: Exception) -> None:
        self.stats.files_skipped += 1
        handle_file_error(path, operation, error, self.errors, self.logger)
