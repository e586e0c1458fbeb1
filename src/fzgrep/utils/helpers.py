"""
Utility functions and helpers for fzgrep.

This module provides the filesystem collaborators of the candidate source:
glob compilation, lazy directory traversal and a binary-content heuristic.

Key Functions:
    build_pathspec: Compile include/exclude gitwildmatch patterns
    iter_files: Lazily walk a directory tree with pruning and a depth limit
    looks_binary: Decide from a leading block of bytes whether a file is binary

Example:
    >>> from fzgrep.utils.helpers import iter_files
    >>> for path in iter_files("src", include=["*.py"], exclude=["__pycache__/"]):
    ...     print(path)
"""

from __future__ import annotations

import codecs
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pathspec

from .error_handling import ConfigurationError


def compile_patterns(patterns: list[str] | None, kind: str = "glob") -> pathspec.PathSpec:
    """Compile gitwildmatch patterns, naming the offending pattern on failure."""
    for pattern in patterns or []:
        try:
            pathspec.PathSpec.from_lines("gitwildmatch", [pattern])
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {kind} pattern {pattern!r}: {e}", context={"pattern": pattern}
            ) from e
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns or [])


def build_pathspec(
    include: list[str] | None, exclude: list[str] | None
) -> tuple[pathspec.PathSpec | None, pathspec.PathSpec]:
    """Returns (include spec or None when every file is included, exclude spec)."""
    inc = compile_patterns(include, "include") if include else None
    exc = compile_patterns(exclude, "exclude")
    return inc, exc


def iter_files(
    root: str | Path,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    max_depth: int | None = None,
    follow_symlinks: bool = False,
    on_error: Callable[[OSError], None] | None = None,
) -> Iterator[Path]:
    """
    Walk ``root`` lazily, yielding files in a stable (sorted) order.

    Patterns are matched against the path relative to ``root`` in POSIX form.
    Excluded directories are pruned so the walk never enters them. Files
    directly inside ``root`` are at depth 1; ``max_depth`` bounds that depth.
    Directories that cannot be listed are reported through ``on_error``.
    """
    inc, exc = build_pathspec(include, exclude)
    root_path = Path(root)
    if root_path.is_file():
        yield root_path
        return

    for dirpath, dirnames, filenames in os.walk(
        root_path, onerror=on_error, followlinks=follow_symlinks
    ):
        current = Path(dirpath)
        rel_dir = current.relative_to(root_path)
        depth = len(rel_dir.parts)

        # Prune in place so os.walk skips excluded subtrees
        dirnames[:] = sorted(
            d for d in dirnames if not exc.match_file((rel_dir / d).as_posix() + "/")
        )
        if max_depth is not None and depth + 1 >= max_depth:
            dirnames[:] = []
        if max_depth is not None and depth + 1 > max_depth:
            continue

        for name in sorted(filenames):
            rel = (rel_dir / name).as_posix()
            if inc is not None and not inc.match_file(rel):
                continue
            if exc.match_file(rel):
                continue
            yield current / name


def _encodes_nul(encoding: str) -> bool:
    """True for encodings (UTF-16, UTF-32, ...) whose text contains NUL bytes."""
    return b"\x00" in "a".encode(encoding)


def looks_binary(chunk: bytes, encoding: str = "utf-8") -> bool:
    """Check if a leading block of a file, read as ``encoding``, appears to be binary."""
    if not chunk:
        return False

    # Null bytes never appear in text of byte-oriented encodings
    if not _encodes_nul(encoding) and b"\x00" in chunk:
        return True

    # the block may end inside a character, so decode incrementally
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    content = decoder.decode(chunk, final=False)
    if not content:
        return False
    if "\x00" in content:
        return True
    printable_chars = sum(
        1 for c in content if c != "\ufffd" and (c.isprintable() or c.isspace())
    )
    return printable_chars / len(content) <= 0.7

