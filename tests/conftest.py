"""
Shared test fixtures and utilities for fzgrep tests.

This module provides common fixtures, test data, and helper functions
to reduce code duplication and improve test consistency across the test suite.
"""

from pathlib import Path

import pytest

from fzgrep.core.types import Candidate, FileOrigin, StreamOrigin
from fzgrep.utils import logging_config
from fzgrep.utils.logging_config import LogLevel, SearchLogger

# Test data constants
SAMPLE_RUST_SOURCE = """\
mod cli;
mod core;

use fzgrep::Request;

fn main() {
    let request = Request::from_args();
    fzgrep::run(&request);
}
"""

SAMPLE_NOTES = """\
fuzzy grep notes
the fzgrep binary lives in target
nothing to see here
"""


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Each test starts without a configured global logger."""
    logging_config._global_logger = None
    yield
    logging_config._global_logger = None


@pytest.fixture
def quiet_logger():
    """A logger with no console output, for engine-level tests."""
    return SearchLogger(name="fzgrep.tests", level=LogLevel.DEBUG, enable_console=False)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small project tree::

        project/
            fzgrep.rs
            notes.txt
            src/main.rs
            src/deep/inner.txt
            .git/config
            blob.bin
    """
    root = tmp_path / "project"
    (root / "src" / "deep").mkdir(parents=True)
    (root / ".git").mkdir()

    (root / "fzgrep.rs").write_text("fzgrep.rs\nfrozen\n")
    (root / "notes.txt").write_text(SAMPLE_NOTES)
    (root / "src" / "main.rs").write_text(SAMPLE_RUST_SOURCE)
    (root / "src" / "deep" / "inner.txt").write_text("fzg deep inside\n")
    (root / ".git" / "config").write_text("fzg in vcs metadata\n")
    (root / "blob.bin").write_bytes(b"fzg\x00\x01\x02binary")
    return root


def make_candidates(lines: list[str], path: str | None = None) -> list[Candidate]:
    """Build candidates for ``lines``, from a file when ``path`` is given, else stdin."""
    result = []
    for number, text in enumerate(lines, start=1):
        origin = FileOrigin(Path(path), number) if path else StreamOrigin(number)
        result.append(Candidate(origin, text))
    return result


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def candidates():
    """Factory fixture around ``make_candidates``."""
    return make_candidates
