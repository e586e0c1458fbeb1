"""
Command-line interface for fzgrep.

This module provides the ``fzgrep`` command: it parses the command line into
a SearchConfig and presentation options, runs the engine and writes ranked
results to stdout. Diagnostics go to stderr through the logger.

Exit status is 0 when the run completes, whether or not anything matched,
and 2 when the run cannot start (invalid query, glob pattern, color override
or a missing root). Usage errors reported by click also exit with 2.

Example Usage:
    Search standard input:
        $ ls | fzgrep fzg

    Search a tree, best ten results, with line numbers:
        $ fzgrep -r -n --top 10 fzg

    Rust sources only, two lines of context, JSON output:
        $ fzgrep --include '*.rs' -C 2 --format json fzg src

For more information, run: fzgrep --help
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.color import ColorSystem
from rich.console import Console

from .. import __version__
from ..core.api import FuzzyGrep
from ..core.config import STDIN_TARGET, ContextSize, SearchConfig
from ..core.types import CaseSensitivity, ColorChoice, OutputFormat, SearchMode
from ..utils.error_handling import SearchError
from ..utils.formatter import Formatting, PresentationOptions, StyleSet, format_stats
from ..utils.logging_config import LogFormat, LogLevel, configure_logging
from .color_overrides import parse_color_overrides

FATAL_EXIT_CODE = 2

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


def _detect_color_system(choice: ColorChoice) -> ColorSystem | None:
    """Color system to render with, or None when output stays plain."""
    if choice == ColorChoice.NEVER:
        return None
    if choice == ColorChoice.ALWAYS:
        console = Console(file=sys.stdout, force_terminal=True)
        return _COLOR_SYSTEMS.get(console.color_system or "", ColorSystem.STANDARD)

    console = Console(file=sys.stdout)
    if not console.is_terminal or console.no_color or console.color_system is None:
        return None
    return _COLOR_SYSTEMS.get(console.color_system, ColorSystem.STANDARD)


def build_formatting(
    color: ColorChoice,
    overrides: str | None = None,
    markers: tuple[str, str] | None = None,
) -> Formatting:
    # Overrides are validated even when color ends up disabled
    styles = parse_color_overrides(overrides) if overrides else StyleSet()
    color_system = _detect_color_system(color)
    if color_system is None:
        return Formatting(styles=None, markers=markers)
    return Formatting(styles=styles, markers=markers, color_system=color_system)


def wants_source_name(config: SearchConfig, with_filename: bool | None) -> bool:
    """``-f``/``-F`` win; otherwise names are shown when more than one source is possible."""
    if with_filename is not None:
        return with_filename
    if config.mode == SearchMode.FILENAMES:
        # the candidate already is the name
        return False
    targets = config.get_targets()
    if config.recursive or len(targets) > 1:
        return True
    return any(t != STDIN_TARGET and Path(t).is_dir() for t in targets)


def _name_choice(with_filename: bool, no_filename: bool) -> bool | None:
    if no_filename:
        return False
    if with_filename:
        return True
    return None


def _case_policy(case_sensitive: bool, ignore_case: bool, smart_case: bool) -> CaseSensitivity:
    if case_sensitive:
        return CaseSensitivity.SENSITIVE
    if smart_case and not ignore_case:
        return CaseSensitivity.SMART
    return CaseSensitivity.INSENSITIVE


def _context_size(context: int | None, before: int | None, after: int | None) -> ContextSize:
    base = context or 0
    return ContextSize(
        before=before if before is not None else base,
        after=after if after is not None else base,
    )


@click.command("fzgrep")
@click.argument("query")
@click.argument("targets", nargs=-1, metavar="[TARGET]...")
@click.option("-r", "--recursive", is_flag=True, default=False, help="Search the working directory when no TARGET is given")
@click.option("--include", multiple=True, help="Glob for walked files to search (may repeat)")
@click.option("--exclude", multiple=True, help="Glob for walked files or directories to skip (may repeat)")
@click.option(
    "--max-depth",
    type=int,
    default=None,
    help="Descend at most N directory levels (N >= 1; 1 = direct children)",
)
@click.option("--follow-symlinks", is_flag=True, default=False, help="Follow symbolic links to directories")
@click.option("--filenames", is_flag=True, default=False, help="Match file paths instead of file contents")
@click.option("-s", "--case-sensitive", is_flag=True, default=False, help="Match case exactly")
@click.option("-i", "--ignore-case", is_flag=True, default=False, help="Ignore case (default)")
@click.option("-S", "--smart-case", is_flag=True, default=False, help="Match case only if QUERY has upper-case characters")
@click.option("--invert", is_flag=True, default=False, help="Select candidates that do not match")
@click.option("--top", "limit", type=int, default=None, help="Keep only the best N results")
@click.option("-n", "--line-number", is_flag=True, default=False, help="Print line numbers")
@click.option("-f", "--with-filename", is_flag=True, default=False, help="Print the source name for each line")
@click.option("-F", "--no-filename", is_flag=True, default=False, help="Never print source names")
@click.option("-C", "--context", "context", type=int, default=None, help="Print NUM lines of context around matches")
@click.option("-B", "--before-context", "before", type=int, default=None, help="Print NUM lines of leading context")
@click.option("-A", "--after-context", "after", type=int, default=None, help="Print NUM lines of trailing context")
@click.option("--show-score", is_flag=True, default=False, help="Append the score of each result")
@click.option(
    "--color",
    type=click.Choice([c.value for c in ColorChoice]),
    default=ColorChoice.AUTO.value,
    help="When to emphasize output with ANSI colors",
)
@click.option("--color-overrides", default=None, metavar="CAPS", help="grep-style styles, e.g. 'ms=01;31:ln=32'")
@click.option("--markers", nargs=2, type=str, default=None, metavar="LEFT RIGHT", help="Plain-text emphasis markers used without color")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([e.value for e in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@click.option("--encoding", default="utf-8", show_default=True, help="Text encoding of input files")
@click.option("--stats", is_flag=True, default=False, help="Print run statistics to stderr")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Suppress all output")
@click.option("-v", "--verbose", count=True, help="More diagnostics (-v info, -vv debug)")
@click.option("--log-file", default=None, help="Also write diagnostics to this file")
@click.option(
    "--log-format",
    type=click.Choice([f.value for f in LogFormat]),
    default=LogFormat.SIMPLE.value,
    help="Diagnostic format",
)
@click.option("--show-errors", is_flag=True, default=False, help="Print a report of skipped inputs")
@click.version_option(__version__, prog_name="fzgrep")
def cli(
    query: str,
    targets: tuple[str, ...],
    recursive: bool,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    max_depth: int | None,
    follow_symlinks: bool,
    filenames: bool,
    case_sensitive: bool,
    ignore_case: bool,
    smart_case: bool,
    invert: bool,
    limit: int | None,
    line_number: bool,
    with_filename: bool,
    no_filename: bool,
    context: int | None,
    before: int | None,
    after: int | None,
    show_score: bool,
    color: str,
    color_overrides: str | None,
    markers: tuple[str, str] | None,
    fmt: str,
    encoding: str,
    stats: bool,
    quiet: bool,
    verbose: int,
    log_file: str | None,
    log_format: str,
    show_errors: bool,
) -> None:
    """Fuzzy search QUERY in each TARGET (files, directories or - for stdin)."""
    logger = configure_logging(
        level=LogLevel.from_verbosity(verbose),
        format_type=LogFormat(log_format),
        log_file=Path(log_file) if log_file else None,
        enable_file=bool(log_file),
        enable_console=not quiet,
    )

    cfg = SearchConfig(
        query=query,
        paths=list(targets),
        recursive=recursive,
        include=list(include) if include else None,
        exclude=list(exclude) if exclude else None,
        max_depth=max_depth,
        follow_symlinks=follow_symlinks,
        mode=SearchMode.FILENAMES if filenames else SearchMode.CONTENT,
        case=_case_policy(case_sensitive, ignore_case, smart_case),
        invert=invert,
        limit=limit,
        context=_context_size(context, before, after),
        encoding=encoding,
    )

    engine = FuzzyGrep(cfg, logger=logger)
    try:
        formatting = build_formatting(
            ColorChoice(color), color_overrides, tuple(markers) if markers else None
        )
        result = engine.search()
    except SearchError as e:
        if not quiet:
            click.echo(f"Error: {e.message}", err=True)
        sys.exit(FATAL_EXIT_CODE)

    if not quiet:
        options = PresentationOptions(
            show_source_name=wants_source_name(cfg, _name_choice(with_filename, no_filename)),
            show_line_number=line_number,
            show_score=show_score,
            formatting=formatting,
        )
        for line in engine.iter_output(result, OutputFormat(fmt), options):
            click.echo(line)

        if stats:
            click.echo(format_stats(result.stats), err=True)

        if show_errors and engine.has_errors():
            click.echo(engine.get_error_report(), err=True)


def main() -> None:
    cli(prog_name="fzgrep")


if __name__ == "__main__":
    main()
