"""
Output formatting module for fzgrep.

This module turns ranked matches into output lines. It never reorders or
filters anything; every match becomes exactly one selected line, preceded and
followed by its context lines when context was requested.

Key Functions:
    group_indices: Coalesce matched character indices into contiguous runs
    emphasize: Render a text with its matched characters emphasized
    format_match: All output lines for a single match
    format_result: Main entry point for formatting results in any supported format
    to_json_lines: One JSON object per match using orjson

Emphasis comes in three flavours, chosen by ``Formatting``:
    - ANSI styles from ``rich`` when color is on
    - Plain-text markers (for example ``[[`` and ``]]``) when color is off
      but highlighting is still wanted in piped output
    - Nothing at all, which reproduces the candidate text verbatim

Example:
    >>> from rich.style import Style
    >>> from fzgrep.utils.formatter import emphasize
    >>> emphasize("fzgrep.rs", (0, 1, 2), markers=("[[", "]]"))
    '[[fzg]]rep.rs'
    >>> emphasize("fzgrep.rs", (0, 1, 2), style=Style(bold=True))
    '\\x1b[1mfzg\\x1b[0mrep.rs'
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

import orjson
from rich.color import ColorSystem
from rich.style import Style

from ..core.types import FileOrigin, Match, OutputFormat, SearchResult, SearchStats

SEPARATOR = ":"


def _default_match_style() -> Style:
    return Style(color="red", bold=True)


@dataclass(frozen=True)
class StyleSet:
    """Styles for each part of an output line (grep's ms/ln/fn/se/sl/cx)."""

    selected_match: Style = field(default_factory=_default_match_style)
    line_number: Style = field(default_factory=lambda: Style(color="green"))
    source_name: Style = field(default_factory=lambda: Style(color="magenta"))
    separator: Style = field(default_factory=lambda: Style(color="cyan"))
    selected_line: Style = field(default_factory=Style)
    context: Style = field(default_factory=Style)


@dataclass(frozen=True)
class Formatting:
    """How emphasis is rendered. ``styles`` set means ANSI output."""

    styles: StyleSet | None = None
    markers: tuple[str, str] | None = None
    color_system: ColorSystem = ColorSystem.STANDARD

    @property
    def colored(self) -> bool:
        return self.styles is not None

    def paint(self, piece: str, style: Style | None) -> str:
        if self.styles is None or style is None or not piece:
            return piece
        return style.render(piece, color_system=self.color_system)


@dataclass(frozen=True)
class PresentationOptions:
    show_source_name: bool = False
    show_line_number: bool = False
    show_score: bool = False
    formatting: Formatting = field(default_factory=Formatting)


def group_indices(indices: Sequence[int]) -> list[tuple[int, int]]:
    """Coalesce ascending indices into half-open ``(start, end)`` runs."""
    runs: list[tuple[int, int]] = []
    for idx in indices:
        if runs and idx <= runs[-1][1]:
            # adjacent or repeated index extends the current run
            start, end = runs[-1]
            runs[-1] = (start, max(end, idx + 1))
        else:
            runs.append((idx, idx + 1))
    return runs


def _paint_runs(
    text: str,
    runs: list[tuple[int, int]],
    paint_match: Callable[[str], str],
    paint_rest: Callable[[str], str],
) -> str:
    out: list[str] = []
    last = 0
    for start, end in runs:
        if start > last:
            out.append(paint_rest(text[last:start]))
        out.append(paint_match(text[start:end]))
        last = end
    if last < len(text):
        out.append(paint_rest(text[last:]))
    return "".join(out)


def _wrap_runs(text: str, runs: list[tuple[int, int]], markers: tuple[str, str]) -> str:
    left, right = markers
    return _paint_runs(text, runs, lambda s: f"{left}{s}{right}", lambda s: s)


def emphasize(
    text: str,
    positions: Sequence[int],
    style: Style | None = None,
    markers: tuple[str, str] | None = None,
    color_system: ColorSystem = ColorSystem.STANDARD,
) -> str:
    """
    Render ``text`` with the characters at ``positions`` emphasized.

    Adjacent positions form a single emphasized run. With a ``style`` the
    runs get ANSI escapes; otherwise ``markers`` wrap them; with neither the
    text comes back unchanged. Removing the emphasis always yields ``text``.
    """
    runs = group_indices(positions)
    if style is not None:
        return _paint_runs(
            text, runs, lambda s: style.render(s, color_system=color_system), lambda s: s
        )
    if markers is not None:
        return _wrap_runs(text, runs, markers)
    return text


def _location_prefix(
    name: str | None, line_number: int | None, formatting: Formatting, styles: StyleSet
) -> str:
    parts: list[str] = []
    if name is not None:
        parts.append(formatting.paint(name, styles.source_name))
        parts.append(formatting.paint(SEPARATOR, styles.separator))
    if line_number is not None:
        parts.append(formatting.paint(str(line_number), styles.line_number))
        parts.append(formatting.paint(SEPARATOR, styles.separator))
    return "".join(parts)


def format_selected_line(match: Match, options: PresentationOptions) -> str:
    formatting = options.formatting
    styles = formatting.styles or StyleSet()
    origin = match.origin

    name = origin.display_name if options.show_source_name else None
    line_number = origin.line_number if options.show_line_number else None
    prefix = _location_prefix(name, line_number, formatting, styles)

    runs = group_indices(match.matched_positions)
    if formatting.colored:
        body = _paint_runs(
            match.text,
            runs,
            lambda s: formatting.paint(s, styles.selected_match),
            lambda s: formatting.paint(s, styles.selected_line),
        )
    elif formatting.markers is not None:
        body = _wrap_runs(match.text, runs, formatting.markers)
    else:
        body = match.text

    suffix = f" (score {match.score})" if options.show_score else ""
    return prefix + body + suffix


def format_match(match: Match, options: PresentationOptions) -> list[str]:
    """Output lines for one match: leading context, the match, trailing context."""
    formatting = options.formatting
    styles = formatting.styles or StyleSet()
    origin = match.origin
    name = origin.display_name if options.show_source_name else None
    line_number = origin.line_number if options.show_line_number else None

    lines: list[str] = []
    before = match.context.before
    for offset, content in enumerate(before):
        ctx_number = None if line_number is None else line_number - len(before) + offset
        prefix = _location_prefix(name, ctx_number, formatting, styles)
        lines.append(prefix + formatting.paint(content, styles.context))

    lines.append(format_selected_line(match, options))

    for offset, content in enumerate(match.context.after):
        ctx_number = None if line_number is None else line_number + 1 + offset
        prefix = _location_prefix(name, ctx_number, formatting, styles)
        lines.append(prefix + formatting.paint(content, styles.context))

    return lines


def iter_text_lines(result: SearchResult, options: PresentationOptions) -> Iterator[str]:
    for match in result.matches:
        yield from format_match(match, options)


def format_text(result: SearchResult, options: PresentationOptions | None = None) -> str:
    """Format ranked matches as text, one selected line per match."""
    return "\n".join(iter_text_lines(result, options or PresentationOptions()))


def match_to_dict(match: Match) -> dict:
    origin = match.origin
    return {
        "source": origin.display_name,
        "path": str(origin.path) if isinstance(origin, FileOrigin) else None,
        "line_number": origin.line_number,
        "text": match.text,
        "score": match.score,
        "positions": list(match.matched_positions),
        "context": {
            "before": list(match.context.before),
            "after": list(match.context.after),
        },
    }


def iter_json_lines(result: SearchResult) -> Iterator[str]:
    for match in result.matches:
        yield orjson.dumps(match_to_dict(match)).decode("utf-8")


def to_json_lines(result: SearchResult) -> str:
    """One compact JSON object per match, in ranked order."""
    return "\n".join(iter_json_lines(result))


def format_stats(stats: SearchStats) -> str:
    return (
        f"# files_scanned={stats.files_scanned} files_skipped={stats.files_skipped} "
        f"candidates={stats.candidates} matches={stats.matches} "
        f"elapsed_ms={stats.elapsed_ms:.2f}"
    )


def iter_result_lines(
    result: SearchResult, fmt: OutputFormat, options: PresentationOptions | None = None
) -> Iterator[str]:
    if fmt == OutputFormat.JSON:
        return iter_json_lines(result)
    return iter_text_lines(result, options or PresentationOptions())


def format_result(
    result: SearchResult, fmt: OutputFormat, options: PresentationOptions | None = None
) -> str:
    """Format search results according to the specified output format."""
    return "\n".join(iter_result_lines(result, fmt, options))
