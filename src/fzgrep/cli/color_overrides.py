"""
Parsing of grep-style color overrides.

``--color-overrides`` accepts the same syntax as grep's ``GREP_COLORS``: a
colon separated list of ``cap=SGR`` pairs, for example
``ms=01;31:ln=32:fn=35:se=36``. Each SGR sequence is turned into a ``rich``
``Style`` and the styles are collected into a ``StyleSet``.

Supported capabilities:
    ms  matching text in a selected line
    ln  line numbers
    fn  source (file) names
    se  separators
    sl  the non-matching part of a selected line
    cx  context lines

``bn`` and ``mt`` are recognised but not supported; anything else is an
error. Every problem raises a ``ConfigurationError`` subclass so the CLI can
treat it like any other fatal setting.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace

from rich.color import Color
from rich.style import Style

from ..utils.error_handling import ConfigurationError
from ..utils.formatter import StyleSet

CAPABILITIES = {
    "ms": "selected_match",
    "ln": "line_number",
    "fn": "source_name",
    "se": "separator",
    "sl": "selected_line",
    "cx": "context",
}
UNSUPPORTED_CAPABILITIES = frozenset({"bn", "mt"})

_ATTRIBUTES = {
    1: "bold",
    2: "dim",
    3: "italic",
    4: "underline",
    5: "blink",
    6: "blink",
    7: "reverse",
    8: "conceal",
    9: "strike",
}


class ColorOverrideError(ConfigurationError):
    """A ``--color-overrides`` value that cannot be used."""


class StyleSequenceError(ColorOverrideError):
    """An SGR sequence that cannot be turned into a style."""


def _parse_code(token: str) -> int:
    try:
        code = int(token)
    except ValueError:
        code = -1
    if not token.isdigit() or not 0 <= code <= 255:
        raise StyleSequenceError(f"'{token}' is not an 8-bit code")
    return code


def _color_from(code: int, tokens: Iterator[str]) -> Color:
    suffix = code % 10
    if suffix < 8:
        return Color.from_ansi(suffix)
    if suffix == 9:
        return Color.default()

    kind_token = next(tokens, None)
    if kind_token is None:
        raise StyleSequenceError(f"Incomplete color sequence after '{code}'")
    kind = _parse_code(kind_token)
    if kind == 5:
        value = next(tokens, None)
        if value is None:
            raise StyleSequenceError("256-color sequence is missing the color number")
        return Color.from_ansi(_parse_code(value))
    if kind == 2:
        rgb = [next(tokens, None) for _ in range(3)]
        if any(part is None for part in rgb):
            raise StyleSequenceError("True color sequence needs red, green and blue values")
        red, green, blue = (_parse_code(part) for part in rgb)
        return Color.from_rgb(red, green, blue)
    raise StyleSequenceError(f"Color type '{kind}' is invalid")


def style_from(sgr_sequence: str) -> Style:
    """
    Convert an SGR parameter string such as ``01;38;5;208`` into a Style.

    Empty parameters are ignored and ``0`` resets nothing, so ``""`` and
    ``"0"`` both give a null style.
    """
    style = Style()
    tokens = iter(sgr_sequence.split(";"))
    for token in tokens:
        if not token:
            continue
        code = _parse_code(token)
        if code == 0:
            continue
        if code in _ATTRIBUTES:
            style += Style(**{_ATTRIBUTES[code]: True})
        elif 30 <= code <= 39:
            style += Style(color=_color_from(code, tokens))
        elif 40 <= code <= 49:
            style += Style(bgcolor=_color_from(code, tokens))
        elif 10 <= code <= 29 or 50 <= code <= 107:
            raise StyleSequenceError(f"Code '{code}' is unsupported")
        else:
            raise StyleSequenceError(f"Code '{code}' is invalid")
    return style


def parse_color_overrides(value: str, base: StyleSet | None = None) -> StyleSet:
    """Apply ``cap=SGR`` overrides on top of ``base`` (default styles if omitted)."""
    styles = base or StyleSet()
    for token in value.split(":"):
        if not token:
            continue
        cap, sep, sgr = token.partition("=")
        if not sep:
            raise ColorOverrideError(f"'{token}' is not a color override")
        if cap in UNSUPPORTED_CAPABILITIES:
            raise ColorOverrideError(f"Capability '{cap}' is not supported")
        field_name = CAPABILITIES.get(cap)
        if field_name is None:
            raise ColorOverrideError(f"'{cap}' is not a known capability")
        try:
            style = style_from(sgr)
        except StyleSequenceError as e:
            raise StyleSequenceError(f"Bad style sequence for '{cap}': {e.message}") from e
        styles = replace(styles, **{field_name: style})
    return styles
