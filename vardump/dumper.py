"""
Dump any Python value as a bounded, human-readable structural tree.

Entry points:
    render(): canonical HTML-like markup.
    to_text(): plain text derived from the markup.
    to_terminal(): ANSI colored text derived from the markup.
    dump(): writes the format fitting the output stream and returns the value.

Examples:
    >>> print(to_text({"a": 1, "b": [1.0, None]}), end="")
    dict (2)
       a => 1
       b => list (2)
       |  0 => 1.0
       |  1 => NULL
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import os
import sys
from typing import Any, Literal, TextIO

# Local ----------------------------------------------------------------------------------------------------------------
from .derive import html_to_terminal, html_to_text
from .formatters import fmt_value
from .markup import to_html
from .options import DumpOptions, InvalidOptionsError, resolve_options

Format = Literal["html", "terminal", "text"]
FORMATS: tuple[str, ...] = ("html", "terminal", "text")
FORMAT_ENV = "VARDUMP_FORMAT"


# Methods --------------------------------------------------------------------------------------------------------------

def render(value: Any, options: DumpOptions | abc.Mapping[str, Any] | None = None, **overrides: Any) -> str:
    """
    Render value into canonical markup.

    Never raises on value shapes: unrecognized values render as "unknown type",
    self-containing values as RECURSION markers.

    Args:
        value: Any Python value.
        options: DumpOptions, a mapping of option names, or None for module defaults.
        overrides: Option names overriding options, e.g. depth=2.

    Raises:
        InvalidOptionsError: If an option is unknown or a bound is negative.
        TypeError: If an option has the wrong type.
    """
    return to_html(value, resolve_options(options, **overrides))


def to_text(value: Any, options: DumpOptions | abc.Mapping[str, Any] | None = None, **overrides: Any) -> str:
    """Render value as plain text: canonical markup with tags stripped and entities decoded."""
    return html_to_text(render(value, options, **overrides))


def to_terminal(value: Any, options: DumpOptions | abc.Mapping[str, Any] | None = None, **overrides: Any) -> str:
    """Render value as text colored with ANSI escape sequences."""
    return html_to_terminal(render(value, options, **overrides))


def dump(value: Any,
         options: DumpOptions | abc.Mapping[str, Any] | None = None,
         *,
         file: TextIO | None = None,
         format: Format | None = None,
         **overrides: Any) -> Any:
    """
    Write value dump to file and return value unchanged, so calls can be inlined.

    Args:
        value: Any Python value.
        options: DumpOptions, a mapping of option names, or None for module defaults.
        file: Output stream, sys.stdout by default.
        format: Output format; detected from the stream and environment when None.
        overrides: Option names overriding options.

    Examples:
        >>> total = dump(2 + 2, format="text")
        4
        >>> total
        4
    """
    stream = file if file is not None else sys.stdout
    renderers = {"html": render, "terminal": to_terminal, "text": to_text}
    format = format if format is not None else detect_format(stream)
    if format not in renderers:
        raise InvalidOptionsError(f"format expected one of 'html', 'terminal', 'text' but found {fmt_value(format)}")

    stream.write(renderers[format](value, options, **overrides))
    return value


def detect_format(stream: TextIO | None = None, environ: abc.Mapping[str, str] | None = None) -> Format:
    """
    Pick the output format for a stream.

    The VARDUMP_FORMAT environment variable wins when set to a known format. Otherwise
    a TTY stream on an xterm-like terminal gets colors unless NO_COLOR is set,
    anything else gets plain text.
    """
    stream = stream if stream is not None else sys.stdout
    environ = environ if environ is not None else os.environ

    requested = environ.get(FORMAT_ENV, "").strip().lower()
    if requested in FORMATS:
        return requested

    isatty = getattr(stream, "isatty", None)
    try:
        tty = bool(isatty()) if callable(isatty) else False
    except (OSError, ValueError):
        tty = False

    if tty and environ.get("TERM", "").startswith("xterm") and "NO_COLOR" not in environ:
        return "terminal"
    return "text"
