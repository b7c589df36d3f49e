"""
Format derivers: plain text and terminal colors from canonical markup.

Derivation is a post-process over the markup alone; values are never traversed
again. Canonical markup escapes all text content, so every '<' opens a tag, and
kind-tagged spans never nest, so one linear scan over tag boundaries suffices.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import html
from types import MappingProxyType
from typing import Callable

KIND_PREFIX = "dump-"
RESET = "\033[0m"

TERMINAL_COLORS: MappingProxyType[str, str] = MappingProxyType({
    "bool": "1;33",
    "null": "1;33",
    "number": "1;32",
    "string": "1;36",
    "array": "1;31",
    "key": "1;37",
    "object": "1;31",
    "visibility": "1;30",
    "resource": "1;37",
    "indent": "1;30",
})
"""SGR color codes per span kind; kinds missing here render with the reset sequence."""


# Methods --------------------------------------------------------------------------------------------------------------

def html_to_text(markup: str) -> str:
    """
    Strip all tags from canonical markup and decode entities.

    Examples:
        >>> html_to_text('<span class="dump-string">"a &lt; b"</span> (5)\\n')
        '"a < b" (5)\\n'
    """
    return html.unescape(strip_tags(markup))


def html_to_terminal(markup: str, colors: MappingProxyType[str, str] | dict[str, str] = TERMINAL_COLORS) -> str:
    """
    Turn kind-tagged spans of canonical markup into ANSI colors, strip other tags and decode entities.

    Each '<span class="dump-KIND">' becomes the color of KIND (reset for unknown kinds),
    each '</span>' becomes the reset sequence.

    Examples:
        >>> html_to_terminal('<span class="dump-null">NULL</span>\\n')
        '\\x1b[1;33mNULL\\x1b[0m\\n'
    """

    def on_tag(tag: str) -> str:
        if tag == "</span>":
            return RESET
        kind = _span_kind(tag)
        if kind is None:
            return ""
        return f"\033[{colors.get(kind, '0')}m"

    return html.unescape(_scan_tags(markup, on_tag))


def strip_tags(markup: str) -> str:
    """Remove every tag, keeping text content as is."""
    return _scan_tags(markup, lambda tag: "")


# Private Methods ------------------------------------------------------------------------------------------------------

def _scan_tags(markup: str, on_tag: Callable[[str], str]) -> str:
    """Copy text content, replacing each tag by on_tag(tag); an unterminated tag is kept as text."""
    parts: list[str] = []
    pos = 0
    while True:
        start = markup.find("<", pos)
        if start < 0:
            break
        end = markup.find(">", start)
        if end < 0:
            break
        parts.append(markup[pos:start])
        parts.append(on_tag(markup[start:end + 1]))
        pos = end + 1
    parts.append(markup[pos:])
    return "".join(parts)


def _span_kind(tag: str) -> str | None:
    """Return KIND of '<span class="dump-KIND">', None for any other tag."""
    prefix = f'<span class="{KIND_PREFIX}'
    if not tag.startswith(prefix) or not tag.endswith('">'):
        return None
    kind = tag[len(prefix):-2]
    return kind if kind.isidentifier() else None
