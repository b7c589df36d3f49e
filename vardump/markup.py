"""
Canonical renderer: wraps a traversal fragment into the canonical HTML-like markup.

All other output formats are derived from this markup by vardump.derive.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import html
from typing import Any, Callable
from urllib.parse import quote

# Local ----------------------------------------------------------------------------------------------------------------
from .engine import dump_var
from .location import Location, find_location
from .options import DumpOptions

EDITOR_URI = "editor://open/?file={file}&line={line}"


# Methods --------------------------------------------------------------------------------------------------------------

def to_html(value: Any,
            options: DumpOptions,
            *,
            location_finder: Callable[[], Location | None] = find_location,
            ) -> str:
    """
    Render value into canonical markup.

    Args:
        value: Any Python value.
        options: Resolved dump options.
        location_finder: Collaborator returning the dump call site; called only when
            options.location is on. Its result is purely cosmetic.

    Returns:
        A '<pre class="dump">' block holding the rendered value.
    """
    location = location_finder() if options.location else None
    return wrap(dump_var(value, options), location)


def wrap(fragment: str, location: Location | None = None) -> str:
    """
    Wrap a traversal fragment in the outer block, with an optional call-site annotation.

    Examples:
        >>> wrap('<span class="dump-null">NULL</span>\\n')
        '<pre class="dump"><span class="dump-null">NULL</span>\\n</pre>'
    """
    if location is None:
        return f'<pre class="dump">{fragment}</pre>'

    file, line, code = location
    title = html.escape(f"{code}\nin file {file} on line {line}")
    href = html.escape(EDITOR_URI.format(file=quote(file, safe=""), line=line))
    return (f'<pre class="dump" title="{title}">{fragment}'
            f'<small>in <a href="{href}">{html.escape(file)}:{line}</a></small>\n'
            f"</pre>")
