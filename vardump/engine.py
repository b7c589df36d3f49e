"""
Traversal engine: recursive rendering of a value graph into canonical markup.

Each value is classified lazily while descending. Containers and objects honor
the depth cutoff, pre-collapse hint and cycle detection. Cycle detection tracks the
identities of containers and objects open on the current recursion path only: a
value reached again through a sibling branch is rendered again, a value that
contains itself is cut off with a RECURSION marker.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import html
import warnings
from contextlib import contextmanager
from typing import Any, Callable, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .classify import RESOURCES, classify
from .encoding import encode_key, encode_string
from .formatters import fmt_type
from .nodes import Field, Kind, Node, Visibility
from .options import DumpOptions

TRUNCATION_MARKER = " … (truncated)"
RECURSION_MARKER = "<i>RECURSION</i>"
ELLIPSIS_MARKER = "..."


# Classes --------------------------------------------------------------------------------------------------------------

class Dumper:
    """
    Renders one value into canonical markup.

    A Dumper holds the traversal state of a single top-level call: the options and
    the set of identities open on the current path. Create a new instance per call;
    instances are not meant to be shared between threads.

    Examples:
        >>> Dumper(DumpOptions()).dump(42)
        '<span class="dump-number">42</span>\\n'
    """

    def __init__(self, options: DumpOptions):
        self.options = options
        self._ancestors: set[int] = set()
        self._renderers: dict[Kind, Callable[[Node, int], str]] = {
            Kind.NULL: self._dump_null,
            Kind.BOOL: self._dump_bool,
            Kind.INTEGER: self._dump_integer,
            Kind.FLOAT: self._dump_float,
            Kind.STRING: self._dump_string,
            Kind.SEQUENCE: self._dump_container,
            Kind.KEYED: self._dump_container,
            Kind.COMPOSITE: self._dump_object,
            Kind.HANDLE: self._dump_handle,
            Kind.UNKNOWN: self._dump_unknown,
        }

    def dump(self, value: Any) -> str:
        """Render value as a top-level markup fragment."""
        return self._dump_var(value, 0)

    @property
    def ancestors(self) -> frozenset[int]:
        """Identities of containers and objects open on the current recursion path."""
        return frozenset(self._ancestors)

    # Dispatch -----------------------------------

    def _dump_var(self, value: Any, level: int) -> str:
        node = classify(value, truncate=self.options.truncate)
        return self._renderers[node.kind](node, level)

    @contextmanager
    def _visiting(self, node: Node) -> Iterator[None]:
        """Keep node identity in the ancestor set while its children are rendered."""
        self._ancestors.add(node.identity)
        try:
            yield
        finally:
            self._ancestors.discard(node.identity)

    def _admits_children(self, level: int) -> bool:
        depth = self.options.depth
        return not depth or level < depth

    # Scalars ------------------------------------

    def _dump_null(self, node: Node, level: int) -> str:
        return '<span class="dump-null">NULL</span>\n'

    def _dump_bool(self, node: Node, level: int) -> str:
        return f'<span class="dump-bool">{"TRUE" if node.value else "FALSE"}</span>\n'

    def _dump_integer(self, node: Node, level: int) -> str:
        return f'<span class="dump-number">{node.value}</span>\n'

    def _dump_float(self, node: Node, level: int) -> str:
        return f'<span class="dump-number">{format_float(node.value)}</span>\n'

    def _dump_string(self, node: Node, level: int) -> str:
        data: bytes = node.value
        limit = self.options.truncate
        if limit and len(data) > limit:
            shown = encode_string(data[:limit]) + TRUNCATION_MARKER
        else:
            shown = encode_string(data)
        length = f" ({len(data)})" if len(data) > 1 else ""
        return f'<span class="dump-string">{shown}</span>{length}\n'

    def _dump_unknown(self, node: Node, level: int) -> str:
        return '<span class="dump-unknown">unknown type</span>\n'

    # Containers and objects ---------------------

    def _dump_container(self, node: Node, level: int) -> str:
        out = f'<span class="dump-array">{html.escape(node.label)}</span> ('

        if node.is_empty:
            return out + "0)\n"

        if node.identity in self._ancestors:
            return out + f"{node.size}) [ {RECURSION_MARKER} ]\n"

        if self._admits_children(level):
            fields = self._read_fields(node)
            if fields is None:
                return self._dump_unknown(node, level)
            with self._visiting(node):
                return self._toggle(out + f"{node.size})", node, fields, level)

        return out + f"{node.size}) [ {ELLIPSIS_MARKER} ]\n"

    def _dump_object(self, node: Node, level: int) -> str:
        out = f'<span class="dump-object">{html.escape(node.label)}</span> ({node.size})'

        if node.is_empty:
            if node.summary is not None:
                out += " " + html.escape(node.summary)
            return out + "\n"

        if node.identity in self._ancestors:
            return out + f" {{ {RECURSION_MARKER} }}\n"

        if self._admits_children(level) or node.is_callable:
            fields = self._read_fields(node)
            if fields is None:
                return self._dump_unknown(node, level)
            with self._visiting(node):
                return self._toggle(out, node, fields, level)

        return out + f" {{ {ELLIPSIS_MARKER} }}\n"

    def _dump_handle(self, node: Node, level: int) -> str:
        out = f'<span class="dump-resource">{html.escape(node.label)} resource</span>'
        introspect = RESOURCES.get(node.label)
        if introspect is None:
            return out + "\n"

        try:
            pairs = list(introspect(node.value).items())
        except Exception as e:
            warnings.warn(f"cannot introspect {node.label} resource {fmt_type(node.value)}: "
                          f"{type(e).__name__}: {e}", RuntimeWarning, stacklevel=2)
            return out + "\n"

        out = f'<span class="toggle-collapsed">{out}</span>\n<div class="collapsed">'
        for key, value in pairs:
            out += (self._indent(level)
                    + f'<span class="dump-key">{html.escape(str(key))}</span> => '
                    + self._dump_var(value, level + 1))
        return out + "</div>"

    def _toggle(self, header: str, node: Node, fields: tuple[Field, ...], level: int) -> str:
        """Render a togglable header followed by the children block."""
        collapsed = node.size >= self.options.collapse
        if collapsed:
            out = f'<span class="toggle-collapsed">{header}</span>\n<div class="collapsed">'
        else:
            out = f'<span class="toggle">{header}</span>\n<div>'
        for field in fields:
            out += self._dump_field(field, level)
        return out + "</div>"

    def _read_fields(self, node: Node) -> tuple[Field, ...] | None:
        """Materialize child entries of node; None with a RuntimeWarning when listing them fails."""
        try:
            return node.fields
        except Exception as e:
            warnings.warn(f"cannot read children of {fmt_type(node.value)} value: {type(e).__name__}: {e}",
                          RuntimeWarning, stacklevel=2)
            return None

    def _dump_field(self, field: Field, level: int) -> str:
        visibility = ""
        if field.visibility is not None and field.visibility is not Visibility.PUBLIC:
            visibility = f' <span class="dump-visibility">{field.visibility}</span>'
        return (self._indent(level)
                + f'<span class="dump-key">{encode_key(field.key)}</span>{visibility} => '
                + self._dump_var(field.value, level + 1))

    @staticmethod
    def _indent(level: int) -> str:
        return '<span class="dump-indent">   ' + "|  " * level + "</span>"


# Methods --------------------------------------------------------------------------------------------------------------

def dump_var(value: Any, options: DumpOptions) -> str:
    """Render value into a canonical markup fragment with a fresh traversal state."""
    return Dumper(options).dump(value)


def format_float(value: float) -> str:
    """
    Round-trip safe decimal form of a float, visually distinct from an int.

    Examples:
        >>> format_float(3.0)
        '3.0'
        >>> format_float(1e20)
        '1e+20'
        >>> format_float(float("nan"))
        'nan'
    """
    text = repr(value)
    if not any(ch in text for ch in ".eEn"):
        text += ".0"
    return text
