"""
Value classification: map an arbitrary Python value onto a Node variant.

The classifier is the only place that introspects values; the traversal engine
works on Node variants alone. Object fields come from __dict__ and __slots__ with
visibility derived from Python name mangling, callables get synthesized fields,
and external handles (files, sockets, threads, modules ...) are recognized by type
and introspected through the RESOURCES registry.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import inspect
import io
import socket
import threading
import types
import warnings
from types import MappingProxyType
from typing import Any, Callable, Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, safe_repr
from .nodes import Field, Kind, Node, Visibility
from .utils import class_name

PRIVATE_MARKER = "\x00"
PROTECTED_SENTINEL = "*"


# Resource introspectors -----------------------------------------------------------------------------------------------

def _stream_meta(stream: io.IOBase) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "name": getattr(stream, "name", None),
        "mode": getattr(stream, "mode", None),
        "closed": stream.closed,
    }
    if not stream.closed:
        meta.update(readable=stream.readable(), writable=stream.writable(), seekable=stream.seekable())
    return meta


def _socket_meta(sock: socket.socket) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "fd": sock.fileno(),
        "family": getattr(sock.family, "name", sock.family),
        "type": getattr(sock.type, "name", sock.type),
        "timeout": sock.gettimeout(),
    }
    if meta["fd"] != -1:
        try:
            meta["local"] = sock.getsockname()
        except OSError:
            meta["local"] = None
    return meta


def _thread_meta(thread: threading.Thread) -> dict[str, Any]:
    return {
        "name": thread.name,
        "ident": thread.ident,
        "alive": thread.is_alive(),
        "daemon": thread.daemon,
    }


def _module_meta(module: types.ModuleType) -> dict[str, Any]:
    return {
        "name": module.__name__,
        "file": getattr(module, "__file__", None),
        "package": getattr(module, "__package__", None),
    }


RESOURCES: MappingProxyType[str, Callable[[Any], abc.Mapping[str, Any]]] = MappingProxyType({
    "stream": _stream_meta,
    "socket": _socket_meta,
    "thread": _thread_meta,
    "module": _module_meta,
})
"""Introspectable handle types: handle type name -> function returning ordered key/value pairs."""

_HANDLE_TYPES: tuple[tuple[type | tuple[type, ...], str], ...] = (
    (io.IOBase, "stream"),
    (socket.socket, "socket"),
    (threading.Thread, "thread"),
    (types.ModuleType, "module"),
    (type, "class"),
    ((types.GeneratorType, types.AsyncGeneratorType), "generator"),
    (types.CoroutineType, "coroutine"),
    (types.FrameType, "frame"),
    (types.CodeType, "code"),
)


# Methods --------------------------------------------------------------------------------------------------------------

def classify(value: Any, *, truncate: int = 150) -> Node:
    """
    Classify value into a Node.

    Never raises: a value whose introspection fails is classified as UNKNOWN and
    a RuntimeWarning is emitted.

    Args:
        value: Any Python value.
        truncate: Repr length limit for the summary of field-less objects; 0 means unlimited.

    Examples:
        >>> classify(None).kind
        <Kind.NULL: 'null'>
        >>> classify({"a": 1}).size
        1
    """
    try:
        return _classify(value, truncate)
    except Exception as e:
        warnings.warn(f"cannot classify {fmt_type(value)} value: {type(e).__name__}: {e}", RuntimeWarning,
                      stacklevel=2)
        return Node(Kind.UNKNOWN, value=None, label=class_name(value))


def resource_type(value: Any) -> str | None:
    """
    Return the handle type name of an external handle, or None if value is not a handle.

    Examples:
        >>> import sys
        >>> resource_type(sys)
        'module'
        >>> resource_type(42) is None
        True
    """
    for types_, name in _HANDLE_TYPES:
        if isinstance(value, types_):
            return name
    return None


def split_mangled(name: str, cls: type | None = None) -> tuple[str, Visibility]:
    """
    Split a field name into the displayed key and its visibility tag.

    Two conventions are recognized:

    - Python name mangling: "_Cls__x" is private when Cls names a class in the MRO of cls
      (any class when cls is None); "_x" is protected. Dunder names are public.
    - Marker form: "\\0Cls\\0x" is private, "\\0*\\0x" is protected; the displayed key is
      the remainder after the last marker.

    Examples:
        >>> split_mangled("_Point__x")
        ('x', <Visibility.PRIVATE: 'private'>)
        >>> split_mangled("_cache")
        ('cache', <Visibility.PROTECTED: 'protected'>)
        >>> split_mangled("\\x00*\\x00y")
        ('y', <Visibility.PROTECTED: 'protected'>)
    """
    if name.startswith(PRIVATE_MARKER) and PRIVATE_MARKER in name[1:]:
        head, _, key = name[1:].rpartition(PRIVATE_MARKER)
        visibility = Visibility.PROTECTED if head == PROTECTED_SENTINEL else Visibility.PRIVATE
        return key, visibility

    if not name.startswith("_") or name.startswith("__") or name == "_":
        return name, Visibility.PUBLIC

    owner, sep, key = name[1:].partition("__")
    if sep and owner and key and not owner.startswith("_"):
        owners = {c.__name__.lstrip("_") for c in cls.__mro__} if cls is not None else None
        if owners is None or owner in owners:
            return key, Visibility.PRIVATE
    return name[1:], Visibility.PROTECTED


def callable_fields(fn: Callable) -> list[Field]:
    """
    Synthesize the fields of a callable: defining file, first line and parameters.

    File and line are None for callables without Python source, parameters is
    None when no signature is available.

    Examples:
        >>> [f.key for f in callable_fields(lambda a, b=1: a)]
        ['file', 'line', 'parameters']
    """
    target = inspect.unwrap(getattr(fn, "__func__", fn))
    code = getattr(target, "__code__", None)
    file = code.co_filename if code is not None else None
    line = code.co_firstlineno if code is not None else None
    try:
        parameters = ", ".join(str(p) for p in inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        parameters = None
    return [Field("file", file), Field("line", line), Field("parameters", parameters)]


def object_fields(obj: Any) -> list[Field]:
    """
    Enumerate instance fields of obj: __dict__ entries first, then __slots__ across the MRO.

    Unset slots are skipped. Each field carries its visibility tag.
    """
    cls = type(obj)
    result: list[Field] = []
    seen: set[str] = set()

    try:
        instance_dict = object.__getattribute__(obj, "__dict__")
    except AttributeError:
        instance_dict = {}
    if not isinstance(instance_dict, abc.Mapping):
        raise TypeError(f"__dict__ must be a mapping, but got {fmt_type(instance_dict)}")

    for name, value in instance_dict.items():
        name = str(name)
        seen.add(name)
        key, visibility = split_mangled(name, cls)
        result.append(Field(key, value, visibility))

    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            name = f"_{klass.__name__.lstrip('_')}{slot}" if slot.startswith("__") and not slot.endswith("__") \
                else slot
            if name in seen:
                continue
            seen.add(name)
            try:
                value = object.__getattribute__(obj, name)
            except AttributeError:
                continue
            key, visibility = split_mangled(name, cls)
            result.append(Field(key, value, visibility))

    return result


# Private Methods ------------------------------------------------------------------------------------------------------

def _classify(value: Any, truncate: int) -> Node:
    if value is None:
        return Node(Kind.NULL)
    if isinstance(value, bool):
        return Node(Kind.BOOL, value=value)
    if isinstance(value, int):
        return Node(Kind.INTEGER, value=int(value))
    if isinstance(value, float):
        return Node(Kind.FLOAT, value=float(value))
    if isinstance(value, str):
        return Node(Kind.STRING, value=value.encode("utf-8", "surrogatepass"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Node(Kind.STRING, value=bytes(value))

    if _is_namedtuple(value):
        return _container(Kind.KEYED, value, lambda: (Field(k, v) for k, v in zip(value._fields, value)))
    if isinstance(value, abc.Mapping):
        return _container(Kind.KEYED, value, lambda: (Field(k, v) for k, v in value.items()))
    if isinstance(value, abc.Set):
        return _container(Kind.SEQUENCE, value, lambda: (Field(i, v) for i, v in enumerate(_stable_order(value))))
    if isinstance(value, abc.Sequence):
        return _container(Kind.SEQUENCE, value, lambda: (Field(i, v) for i, v in enumerate(value)))

    handle = resource_type(value)
    if handle is not None:
        label = f"{handle} {value.__qualname__}" if handle == "class" else handle
        return Node(Kind.HANDLE, value=value, label=label)

    if inspect.isroutine(value):
        fields = callable_fields(value)
        return Node(Kind.COMPOSITE, value=value, label=class_name(value), size=len(fields),
                    identity=id(value), is_callable=True, source=lambda: fields)

    fields = object_fields(value)
    summary = None
    if not fields:
        summary = safe_repr(value)
        if truncate and len(summary) > truncate:
            summary = summary[:truncate] + "…"
    return Node(Kind.COMPOSITE, value=value, label=class_name(value), size=len(fields),
                identity=id(value), summary=summary, source=lambda: fields)


def _container(kind: Kind, value: Any, source: Callable[[], Iterable[Field]]) -> Node:
    return Node(kind, value=value, label=class_name(value), size=len(value), identity=id(value), source=source)


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(type(value), "_fields", None), tuple)


def _stable_order(items: abc.Set) -> list[Any]:
    """Sorted elements when they compare, iteration order otherwise."""
    elements = list(items)
    try:
        return sorted(elements)
    except Exception:
        return elements
