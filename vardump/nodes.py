"""
Traversal-ready representation of a single value.

A Node is produced per value by the classifier and consumed by the traversal
engine. Child values are not classified until the engine descends into them.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import StrEnum, unique
from functools import cached_property
from typing import Any, Callable, Iterable


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(StrEnum):
    """Closed set of node variants the traversal engine dispatches on."""
    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    KEYED = "keyed"
    COMPOSITE = "composite"
    HANDLE = "handle"
    UNKNOWN = "unknown"


@unique
class Visibility(StrEnum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass(frozen=True)
class Field:
    """
    One child entry of a container, object or handle.

    Attributes:
        key: Key as shown: index, mapping key or field name.
        value: Child value, a reference into the dumped value graph.
        visibility: Visibility tag of object fields; None for container items.
    """
    key: Any
    value: Any
    visibility: Visibility | None = None


@dataclass(frozen=True)
class Node:
    """
    Classified value.

    Attributes:
        kind: Node variant.
        value: Scalar payload: bool, int, float or bytes for STRING. The value itself otherwise.
        label: Type label of containers, objects and handles.
        size: Child count of containers and objects.
        identity: Identity key used for cycle detection; None for scalars and handles.
        is_callable: Callable composite, expanded regardless of depth.
        summary: repr shown next to a field-less composite.
        source: Factory of child entries, called at most once.

    Child entries are materialized on first access of `fields`.
    """
    kind: Kind
    value: Any = None
    label: str = ""
    size: int = 0
    identity: int | None = None
    is_callable: bool = False
    summary: str | None = None
    source: Callable[[], Iterable[Field]] | None = field(default=None, repr=False, compare=False)

    @cached_property
    def fields(self) -> tuple[Field, ...]:
        return tuple(self.source()) if self.source is not None else ()

    @property
    def is_empty(self) -> bool:
        return self.size == 0
