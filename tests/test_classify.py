#
# Vardump - Classify Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import collections
import io
import sys
import threading
from dataclasses import dataclass

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
import vardump.classify
from vardump.classify import RESOURCES, callable_fields, classify, object_fields, resource_type, split_mangled
from vardump.nodes import Kind, Visibility


# Classes --------------------------------------------------------------------------------------------------------------

class Account:
    def __init__(self):
        self.owner = "ann"
        self._balance = 10
        self.__pin = 1234


class Slotted:
    __slots__ = ("x", "y", "__secret")

    def __init__(self):
        self.x = 1
        self._Slotted__secret = 2


@dataclass
class Point:
    x: int
    y: int


Pair = collections.namedtuple("Pair", "left right")


def sample(a, b=1, *args, key=None):
    return a


# Tests ----------------------------------------------------------------------------------------------------------------

class TestClassifyKinds:
    @pytest.mark.parametrize(
        "value, kind",
        [
            pytest.param(None, Kind.NULL, id="none"),
            pytest.param(True, Kind.BOOL, id="bool"),
            pytest.param(7, Kind.INTEGER, id="int"),
            pytest.param(7.5, Kind.FLOAT, id="float"),
            pytest.param("s", Kind.STRING, id="str"),
            pytest.param(b"s", Kind.STRING, id="bytes"),
            pytest.param(bytearray(b"s"), Kind.STRING, id="bytearray"),
            pytest.param([1], Kind.SEQUENCE, id="list"),
            pytest.param((1,), Kind.SEQUENCE, id="tuple"),
            pytest.param(collections.deque([1]), Kind.SEQUENCE, id="deque"),
            pytest.param(range(3), Kind.SEQUENCE, id="range"),
            pytest.param({1}, Kind.SEQUENCE, id="set"),
            pytest.param({"a": 1}, Kind.KEYED, id="dict"),
            pytest.param(frozendict(a=1), Kind.KEYED, id="frozendict"),
            pytest.param(Pair(1, 2), Kind.KEYED, id="namedtuple"),
            pytest.param(Point(1, 2), Kind.COMPOSITE, id="dataclass"),
            pytest.param(sample, Kind.COMPOSITE, id="function"),
            pytest.param(len, Kind.COMPOSITE, id="builtin"),
            pytest.param(sys, Kind.HANDLE, id="module"),
            pytest.param(int, Kind.HANDLE, id="class"),
        ],
    )
    def test_kind(self, value, kind):
        """Map Python values onto node variants."""
        assert classify(value).kind is kind

    def test_bool_is_not_integer(self):
        """Classify bool before int."""
        node = classify(False)
        assert node.kind is Kind.BOOL
        assert node.value is False

    def test_str_payload_is_utf8(self):
        """Carry str as its UTF-8 bytes."""
        node = classify("héllo")
        assert node.value == "héllo".encode()

    def test_container_payload(self):
        """Carry label, size and identity of containers."""
        value = [10, 20]
        node = classify(value)
        assert node.label == "list"
        assert node.size == 2
        assert node.identity == id(value)
        assert [(f.key, f.value) for f in node.fields] == [(0, 10), (1, 20)]

    def test_mapping_keeps_order(self):
        """Keep mapping insertion order."""
        node = classify({"b": 1, "a": 2})
        assert [f.key for f in node.fields] == ["b", "a"]

    def test_namedtuple_keys(self):
        """Key namedtuple items by field name."""
        node = classify(Pair(1, 2))
        assert node.label == "Pair"
        assert [(f.key, f.value) for f in node.fields] == [("left", 1), ("right", 2)]

    def test_set_sorted(self):
        """Order set elements when they sort."""
        node = classify({3, 1, 2})
        assert [f.value for f in node.fields] == [1, 2, 3]

    def test_set_unsortable(self):
        """Fall back to iteration order for unsortable elements."""
        node = classify({1, "a"})
        assert {f.value for f in node.fields} == {1, "a"}
        assert [f.key for f in node.fields] == [0, 1]

    def test_fields_lazy(self):
        """Do not enumerate container items until fields are accessed."""
        calls = []

        class Tracking(list):
            def __iter__(self):
                calls.append(1)
                return super().__iter__()

        node = classify(Tracking([1, 2]))
        assert node.size == 2
        assert calls == []
        assert len(node.fields) == 2
        assert calls == [1]

    def test_object_summary_when_fieldless(self):
        """Attach a repr summary to objects without fields."""
        node = classify(object.__new__(type("Empty", (), {"__repr__": lambda self: "Empty()"})))
        assert node.kind is Kind.COMPOSITE
        assert node.size == 0
        assert node.summary == "Empty()"

    def test_summary_truncated(self):
        """Cut long summaries at the truncate limit."""
        cls = type("Long", (), {"__repr__": lambda self: "x" * 50})
        assert classify(cls(), truncate=10).summary == "x" * 10 + "…"

    def test_callable_flag(self):
        """Mark routines as callable composites."""
        node = classify(sample)
        assert node.is_callable
        assert node.label == "function"
        assert [f.key for f in node.fields] == ["file", "line", "parameters"]

    def test_unknown_on_failure(self, monkeypatch):
        """Degrade to UNKNOWN with a warning when introspection fails."""

        def broken(obj):
            raise RuntimeError("boom")

        monkeypatch.setattr(vardump.classify, "object_fields", broken)
        with pytest.warns(RuntimeWarning, match="boom"):
            node = classify(Point(1, 2))
        assert node.kind is Kind.UNKNOWN
        assert node.label == "Point"


class TestObjectFields:
    def test_visibility(self):
        """Tag public, protected and private instance fields."""
        fields = object_fields(Account())
        assert [(f.key, f.value, f.visibility) for f in fields] == [
            ("owner", "ann", Visibility.PUBLIC),
            ("balance", 10, Visibility.PROTECTED),
            ("pin", 1234, Visibility.PRIVATE),
        ]

    def test_slots(self):
        """Read set slots, skip unset ones, unmangle private slots."""
        fields = object_fields(Slotted())
        assert [(f.key, f.value, f.visibility) for f in fields] == [
            ("x", 1, Visibility.PUBLIC),
            ("secret", 2, Visibility.PRIVATE),
        ]

    def test_dataclass_order(self):
        """Keep dataclass field order."""
        assert [(f.key, f.value) for f in object_fields(Point(3, 4))] == [("x", 3), ("y", 4)]

    def test_no_fields(self):
        """Return no fields for objects without __dict__ or slots."""
        assert object_fields(object()) == []

    def test_bypasses_getattr_hooks(self):
        """Read fields without triggering __getattribute__ overrides."""

        class Guarded:
            def __init__(self):
                self.a = 1

            def __getattribute__(self, name):
                raise AttributeError(name)

        assert [(f.key, f.value) for f in object_fields(Guarded())] == [("a", 1)]


class TestSplitMangled:
    @pytest.mark.parametrize(
        "name, expected",
        [
            pytest.param("plain", ("plain", Visibility.PUBLIC), id="public"),
            pytest.param("__dunder__", ("__dunder__", Visibility.PUBLIC), id="dunder"),
            pytest.param("_cache", ("cache", Visibility.PROTECTED), id="protected"),
            pytest.param("_", ("_", Visibility.PUBLIC), id="bare-underscore"),
            pytest.param("_Point__x", ("x", Visibility.PRIVATE), id="mangled"),
            pytest.param("\x00Point\x00x", ("x", Visibility.PRIVATE), id="marker-private"),
            pytest.param("\x00*\x00y", ("y", Visibility.PROTECTED), id="marker-protected"),
            pytest.param("\x00A\x00B\x00z", ("z", Visibility.PRIVATE), id="marker-last-terminator"),
        ],
    )
    def test_split(self, name, expected):
        """Derive displayed key and visibility from the name convention."""
        assert split_mangled(name) == expected

    def test_owner_outside_mro(self):
        """Treat a mangled-looking name as protected when the owner is not in the MRO."""
        assert split_mangled("_Other__x", Account) == ("Other__x", Visibility.PROTECTED)

    def test_owner_in_mro(self):
        """Unmangle names owned by a class of the MRO."""
        assert split_mangled("_Account__pin", Account) == ("pin", Visibility.PRIVATE)


class TestCallableFields:
    def test_function(self):
        """Synthesize file, line and parameters of a Python function."""
        file, line, parameters = (f.value for f in callable_fields(sample))
        assert file == sample.__code__.co_filename
        assert line == sample.__code__.co_firstlineno
        assert parameters == "a, b=1, *args, key=None"

    def test_bound_method(self):
        """Exclude the bound instance from method parameters."""

        class Greeter:
            def greet(self, name):
                return name

        fields = {f.key: f.value for f in callable_fields(Greeter().greet)}
        assert fields["parameters"] == "name"
        assert fields["line"] == Greeter.greet.__code__.co_firstlineno

    def test_builtin(self):
        """Leave file and line empty for builtins."""
        fields = {f.key: f.value for f in callable_fields(len)}
        assert fields["file"] is None
        assert fields["line"] is None
        assert fields["parameters"] == "obj"


class TestResources:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(io.StringIO(), "stream", id="stringio"),
            pytest.param(sys, "module", id="module"),
            pytest.param(threading.current_thread(), "thread", id="thread"),
            pytest.param(int, "class", id="class"),
            pytest.param((i for i in ()), "generator", id="generator"),
            pytest.param(42, None, id="int"),
            pytest.param(Point(1, 2), None, id="object"),
        ],
    )
    def test_resource_type(self, value, expected):
        """Recognize external handles by type."""
        assert resource_type(value) == expected

    def test_registry(self):
        """Expose a read-only registry of introspectable handle types."""
        assert set(RESOURCES) == {"stream", "socket", "thread", "module"}
        with pytest.raises(TypeError):
            RESOURCES["curl"] = dict  # type: ignore[index]

    def test_stream_meta(self):
        """Introspect an open stream."""
        meta = RESOURCES["stream"](io.BytesIO(b"data"))
        assert meta["closed"] is False
        assert meta["readable"] is True
        assert meta["seekable"] is True

    def test_closed_stream_meta(self):
        """Skip capability checks on a closed stream."""
        stream = io.StringIO()
        stream.close()
        assert RESOURCES["stream"](stream) == {"name": None, "mode": None, "closed": True}

    def test_handle_label(self):
        """Label classes by qualified name."""
        assert classify(Point).label == "class Point"
        assert classify(sys).label == "module"
