"""
Dump options: validated, immutable configuration resolved once per dump call.

Options are a frozen dataclass with presets and UNSET-based merging. Module-level
defaults are changed via configure() and may be loaded from the [tool.vardump]
table of a pyproject.toml.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import threading
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Literal, Self

# Third-party ----------------------------------------------------------------------------------------------------------
import toml

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value
from .sentinels import UNSET, UnsetType, ifnotunset

Preset = Literal["compact", "debug", "default", "full"]


# Classes --------------------------------------------------------------------------------------------------------------

class InvalidOptionsError(ValueError):
    """Raised when dump options are malformed: unknown name, negative bound or unknown preset."""


@dataclass(frozen=True)
class DumpOptions:
    """
    Configuration of a single dump call.

    Attributes:
        depth: How many nested levels of containers and objects are expanded before
            collapsing to "[ ... ]"; 0 means unlimited.
        truncate: Maximum bytes of a string shown before the truncation marker; 0 means unlimited.
        collapse: Minimum child count at which a container is rendered pre-collapsed
            (still expandable in HTML output).
        location: Whether to annotate output with the file and line of the dump call.

    Raises:
        TypeError: If a bound is not an int or location is not a bool.
        InvalidOptionsError: If a bound is negative.

    Examples:
        >>> DumpOptions()
        DumpOptions(depth=4, truncate=150, collapse=7, location=False)
        >>> DumpOptions(depth=-1)
        Traceback (most recent call last):
        ...
        vardump.options.InvalidOptionsError: depth must be >= 0 (0 means unlimited), but got <int: -1>
    """
    depth: int = 4
    truncate: int = 150
    collapse: int = 7
    location: bool = False

    def __post_init__(self) -> None:
        """Validate field types and bounds."""
        for name in ("depth", "truncate", "collapse"):
            val = getattr(self, name)
            if isinstance(val, bool) or not isinstance(val, int):
                raise TypeError(f"{name} must be an int, but got {fmt_type(val)}")
            if val < 0:
                hint = " (0 means unlimited)" if name != "collapse" else ""
                raise InvalidOptionsError(f"{name} must be >= 0{hint}, but got {fmt_value(val)}")
        if not isinstance(self.location, bool):
            raise TypeError(f"location must be a bool, but got {fmt_type(self.location)}")

    @classmethod
    def compact(cls) -> Self:
        """Shallow dumps with short strings, for log lines and quick looks."""
        return cls(depth=2, truncate=60, collapse=5)

    @classmethod
    def debug(cls) -> Self:
        """Deeper dumps annotated with the call site."""
        return cls(depth=8, truncate=500, location=True)

    @classmethod
    def full(cls) -> Self:
        """Unlimited depth and string length, nothing pre-collapsed."""
        return cls(depth=0, truncate=0, collapse=2 ** 31)

    @classmethod
    def from_preset(cls, preset: Preset) -> Self:
        """
        Create options from a preset name.

        Raises:
            InvalidOptionsError: If preset is not one of 'compact', 'debug', 'default', 'full'.
        """
        factories = {
            "compact": cls.compact,
            "debug": cls.debug,
            "default": cls,
            "full": cls.full,
        }
        if preset not in factories:
            raise InvalidOptionsError(f"preset expected one of 'compact', 'debug', 'default', 'full' "
                                      f"but found {fmt_value(preset)}")
        return factories[preset]()

    @classmethod
    def from_mapping(cls, mapping: abc.Mapping[str, Any], base: "DumpOptions | None" = None) -> Self:
        """
        Create options from a mapping of option names, on top of base (defaults if None).

        Raises:
            InvalidOptionsError: If the mapping contains an unknown option name.
        """
        known = {f.name for f in fields(cls)}
        unknown = [k for k in mapping if k not in known]
        if unknown:
            raise InvalidOptionsError(f"unknown option {fmt_value(unknown[0])}, "
                                      f"expected one of {', '.join(sorted(known))}")
        return replace(base if base is not None else cls(), **mapping)

    def merge(self,
              depth: int | UnsetType = UNSET,
              truncate: int | UnsetType = UNSET,
              collapse: int | UnsetType = UNSET,
              location: bool | UnsetType = UNSET,
              ) -> Self:
        """
        Create a new DumpOptions instance with merged configuration options.

        Parameters not provided (UNSET) are inherited from the current instance.
        """
        return type(self)(depth=ifnotunset(depth, default=self.depth),
                          truncate=ifnotunset(truncate, default=self.truncate),
                          collapse=ifnotunset(collapse, default=self.collapse),
                          location=ifnotunset(location, default=self.location))


# Module defaults ------------------------------------------------------------------------------------------------------

_lock = threading.Lock()
_options = DumpOptions()


def configure(preset: Preset | None = None, **overrides: Any) -> DumpOptions:
    """
    Change module-wide default options.

    With a preset, defaults restart from that preset; without one, overrides are merged
    into the current defaults. Returns the new defaults.

    Examples:
        >>> configure(preset="compact", location=True)
        DumpOptions(depth=2, truncate=60, collapse=5, location=True)
    """
    global _options
    with _lock:
        base = DumpOptions.from_preset(preset) if preset is not None else _options
        _options = DumpOptions.from_mapping(overrides, base=base)
        return _options


def get_options() -> DumpOptions:
    """Return current module-wide default options."""
    return _options


def resolve_options(options: DumpOptions | abc.Mapping[str, Any] | None = None, **overrides: Any) -> DumpOptions:
    """
    Resolve options for a single dump call.

    Args:
        options: DumpOptions instance, a mapping of option names merged into module defaults,
            or None for module defaults.
        overrides: Option names overriding the resolved options.

    Raises:
        TypeError: If options is of unsupported type.
        InvalidOptionsError: If an option name is unknown or a bound is negative.
    """
    if options is None:
        resolved = get_options()
    elif isinstance(options, DumpOptions):
        resolved = options
    elif isinstance(options, abc.Mapping):
        resolved = DumpOptions.from_mapping(options, base=get_options())
    else:
        raise TypeError(f"options must be DumpOptions, a mapping or None, but got {fmt_type(options)}")

    if overrides:
        resolved = DumpOptions.from_mapping(overrides, base=resolved)
    return resolved


def load_config(path: str | Path = "pyproject.toml") -> DumpOptions:
    """
    Load options from the [tool.vardump] table of a TOML file.

    A missing table yields default options. An optional "preset" key selects the base
    preset, remaining keys override it:

        [tool.vardump]
        preset = "compact"
        depth = 3

    Raises:
        FileNotFoundError: If path does not exist.
        InvalidOptionsError: If the table holds an unknown option or preset.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{path} missing, cannot load vardump config.")

    table = dict(toml.load(path).get("tool", {}).get("vardump", {}))
    preset = table.pop("preset", "default")
    return DumpOptions.from_mapping(table, base=DumpOptions.from_preset(preset))
