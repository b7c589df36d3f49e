"""
Sentinel object for distinguishing an unprovided argument from None.

Used by option merging, where None can be a meaningful value and only
arguments actually passed by the caller should override current settings.

Example:
    >>> def merge(self, depth: int | UnsetType = UNSET) -> "DumpOptions":
    ...     depth = ifnotunset(depth, default=self.depth)
"""

from typing import Any, Final

__all__ = [
    'UNSET',
    'UnsetType',
    'ifnotunset',
]


class UnsetType:
    """
    Singleton sentinel type for UNSET.

    Optimized for identity checks: `if arg is UNSET:`. Falsy, picklable,
    with a clean repr.
    """
    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<UNSET>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


UNSET: Final[UnsetType] = UnsetType()
"""
Sentinel representing an unprovided optional argument.

Use with identity check: `if arg is UNSET:`
"""


def ifnotunset(value: Any, *, default: Any = None) -> Any:
    """
    Return value if it's not UNSET, otherwise return default.

    Examples:
        >>> ifnotunset(UNSET, default=4)
        4
        >>> ifnotunset(None, default=4) is None
        True
    """
    return default if value is UNSET else value
