"""
Robust formatters for error messages and diagnostics.

Handle broken __repr__ and overlong output gracefully, so that building a
message about a value never fails on the value itself.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name


# Methods --------------------------------------------------------------------------------------------------------------


def fmt_type(obj: Any) -> str:
    """Format type information of an instance or a class as '<type>'.

    Examples:
        >>> fmt_type(42)
        '<int>'
        >>> fmt_type(ValueError)
        '<ValueError>'
    """
    return f"<{class_name(obj)}>"


def fmt_value(obj: Any, *, max_repr: int = 120, ellipsis: str = "...") -> str:
    """
    Format a single value as a type-value pair for exception messages and warnings.

    Args:
        obj: Any Python object to format.
        max_repr: Maximum length of the value's repr before truncation. 0 disables truncation.
        ellipsis: Truncation token appended to a cut repr.

    Returns:
        Formatted string like "<int: 42>".

    Examples:
        >>> fmt_value(-1)
        '<int: -1>'
        >>> fmt_value("hello world", max_repr=5)
        "<str: 'hell...>"
    """
    return f"<{class_name(obj)}: {truncate_repr(safe_repr(obj), max_repr, ellipsis=ellipsis)}>"


def safe_repr(obj: Any) -> str:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully
    """
    try:
        return repr(obj)
    except Exception as e:
        return f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>"


def truncate_repr(repr_: str, max_len: int, ellipsis: str = "...") -> str:
    """Truncate repr_ to at most max_len characters before appending the ellipsis; 0 means no limit."""
    if max_len <= 0 or len(repr_) <= max_len:
        return repr_
    return repr_[:max_len] + ellipsis
