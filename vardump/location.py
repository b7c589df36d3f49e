"""
Locate the source line that requested a dump.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import inspect
import linecache
import os
import re
from typing import NamedTuple

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_DUMP_CALL = re.compile(r"\w*dump\w*(\.\w+)?\(.*\)", re.IGNORECASE)


# Classes --------------------------------------------------------------------------------------------------------------

class Location(NamedTuple):
    file: str
    line: int
    code: str


# Methods --------------------------------------------------------------------------------------------------------------

def find_location() -> Location | None:
    """
    Find the first caller frame outside of the vardump package.

    Returns:
        Location with the file, line number and the dump call excerpt (the whole
        stripped source line when no dump call is recognized); None when the caller
        has no readable source file.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            file = frame.f_code.co_filename
            if os.path.abspath(file).startswith(_PACKAGE_DIR + os.sep):
                frame = frame.f_back
                continue
            if not os.path.isfile(file):
                return None

            line = frame.f_lineno
            source = linecache.getline(file, line).strip()
            m = _DUMP_CALL.search(source)
            return Location(file, line, m.group(0) if m else source)
        return None
    finally:
        del frame
