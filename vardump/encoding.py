"""
Escaping of string and key content into quoted, printable, markup-safe form.

Two escape tables are built once on first use and are read-only afterwards:

- text table: for valid UTF-8 text; passes printable and multi-byte characters through
  and escapes only control characters other than tab, newline and carriage return.
- binary table: for anything else; escapes every byte >= 0x7F and every control byte
  as \\xHH, plus backslash, \\r, \\n and \\t as short escapes.

In both modes a literal backslash-x pair is escaped so that \\xHH sequences in output
are unambiguous.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import html
import re
from functools import cache
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import safe_repr

_INVALID_TEXT = re.compile("[^\t\n\r\x20-\x7e\xa0-\U0010ffff]")
_BARE_KEY = re.compile(r"\w+", re.ASCII)


# Methods --------------------------------------------------------------------------------------------------------------

@cache
def escape_tables() -> tuple[dict[int, str], tuple[str, ...]]:
    """
    Return the (text, binary) escape tables.

    The text table maps code points to replacements and is applied with str.translate;
    code points missing from it pass through. The binary table maps each byte value
    0-255 to its replacement.
    """
    text: dict[int, str] = {}
    binary: list[str] = []
    for b in range(256):
        if b < 32 and b not in (0x09, 0x0A, 0x0D):
            text[b] = f"\\x{b:02x}"
            binary.append(f"\\x{b:02x}")
        elif b < 127:
            binary.append(chr(b))
        else:
            binary.append(f"\\x{b:02x}")

    binary[ord("\\")] = "\\\\"
    binary[ord("\r")] = "\\r"
    binary[ord("\n")] = "\\n"
    binary[ord("\t")] = "\\t"
    return text, tuple(binary)


def is_valid_text(data: bytes) -> bool:
    """
    Check that data is UTF-8 holding only printable characters, tab, newline and carriage return.

    Examples:
        >>> is_valid_text("héllo".encode())
        True
        >>> is_valid_text(b"\\xff\\xfe")
        False
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return _INVALID_TEXT.search(text) is None


def encode_string(data: bytes | str) -> str:
    """
    Escape data and wrap it in double quotes, ready for embedding in canonical markup.

    A str is taken as its UTF-8 encoding; lone surrogates make it invalid text.

    Examples:
        >>> encode_string("héllo")
        '"héllo"'
        >>> encode_string(b"\\xff\\xfe")
        '"\\\\xff\\\\xfe"'
        >>> encode_string("<b>")
        '"&lt;b&gt;"'
    """
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogatepass")

    text_table, binary_table = escape_tables()
    if is_valid_text(data):
        s = data.decode("utf-8").replace("\\x", "\\\\x").translate(text_table)
    else:
        s = "".join(binary_table[b] for b in data)
    return '"' + html.escape(s, quote=False) + '"'


def encode_key(key: Any) -> str:
    """
    Render a container key or field name for canonical markup.

    Keys matching ^\\w+$ are shown bare, all other keys are encoded like strings.
    Non-string keys are shown by their str (int) or repr (anything else).

    Examples:
        >>> encode_key("name")
        'name'
        >>> encode_key(0)
        '0'
        >>> encode_key("two words")
        '"two words"'
    """
    if isinstance(key, (str, bytes)):
        text = key
    elif isinstance(key, int) and not isinstance(key, bool):
        text = str(key)
    else:
        text = safe_repr(key)

    if isinstance(text, str) and _BARE_KEY.fullmatch(text):
        return text
    return encode_string(text)
