"""
Parser for Java-style ``.properties`` files.

Android project files (``project.properties``, ``default.properties``) and
SDK package manifests (``source.properties``) use this format:

- ``#`` or ``!`` as the first non-blank character starts a comment line
- ``key=value``, ``key: value`` and ``key value`` are all valid entries
- a trailing backslash continues the logical line on the next line
- ``\\t``, ``\\n``, ``\\r``, ``\\f`` and ``\\uXXXX`` escapes are decoded

Files are decoded as UTF-8, which is what Android tooling writes, falling
back to ISO-8859-1 (the format's native encoding) when the bytes are not
valid UTF-8.
"""

import logging
import re
import string
from pathlib import Path
from typing import Dict, List, Tuple, Union

logger = logging.getLogger(__name__)

PROPERTIES_ENCODING = "iso-8859-1"
DEFAULT_ENCODING = "utf-8"

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class PropertiesError(ValueError):
    """Properties content is malformed."""

    pass


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse properties-format text into a dictionary.

    Later occurrences of a key override earlier ones.

    Args:
        text: Properties file content

    Returns:
        Mapping of keys to unescaped values

    Raises:
        PropertiesError: If an escape sequence is malformed

    Example:
        >>> parse_properties("# comment\\ntarget=android-19\\n")
        {'target': 'android-19'}
    """
    properties: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        properties[key] = value
    return properties


def load_properties(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read and parse a properties file.

    Args:
        path: Path to the properties file

    Returns:
        Mapping of keys to values

    Raises:
        OSError: If the file cannot be read
        PropertiesError: If the content is malformed
    """
    path = Path(path)
    logger.debug(f"Loading properties from {path}")
    return parse_properties(decode_properties(path.read_bytes()))


def decode_properties(data: bytes) -> str:
    """
    Decode properties file content.

    UTF-8 is tried first; content that is not valid UTF-8 is decoded as
    ISO-8859-1, which accepts any byte sequence.

    Args:
        data: Raw file content

    Returns:
        Decoded text
    """
    try:
        return data.decode(DEFAULT_ENCODING)
    except UnicodeDecodeError:
        return data.decode(PROPERTIES_ENCODING)


def _logical_lines(text: str) -> List[str]:
    """Join continuation lines and drop blanks and comments."""
    lines = []
    current = None

    for raw in _LINE_BREAK.split(text):
        line = raw.lstrip(_WHITESPACE)

        if current is None:
            if not line or line[0] in "#!":
                continue
            current = ""
        elif not line:
            # Blank line ends a pending continuation
            lines.append(current)
            current = None
            continue

        if _has_continuation(line):
            current += line[:-1]
            continue

        lines.append(current + line)
        current = None

    if current is not None:
        lines.append(current)

    return lines


def _has_continuation(line: str) -> bool:
    """A line continues when it ends with an odd number of backslashes."""
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> Tuple[str, str]:
    """Split a logical line into its unescaped key and value."""
    length = len(line)
    end = 0
    while end < length:
        char = line[end]
        if char == "\\":
            end += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        end += 1
    end = min(end, length)

    start = end
    while start < length and line[start] in _WHITESPACE:
        start += 1
    if start < length and line[start] in _SEPARATORS:
        start += 1
        while start < length and line[start] in _WHITESPACE:
            start += 1

    return _unescape(line[:end]), _unescape(line[start:])


def _unescape(text: str) -> str:
    """Decode backslash escapes."""
    if "\\" not in text:
        return text

    chars = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char != "\\":
            chars.append(char)
            i += 1
            continue

        i += 1
        if i >= length:
            break

        char = text[i]
        if char == "u":
            digits = text[i + 1 : i + 5]
            if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
                raise PropertiesError(f"Malformed \\uxxxx encoding: \\u{digits}")
            chars.append(chr(int(digits, 16)))
            i += 5
        else:
            chars.append(_ESCAPES.get(char, char))
            i += 1

    return "".join(chars)


__all__ = [
    "PROPERTIES_ENCODING",
    "DEFAULT_ENCODING",
    "decode_properties",
    "PropertiesError",
    "parse_properties",
    "load_properties",
]
