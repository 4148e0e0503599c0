"""
Line-oriented ``key=value`` property files.

Reads and writes the syntax used by Java ``.properties`` files:

- Blank lines and lines starting with ``#`` or ``!`` are ignored
- The key ends at the first unescaped ``=``, ``:`` or whitespace
- A line ending in an odd number of backslashes continues on the next line
- Escapes: ``\\t \\n \\r \\f``, ``\\uXXXX``, and ``\\`` before any other
  character yields that character

Example:
    >>> fmt = PropertiesTextFormat(timestamp=False)
    >>> fmt.read(io.StringIO("connection1.host = localhost\\n"))
    {'connection1.host': 'localhost'}
"""

from __future__ import annotations

import datetime as _datetime
import logging as _logging
import re as _re
import typing as _typing

import extprops.errors as errors
import extprops.formats.base as base

_logger = _logging.getLogger(__name__)

_NEWLINE = _re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"

_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_ESCAPED_PUNCTUATION = "=:#!"


def _trailing_backslashes(line: str) -> int:
    return len(line) - len(line.rstrip("\\"))


def _logical_lines(text: str) -> _typing.Iterator[tuple[int, str]]:
    """
    Join continued lines and drop comments.

    Yields:
        (line_number, logical_line) where line_number is the 1-indexed
        natural line the logical line starts on.
    """
    natural = _NEWLINE.split(text)
    index = 0
    while index < len(natural):
        line = natural[index].lstrip(_WHITESPACE)
        start = index + 1
        index += 1
        if not line or line[0] in "#!":
            continue
        while _trailing_backslashes(line) % 2 == 1:
            line = line[:-1]
            if index >= len(natural):
                break
            line += natural[index].lstrip(_WHITESPACE)
            index += 1
        yield start, line


def _unescape(text: str, line_number: int) -> str:
    """Resolve backslash escapes in a key or value."""
    if "\\" not in text:
        return text
    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            out.append(char)
            i += 1
            continue
        code = text[i + 1]
        if code == "u":
            digits = text[i + 2 : i + 6]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise errors.PropertiesFormatError(
                    f"malformed \\uxxxx encoding: \\u{digits}", line=line_number
                )
            out.append(chr(int(digits, 16)))
            i += 6
        else:
            out.append(_UNESCAPES.get(code, code))
            i += 2
    result = "".join(out)
    # Characters outside the BMP arrive as two \u escapes
    if any("\ud800" <= c <= "\udfff" for c in result):
        result = result.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")
    return result


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into raw (still escaped) key and value."""
    end = 0
    while end < len(line):
        char = line[end]
        if char == "\\":
            end += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        end += 1
    end = min(end, len(line))
    key = line[:end]

    rest = line[end:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def _escape(text: str, *, is_key: bool, escape_unicode: bool) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == " ":
            out.append("\\ " if is_key or index == 0 else " ")
        elif char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char in _ESCAPED_PUNCTUATION:
            out.append("\\" + char)
        elif escape_unicode and not (0x20 <= ord(char) <= 0x7E):
            encoded = char.encode("utf-16-be", "surrogatepass")
            for pos in range(0, len(encoded), 2):
                out.append(f"\\u{int.from_bytes(encoded[pos:pos + 2], 'big'):04X}")
        else:
            out.append(char)
    return "".join(out)


def _timestamp() -> str:
    return _datetime.datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")


class PropertiesTextFormat(base.PropertiesFormat):
    """
    Java-style ``.properties`` text.

    Args:
        timestamp: Write a ``#<date>`` line after the comments.
        escape_unicode: Write characters outside printable ASCII as
            ``\\uXXXX`` escapes, for files read as ISO-8859-1.
    """

    name = "properties"
    suffixes = (".properties", ".props", ".conf")

    def __init__(self, *, timestamp: bool = True, escape_unicode: bool = False) -> None:
        self.timestamp = timestamp
        self.escape_unicode = escape_unicode

    def read(self, stream: _typing.TextIO) -> dict[str, str]:
        result: dict[str, str] = {}
        for line_number, line in _logical_lines(stream.read()):
            raw_key, raw_value = _split_entry(line)
            result[_unescape(raw_key, line_number)] = _unescape(raw_value, line_number)
        _logger.debug("Read %d properties", len(result))
        return result

    def write(
        self,
        data: _typing.Mapping[str, str],
        stream: _typing.TextIO,
        comments: str | None = None,
    ) -> None:
        if comments is not None:
            for comment_line in _NEWLINE.split(comments):
                stream.write(f"#{comment_line}\n")
        if self.timestamp:
            stream.write(f"#{_timestamp()}\n")
        for key, value in data.items():
            escaped_key = _escape(key, is_key=True, escape_unicode=self.escape_unicode)
            escaped_value = _escape(value, is_key=False, escape_unicode=self.escape_unicode)
            stream.write(f"{escaped_key}={escaped_value}\n")

    def __repr__(self) -> str:
        return (
            f"PropertiesTextFormat(timestamp={self.timestamp!r}, "
            f"escape_unicode={self.escape_unicode!r})"
        )
