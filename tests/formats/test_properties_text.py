"""Tests for the line-oriented .properties format."""

import io as _io

import pytest as _pytest

import extprops.errors as errors
import extprops.formats as formats


def _read(text: str) -> dict[str, str]:
    return formats.PropertiesTextFormat().read(_io.StringIO(text))


def _write(data: dict[str, str], comments: str | None = None, **options: bool) -> str:
    options.setdefault("timestamp", False)
    buffer = _io.StringIO()
    formats.PropertiesTextFormat(**options).write(data, buffer, comments)
    return buffer.getvalue()


class TestRead:
    """Parsing .properties text."""

    @_pytest.mark.parametrize(
        "line",
        ["a=b", "a = b", "a:b", "a : b", "a b", "   a=b", "a\tb"],
    )
    def test_separators(self, line: str) -> None:
        """'=', ':' and whitespace all separate key from value."""
        assert _read(line + "\n") == {"a": "b"}

    def test_comments_and_blank_lines(self) -> None:
        """'#' and '!' lines and blank lines are skipped."""
        text = "# comment\n! also comment\n\n   \nkey=value\n"
        assert _read(text) == {"key": "value"}

    def test_connections_file(self) -> None:
        """A typical grouped configuration file."""
        text = (
            "connection1.host=localhost\n"
            "connection1.port=1521\n"
            "connection2.host=10.10.10.1\n"
        )
        assert _read(text) == {
            "connection1.host": "localhost",
            "connection1.port": "1521",
            "connection2.host": "10.10.10.1",
        }

    def test_line_continuation(self) -> None:
        """A trailing backslash joins the next line minus its indentation."""
        assert _read("fruits = apple, \\\n         banana\n") == {"fruits": "apple, banana"}

    def test_even_backslashes_do_not_continue(self) -> None:
        """An escaped backslash at line end is a literal backslash."""
        assert _read("path=C:\\\\\nnext=1\n") == {"path": "C:\\", "next": "1"}

    def test_escapes(self) -> None:
        """Standard escapes and unicode escapes are resolved."""
        text = "tab=a\\tb\nnl=a\\nb\nword=caf\\u00e9\nplain=\\q\n"
        assert _read(text) == {"tab": "a\tb", "nl": "a\nb", "word": "café", "plain": "q"}

    def test_escaped_separator_in_key(self) -> None:
        """Escaped '=' and spaces belong to the key."""
        assert _read("a\\=b\\ c=d\n") == {"a=b c": "d"}

    def test_value_may_contain_separators(self) -> None:
        """Only the first separator counts."""
        assert _read("a==b\nurl=http://x:80/\n") == {"a": "=b", "url": "http://x:80/"}

    def test_key_without_value(self) -> None:
        """A bare key has an empty value."""
        assert _read("flag\nempty=\n") == {"flag": "", "empty": ""}

    def test_trailing_whitespace_kept(self) -> None:
        """Values keep trailing spaces."""
        assert _read("a=b  \n") == {"a": "b  "}

    def test_crlf_line_endings(self) -> None:
        """Windows and old Mac line endings are understood."""
        assert _read("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}

    def test_later_duplicate_wins(self) -> None:
        """Repeated keys keep the last value."""
        assert _read("a=1\na=2\n") == {"a": "2"}

    def test_malformed_unicode_escape(self) -> None:
        """A bad \\u escape reports the line it starts on."""
        with _pytest.raises(errors.PropertiesFormatError) as exc_info:
            _read("a=1\nb=\\u12zz\n")
        assert exc_info.value.line == 2

    def test_surrogate_pair_escapes(self) -> None:
        """Two \\u escapes forming a surrogate pair decode to one character."""
        assert _read("smile=\\uD83D\\uDE00\n") == {"smile": "\U0001F600"}


class TestWrite:
    """Writing .properties text."""

    def test_key_value_lines(self) -> None:
        """Entries are written as key=value lines, in order."""
        assert _write({"b": "2", "a": "1"}) == "b=2\na=1\n"

    def test_comments(self) -> None:
        """Each comment line gets a '#'."""
        assert _write({"a": "1"}, "first\nsecond") == "#first\n#second\na=1\n"

    def test_timestamp_line(self) -> None:
        """timestamp=True adds a date comment."""
        lines = _write({"a": "1"}, timestamp=True).splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("#")
        assert lines[1] == "a=1"

    def test_escaping(self) -> None:
        """Spaces in keys, leading value spaces and specials are escaped."""
        text = _write({"my key": " value = x", "c:d": "a#b!c\\"})
        assert text == "my\\ key=\\ value \\= x\nc\\:d=a\\#b\\!c\\\\\n"

    def test_control_characters(self) -> None:
        """Tabs and newlines are written as escapes."""
        assert _write({"k": "a\tb\nc"}) == "k=a\\tb\\nc\n"

    def test_escape_unicode(self) -> None:
        """escape_unicode writes non-ASCII as \\uXXXX."""
        assert _write({"word": "café"}, escape_unicode=True) == "word=caf\\u00E9\n"

    def test_round_trip_awkward_values(self) -> None:
        """Escaping is exactly undone by reading."""
        data = {
            "spaced key": "  both ends  ",
            "=:#!": "\\\t\n\r\f",
            "emoji": "\U0001F600",
            "": "empty key",
        }
        assert _read(_write(data)) == data
        assert _read(_write(data, escape_unicode=True)) == data
