"""Exception types raised by extprops."""

import pathlib as _pathlib


class ExtPropsError(Exception):
    """Base class for all extprops errors."""

    pass


class InvalidArgumentError(ExtPropsError, ValueError):
    """Raised when an operation is called with an illegal argument.

    Covers missing or non-string prefixes, a missing merge source, an illegal
    delimiter character and array elements containing the delimiter.
    """

    pass


class PropertyNotFoundError(ExtPropsError, KeyError):
    """Raised when an operation needs a key that is not stored."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"property not found: {self.key!r}"


class PropertiesFormatError(ExtPropsError):
    """Error reading or writing a persisted property set.

    Args:
        message: What went wrong.
        path: File being read or written, if known.
        line: 1-indexed line number of the problem, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: _pathlib.Path | None = None,
        line: int | None = None,
    ) -> None:
        self.message = message
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f" in {path}"
        if line is not None:
            location += f" at line {line}"
        super().__init__(f"Error{location}: {message}" if location else message)
