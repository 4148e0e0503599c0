"""
Array codec: store a sequence of strings in one property value.

Elements are joined with a single delimiter character. Encoding refuses
elements that contain the delimiter; decoding splits unconditionally.

Example:
    >>> codec = ArrayCodec("%")
    >>> codec.encode(["a", "b", "c"])
    'a%b%c'
    >>> codec.decode("a%b%c")
    ['a', 'b', 'c']
"""

import collections.abc as _abc
import typing as _typing

import extprops.constants as constants
import extprops.errors as errors


def validate_delimiter(delimiter: _typing.Any) -> str:
    """
    Check that a delimiter is a single, non-reserved character.

    Args:
        delimiter: Candidate delimiter.

    Returns:
        The delimiter, unchanged.

    Raises:
        InvalidArgumentError: If delimiter is not a one-character string
            or is one of RESERVED_DELIMITERS.
    """
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise errors.InvalidArgumentError(
            f"delimiter must be a single character, got {delimiter!r}"
        )
    if delimiter in constants.RESERVED_DELIMITERS:
        raise errors.InvalidArgumentError(
            f"delimiter cannot be any of: {constants.RESERVED_DELIMITERS}"
        )
    return delimiter


class ArrayCodec:
    """Joins and splits string arrays around one delimiter character."""

    __slots__ = ("_delimiter",)

    def __init__(self, delimiter: str = constants.DEFAULT_DELIMITER) -> None:
        self._delimiter = validate_delimiter(delimiter)

    @property
    def delimiter(self) -> str:
        """The active delimiter character."""
        return self._delimiter

    def contains_delimiter(self, value: str) -> bool:
        """Check whether value contains the delimiter."""
        return self._delimiter in value

    def encode(self, values: _abc.Iterable[str]) -> str:
        """
        Join values with the delimiter.

        Args:
            values: Array elements. An empty iterable encodes to ``""``.

        Returns:
            The encoded value.

        Raises:
            InvalidArgumentError: If values is a bare string, or an element
                is not a string or contains the delimiter.
        """
        if isinstance(values, str) or not isinstance(values, _abc.Iterable):
            raise errors.InvalidArgumentError(
                f"values must be an iterable of strings, got {type(values).__name__}"
            )
        items = list(values)
        for item in items:
            if not isinstance(item, str):
                raise errors.InvalidArgumentError(
                    f"array elements must be strings, got {type(item).__name__}"
                )
            if self.contains_delimiter(item):
                raise errors.InvalidArgumentError(
                    f"array values cannot contain the delimiter: {self._delimiter}"
                )
        return self._delimiter.join(items)

    def decode(self, value: str) -> list[str]:
        """Split value on the delimiter, keeping empty elements."""
        return value.split(self._delimiter)

    def reencode(self, value: str, delimiter: str) -> str:
        """Replace every occurrence of this codec's delimiter with another."""
        return value.replace(self._delimiter, delimiter)

    def __repr__(self) -> str:
        return f"ArrayCodec({self._delimiter!r})"
