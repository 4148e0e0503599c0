"""
Base class for persistence formats.

A format turns a text stream into a flat ``dict[str, str]`` and back. It
knows nothing about delimiters or prefixes; the store embeds and extracts
its sentinel around these calls.
"""

from __future__ import annotations

import abc as _abc
import typing as _typing


class PropertiesFormat(_abc.ABC):
    """
    A reader/writer for one textual property syntax.

    Subclasses set ``name`` and ``suffixes`` and implement read/write.
    """

    name: _typing.ClassVar[str]
    """Registry name, e.g. ``"properties"``."""

    suffixes: _typing.ClassVar[tuple[str, ...]] = ()
    """File suffixes (lowercase, with dot) this format is inferred from."""

    @_abc.abstractmethod
    def read(self, stream: _typing.TextIO) -> dict[str, str]:
        """
        Parse a stream into key/value pairs.

        Args:
            stream: Text stream positioned at the start of the document.

        Returns:
            Entries in document order.

        Raises:
            PropertiesFormatError: If the document is malformed.
        """

    @_abc.abstractmethod
    def write(
        self,
        data: _typing.Mapping[str, str],
        stream: _typing.TextIO,
        comments: str | None = None,
    ) -> None:
        """
        Serialize key/value pairs to a stream.

        Args:
            data: Entries to write, in order.
            stream: Writable text stream.
            comments: Optional free text written as a header comment.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
