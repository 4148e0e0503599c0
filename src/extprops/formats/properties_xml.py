"""
Java XML property documents.

Document shape::

    <?xml version="1.0" encoding="UTF-8" standalone="no"?>
    <!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">
    <properties>
    <comment>optional</comment>
    <entry key="connection1.host">localhost</entry>
    </properties>
"""

from __future__ import annotations

import logging as _logging
import re as _re
import typing as _typing
import xml.etree.ElementTree as _etree
import xml.sax.saxutils as _saxutils

import extprops.errors as errors
import extprops.formats.base as base

_logger = _logging.getLogger(__name__)

DOCTYPE = '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">'

# Characters XML 1.0 cannot carry, even as character references
_INVALID_XML_CHARS = _re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


def _check_representable(text: str, what: str) -> None:
    match = _INVALID_XML_CHARS.search(text)
    if match:
        raise errors.PropertiesFormatError(
            f"{what} contains a character XML cannot represent: {match.group()!r}"
        )


class PropertiesXmlFormat(base.PropertiesFormat):
    """
    Java ``storeToXML``/``loadFromXML`` documents.

    Args:
        encoding: Encoding named in the XML declaration. The stream itself
            decides the bytes actually written.
    """

    name = "xml"
    suffixes = (".xml",)

    def __init__(self, *, encoding: str = "UTF-8") -> None:
        self.encoding = encoding

    def read(self, stream: _typing.TextIO) -> dict[str, str]:
        try:
            root = _etree.fromstring(stream.read())
        except _etree.ParseError as e:
            line = e.position[0] if e.position else None
            raise errors.PropertiesFormatError(f"invalid XML: {e}", line=line) from e

        if root.tag != "properties":
            raise errors.PropertiesFormatError(
                f"root element must be <properties>, got <{root.tag}>"
            )

        result: dict[str, str] = {}
        for child in root:
            if child.tag == "comment":
                continue
            if child.tag != "entry":
                raise errors.PropertiesFormatError(
                    f"unexpected element <{child.tag}> in <properties>"
                )
            key = child.get("key")
            if key is None:
                raise errors.PropertiesFormatError("<entry> is missing its key attribute")
            result[key] = child.text or ""
        _logger.debug("Read %d XML properties", len(result))
        return result

    def write(
        self,
        data: _typing.Mapping[str, str],
        stream: _typing.TextIO,
        comments: str | None = None,
    ) -> None:
        # Validate everything before the first write
        for key, value in data.items():
            _check_representable(key, f"key {key!r}")
            _check_representable(value, f"value of {key!r}")
        if comments is not None:
            _check_representable(comments, "comment")

        stream.write(
            f'<?xml version="1.0" encoding="{self.encoding}" standalone="no"?>\n'
        )
        stream.write(f"{DOCTYPE}\n")
        stream.write("<properties>\n")
        if comments is not None:
            stream.write(f"<comment>{_saxutils.escape(comments, _TEXT_ENTITIES)}</comment>\n")
        for key, value in data.items():
            attr = _saxutils.escape(key, _ATTR_ENTITIES)
            text = _saxutils.escape(value, _TEXT_ENTITIES)
            stream.write(f'<entry key="{attr}">{text}</entry>\n')
        stream.write("</properties>\n")

    def __repr__(self) -> str:
        return f"PropertiesXmlFormat(encoding={self.encoding!r})"
