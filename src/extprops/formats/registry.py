"""
Registry of persistence formats.

Formats are looked up by name (``"properties"``, ``"xml"``, ``"yaml"``)
or inferred from a file suffix.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import extprops.errors as errors
import extprops.formats.base as base
import extprops.formats.properties_text as properties_text
import extprops.formats.properties_xml as properties_xml
import extprops.formats.properties_yaml as properties_yaml

_logger = _logging.getLogger(__name__)

_FORMATS: dict[str, type[base.PropertiesFormat]] = {
    cls.name: cls
    for cls in (
        properties_text.PropertiesTextFormat,
        properties_xml.PropertiesXmlFormat,
        properties_yaml.PropertiesYamlFormat,
    )
}


def available_formats() -> list[str]:
    """
    List registered format names.

    Returns:
        Format names, sorted.
    """
    return sorted(_FORMATS)


def get_format(name: str, **options: _typing.Any) -> base.PropertiesFormat:
    """
    Create a format by name.

    Args:
        name: Registered format name (case-insensitive).
        **options: Keyword options for the format's constructor.

    Returns:
        A new format instance.

    Raises:
        InvalidArgumentError: If no format has that name.
    """
    cls = _FORMATS.get(name.lower()) if isinstance(name, str) else None
    if cls is None:
        available = ", ".join(available_formats())
        raise errors.InvalidArgumentError(
            f"Unknown format {name!r}. Available: {available}"
        )
    return cls(**options)


def format_name_for_path(path: _pathlib.Path | str) -> str | None:
    """
    Infer a format name from a file suffix.

    Returns:
        The format name, or None if the suffix is not recognized.
    """
    suffix = _pathlib.Path(path).suffix.lower()
    for name, cls in _FORMATS.items():
        if suffix in cls.suffixes:
            return name
    _logger.debug("No format registered for suffix %r", suffix)
    return None


def resolve(
    fmt: str | base.PropertiesFormat | None,
    default: str,
    **options: _typing.Any,
) -> base.PropertiesFormat:
    """
    Turn a format argument into a format instance.

    Args:
        fmt: A format instance (returned as is), a name, or None.
        default: Name used when fmt is None.
        **options: Constructor options used when a new instance is created.
    """
    if isinstance(fmt, base.PropertiesFormat):
        return fmt
    return get_format(fmt if fmt is not None else default, **options)
