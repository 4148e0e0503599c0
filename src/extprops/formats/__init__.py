"""
Persistence formats for property stores.

- properties: Java-style ``key=value`` text files
- xml: Java XML property documents
- yaml: flat (or flattened) YAML mappings
"""

from extprops.formats.base import PropertiesFormat
from extprops.formats.properties_text import PropertiesTextFormat
from extprops.formats.properties_xml import PropertiesXmlFormat
from extprops.formats.properties_yaml import PropertiesYamlFormat
from extprops.formats.registry import (
    available_formats,
    format_name_for_path,
    get_format,
    resolve,
)

__all__ = [
    "PropertiesFormat",
    "PropertiesTextFormat",
    "PropertiesXmlFormat",
    "PropertiesYamlFormat",
    "available_formats",
    "format_name_for_path",
    "get_format",
    "resolve",
]
