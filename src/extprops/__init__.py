"""
extprops - Extended Properties

A string-keyed property store that groups keys by dotted prefix and keeps
multi-value (array) properties inside single values, with the array
delimiter carried through save/load cycles.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("extprops")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "extprops Contributors"

from extprops.config import Settings  # noqa: E402
from extprops.errors import (  # noqa: E402
    ExtPropsError,
    InvalidArgumentError,
    PropertiesFormatError,
    PropertyNotFoundError,
)
from extprops.store import NO_PREFIX, PropertyStore  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "NO_PREFIX",
    "ExtPropsError",
    "InvalidArgumentError",
    "PropertiesFormatError",
    "PropertyNotFoundError",
    "PropertyStore",
    "Settings",
]
