"""
Type aliases for the property store.

- PropertySource: what the constructor and merge() accept
- PrefixGroups: sub-stores returned by split_by_prefix, keyed by prefix
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

if _typing.TYPE_CHECKING:
    import extprops.store._core as _core

# Anything merge() and the constructor accept as a source of entries
PropertySource: _typing.TypeAlias = "_abc.Mapping[str, str] | _abc.Iterable[tuple[str, str]]"

# None is the group for keys without a prefix
PrefixGroups: _typing.TypeAlias = "dict[str | None, _core.PropertyStore]"

NO_PREFIX = None
"""Key of the unprefixed group in split_by_prefix results."""
