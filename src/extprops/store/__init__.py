"""
PropertyStore: string properties with prefix grouping and array values.

Example:
    >>> from extprops.store import PropertyStore
    >>> store = PropertyStore({"db.host": "localhost", "db.port": "1521"})
    >>> store.list_prefixes()
    ['db']
    >>> store.set_array("hosts", ["a", "b"])
    >>> store.get_array("hosts")
    ['a', 'b']
"""

from extprops.store._core import PropertyStore
from extprops.store._types import NO_PREFIX
from extprops.store.codec import ArrayCodec, validate_delimiter

__all__ = ["NO_PREFIX", "ArrayCodec", "PropertyStore", "validate_delimiter"]
