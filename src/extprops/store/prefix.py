"""
Prefix helpers for dot-grouped property keys.

A key's prefix is the text before its first ``.``; keys without a ``.``
are unprefixed. Matching is literal string comparison, so prefixes may
contain any character, including ones that are special in regular
expressions.

Example:
    >>> split_key("connection1.host")
    ('connection1', 'host')
    >>> split_key("timeout")
    (None, 'timeout')
    >>> normalize_prefix("db.")
    'db'
"""

import typing as _typing

import extprops.constants as constants
import extprops.errors as errors


def split_key(key: str) -> tuple[str | None, str]:
    """
    Split a key around its first separator.

    Args:
        key: Property key.

    Returns:
        Tuple of (prefix, rest). Prefix is None for unprefixed keys,
        in which case rest is the whole key.
    """
    prefix, sep, rest = key.partition(constants.PREFIX_SEPARATOR)
    if not sep:
        return None, key
    return prefix, rest


def prefix_of(key: str) -> str | None:
    """Return the first segment of a key, or None if it has no separator."""
    return split_key(key)[0]


def normalize_prefix(prefix: _typing.Any) -> str:
    """
    Validate a prefix and strip trailing separators.

    Args:
        prefix: Candidate prefix, e.g. ``"db"`` or ``"db."``.

    Returns:
        The prefix without trailing separators.

    Raises:
        InvalidArgumentError: If prefix is None or not a string.
    """
    if prefix is None:
        raise errors.InvalidArgumentError("prefix cannot be None")
    if not isinstance(prefix, str):
        raise errors.InvalidArgumentError(
            f"prefix must be a string, got {type(prefix).__name__}"
        )
    return prefix.rstrip(constants.PREFIX_SEPARATOR)


def add_prefix(prefix: str, key: str) -> str:
    """Join a normalized prefix and a key."""
    return f"{prefix}{constants.PREFIX_SEPARATOR}{key}"


def strip_prefix(prefix: str, key: str) -> str | None:
    """
    Remove ``prefix.`` from the start of key.

    Returns:
        The remainder, or None if key does not start with ``prefix.``.
    """
    head = prefix + constants.PREFIX_SEPARATOR
    if not key.startswith(head):
        return None
    return key[len(head):]
