"""
Shared constants for extprops.

This module provides a single source of truth for default values
and reserved identifiers used across the store and its formats.
"""

# Array delimiter defaults
DEFAULT_DELIMITER = "%"
"""Default character used to join array properties."""

RESERVED_DELIMITERS = "([{\\^-=$!|]})?*+."
"""Characters that can never be used as an array delimiter."""

# Prefix handling
PREFIX_SEPARATOR = "."
"""Separator between a key's prefix and the rest of the key."""

# Persistence
SENTINEL_VERSION_TAG = "2015063000000000000"
"""Version tag embedded in the sentinel key.

Files written with one tag cannot be read back by a reader expecting another,
so this value is frozen.
"""

SENTINEL_KEY = f"ExtendedProperties.delimiter.{SENTINEL_VERSION_TAG}"
"""Reserved key carrying the active delimiter through a persisted file."""

DEFAULT_FORMAT = "properties"
"""Persistence format used when none is given and none can be inferred."""

DEFAULT_ENCODING = "utf-8"
"""Text encoding for files read and written by path."""
