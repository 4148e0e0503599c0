"""
PropertyStore: a string-to-string property map with prefix grouping
and array values.

The store owns an insertion-ordered dict of entries and exposes the
read-only Mapping protocol over it. Writes go through explicit methods
so the store can keep its invariants:

- Keys and values are strings
- The reserved sentinel key never appears in the live store
- Array values never contain a stray delimiter after a delimiter change

Defaults chain:
    A store may be created with a ``defaults`` store. Reads fall back to
    it for keys the store does not own; writes, delimiter changes and
    persistence only ever touch the store's own entries.

Thread safety: NOT thread-safe. Guard each store with one external lock
if several threads share it.
"""

from __future__ import annotations

import collections.abc as _abc
import io as _io
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import extprops.constants as constants
import extprops.errors as errors
import extprops.formats.base as formats_base
import extprops.formats.registry as formats_registry
import extprops.store._types as _types
import extprops.store.codec as codec
import extprops.store.prefix as prefix_utils

if _typing.TYPE_CHECKING:
    import extprops.config.settings as _settings

_logger = _logging.getLogger(__name__)

FormatArg: _typing.TypeAlias = "str | formats_base.PropertiesFormat | None"


def _check_key(key: _typing.Any) -> str:
    if not isinstance(key, str):
        raise errors.InvalidArgumentError(
            f"property keys must be strings, got {type(key).__name__}"
        )
    if key == constants.SENTINEL_KEY:
        raise errors.InvalidArgumentError(f"{key!r} is a reserved key")
    return key


def _check_value(key: str, value: _typing.Any) -> str:
    if not isinstance(value, str):
        raise errors.InvalidArgumentError(
            f"value of {key!r} must be a string, got {type(value).__name__}"
        )
    return value


def _source_items(source: _typing.Any) -> list[tuple[str, str]]:
    """
    Read and validate all pairs from a merge source.

    Everything is validated before anything is written, so a bad
    entry never leaves a half-merged store.
    """
    if source is None:
        raise errors.InvalidArgumentError("properties cannot be None")
    if isinstance(source, _abc.Mapping):
        pairs = list(source.items())
    elif isinstance(source, _abc.Iterable) and not isinstance(source, (str, bytes)):
        pairs = []
        for item in source:
            if not isinstance(item, tuple) or len(item) != 2:
                raise errors.InvalidArgumentError(
                    f"expected (key, value) pairs, got {item!r}"
                )
            pairs.append(item)
    else:
        raise errors.InvalidArgumentError(
            f"properties must be a mapping or (key, value) pairs, got {type(source).__name__}"
        )
    return [(_check_key(key), _check_value(key, value)) for key, value in pairs]


class PropertyStore(_abc.Mapping[str, str]):
    """
    Ordered string properties with prefix grouping and array values.

    Example:
        >>> store = PropertyStore({
        ...     "connection1.host": "localhost",
        ...     "connection1.port": "1521",
        ...     "connection2.host": "10.10.10.1",
        ... })
        >>> store.list_prefixes()
        ['connection1', 'connection2']
        >>> dict(store.extract_prefix("connection1"))
        {'host': 'localhost', 'port': '1521'}
        >>> store.set_array("hosts", ["a", "b", "c"])
        >>> store["hosts"]
        'a%b%c'

    Args:
        initial: Mapping or (key, value) pairs to start with.
        defaults: Store consulted for keys this store does not own.
        delimiter: Array delimiter. Must not be in RESERVED_DELIMITERS.
    """

    def __init__(
        self,
        initial: _types.PropertySource | None = None,
        *,
        defaults: PropertyStore | None = None,
        delimiter: str = constants.DEFAULT_DELIMITER,
    ) -> None:
        if defaults is not None and not isinstance(defaults, PropertyStore):
            raise errors.InvalidArgumentError(
                f"defaults must be a PropertyStore, got {type(defaults).__name__}"
            )
        self._codec = codec.ArrayCodec(delimiter)
        self._defaults = defaults
        self._entries: dict[str, str] = {}
        if initial is not None:
            self._entries.update(_source_items(initial))

    # =========================================================================
    # Mapping protocol (merged view: own entries, then defaults)
    # =========================================================================

    def __getitem__(self, key: str) -> str:
        if key in self._entries:
            return self._entries[key]
        if self._defaults is not None and key in self._defaults:
            return self._defaults[key]
        raise errors.PropertyNotFoundError(key)

    def __iter__(self) -> _typing.Iterator[str]:
        yield from self._entries
        if self._defaults is not None:
            for key in self._defaults:
                if key not in self._entries:
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, key: object) -> bool:
        if key in self._entries:
            return True
        return self._defaults is not None and key in self._defaults

    def __repr__(self) -> str:
        parts = [repr(self._entries), f"delimiter={self.delimiter!r}"]
        if self._defaults is not None:
            parts.append(f"defaults={self._defaults!r}")
        return f"PropertyStore({', '.join(parts)})"

    # =========================================================================
    # Basic property access
    # =========================================================================

    @property
    def defaults(self) -> PropertyStore | None:
        """The fallback store, if any."""
        return self._defaults

    def get_property(self, key: str, default: str | None = None) -> str | None:
        """Get a value from the merged view, or default if absent."""
        return self.get(key, default)

    def set_property(self, key: str, value: str) -> str | None:
        """
        Store a value under key.

        Returns:
            The previous own value for key, or None.

        Raises:
            InvalidArgumentError: If key or value is not a string, or key
                is the reserved sentinel key.
        """
        _check_key(key)
        _check_value(key, value)
        previous = self._entries.get(key)
        self._entries[key] = value
        return previous

    def remove_property(self, key: str) -> str | None:
        """Remove an own entry, returning its value (None if absent)."""
        return self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all own entries. The delimiter and defaults are kept."""
        self._entries.clear()

    def property_names(self) -> list[str]:
        """All keys visible in the merged view, own keys first."""
        return list(self)

    def own_keys(self) -> list[str]:
        """Keys stored in this store, excluding the defaults chain."""
        return list(self._entries)

    def to_dict(self, *, include_defaults: bool = True) -> dict[str, str]:
        """
        Return entries as a plain dict.

        Args:
            include_defaults: Include keys served by the defaults chain.
        """
        if include_defaults:
            return dict(self.items())
        return dict(self._entries)

    def copy(self) -> PropertyStore:
        """
        Return an independent copy of this store.

        The copy shares the defaults store by reference but owns its
        entries, so mutating one never affects the other.
        """
        new = PropertyStore(defaults=self._defaults, delimiter=self.delimiter)
        new._entries = dict(self._entries)
        return new

    def _child(self) -> PropertyStore:
        """Empty store with this store's delimiter and no defaults."""
        return PropertyStore(delimiter=self.delimiter)

    # =========================================================================
    # Prefix engine
    # =========================================================================

    def add_prefix(self, prefix: str) -> None:
        """
        Prepend ``prefix.`` to every own key.

        A trailing ``.`` on prefix is accepted. Values are unchanged.

        Raises:
            InvalidArgumentError: If prefix is None or not a string.
        """
        normalized = prefix_utils.normalize_prefix(prefix)
        self._entries = {
            prefix_utils.add_prefix(normalized, key): value
            for key, value in self._entries.items()
        }
        _logger.debug("Added prefix %r to %d keys", normalized, len(self._entries))

    def list_prefixes(self) -> list[str]:
        """
        List distinct prefixes in first-seen order.

        Keys without a ``.`` do not contribute.
        """
        seen: dict[str, None] = {}
        for key in self:
            key_prefix = prefix_utils.prefix_of(key)
            if key_prefix is not None:
                seen.setdefault(key_prefix, None)
        return list(seen)

    def split_by_prefix(self, include_unprefixed: bool = True) -> _types.PrefixGroups:
        """
        Partition the store into one sub-store per prefix.

        Keys keep their prefixes. Sub-stores are independent copies that
        use this store's delimiter.

        Args:
            include_unprefixed: Also return the keys without a prefix,
                grouped under ``None`` (NO_PREFIX), after all prefixes.

        Returns:
            Dict of prefix to sub-store, in first-seen prefix order.
        """
        groups: _types.PrefixGroups = {}
        unprefixed = self._child()
        for key, value in self.items():
            key_prefix = prefix_utils.prefix_of(key)
            if key_prefix is None:
                unprefixed._entries[key] = value
            else:
                if key_prefix not in groups:
                    groups[key_prefix] = self._child()
                groups[key_prefix]._entries[key] = value
        if include_unprefixed:
            groups[_types.NO_PREFIX] = unprefixed
        return groups

    def extract_prefix(self, prefix: str) -> PropertyStore:
        """
        Return a new store with the entries under ``prefix.``, prefix removed.

        Matching is literal: ``extract_prefix("a.b")`` selects keys starting
        with ``"a.b."``. A trailing ``.`` on prefix is accepted.

        Raises:
            InvalidArgumentError: If prefix is None or not a string.
        """
        normalized = prefix_utils.normalize_prefix(prefix)
        result = self._child()
        for key, value in self.items():
            rest = prefix_utils.strip_prefix(normalized, key)
            if rest is not None:
                result._entries[rest] = value
        return result

    # =========================================================================
    # Arrays
    # =========================================================================

    def set_array(self, key: str, values: _abc.Iterable[str]) -> str | None:
        """
        Store a sequence of strings joined by the delimiter.

        Returns:
            The previous own value for key (as a plain string), or None.

        Raises:
            InvalidArgumentError: If any element contains the delimiter.
        """
        _check_key(key)
        return self.set_property(key, self._codec.encode(values))

    def get_array(self, key: str) -> list[str]:
        """
        Split the value for key on the delimiter.

        Keys served by the defaults chain are split with the defaults
        store's own delimiter.

        Raises:
            PropertyNotFoundError: If key is absent.
        """
        if key in self._entries:
            return self._codec.decode(self._entries[key])
        if self._defaults is not None and key in self._defaults:
            return self._defaults.get_array(key)
        raise errors.PropertyNotFoundError(key)

    # =========================================================================
    # Delimiter lifecycle
    # =========================================================================

    @property
    def delimiter(self) -> str:
        """The active array delimiter."""
        return self._codec.delimiter

    def get_delimiter(self) -> str:
        """Return the active array delimiter."""
        return self._codec.delimiter

    def set_delimiter(self, delimiter: str) -> bool:
        """
        Change the array delimiter, rewriting stored values.

        The change is all-or-nothing: if any own value already contains the
        new delimiter nothing is modified and False is returned. Otherwise
        every occurrence of the old delimiter is replaced.

        This includes the current delimiter: once an array is stored,
        setting the same delimiter again is rejected.

        Returns:
            True if the store now uses delimiter, False if the change was
            rejected.

        Raises:
            InvalidArgumentError: If delimiter is not a single character
                or is one of RESERVED_DELIMITERS.
        """
        new_codec = codec.ArrayCodec(delimiter)
        if any(new_codec.contains_delimiter(value) for value in self._entries.values()):
            _logger.debug(
                "Rejected delimiter change %r -> %r: already present in stored values",
                self.delimiter,
                delimiter,
            )
            return False
        _logger.debug("Changing delimiter %r -> %r", self.delimiter, delimiter)
        self._entries = {
            key: self._codec.reencode(value, delimiter) for key, value in self._entries.items()
        }
        self._codec = new_codec
        return True

    def embed_delimiter(self) -> dict[str, str]:
        """
        Return the entries to persist, with the sentinel key added.

        Every write path serializes this snapshot. The live store is not
        modified, so the sentinel is never visible to callers.
        """
        snapshot = dict(self._entries)
        snapshot[constants.SENTINEL_KEY] = self.delimiter
        return snapshot

    @staticmethod
    def extract_delimiter(data: _abc.MutableMapping[str, str]) -> str | None:
        """
        Remove the sentinel key from freshly read data.

        Args:
            data: Entries produced by a format's read(). Modified in place.

        Returns:
            The delimiter named by the sentinel, or None if it is absent.

        Raises:
            PropertiesFormatError: If the sentinel value is empty or names a
                character that cannot be a delimiter.
        """
        if constants.SENTINEL_KEY not in data:
            return None
        value = data.pop(constants.SENTINEL_KEY)
        if not value:
            raise errors.PropertiesFormatError(
                f"Failed to read {constants.SENTINEL_KEY!r} value: it is empty"
            )
        try:
            return codec.validate_delimiter(value[0])
        except errors.InvalidArgumentError as e:
            raise errors.PropertiesFormatError(
                f"Failed to read {constants.SENTINEL_KEY!r} value: {e}"
            ) from e

    # =========================================================================
    # Merge
    # =========================================================================

    def merge(self, other: _types.PropertySource, overwrite: bool = True) -> list[str]:
        """
        Copy entries from another mapping into this store.

        Args:
            other: Mapping (including another PropertyStore's merged view)
                or (key, value) pairs.
            overwrite: Replace values of keys this store already owns.

        Returns:
            Keys that were written.

        Raises:
            InvalidArgumentError: If other is None, not a mapping, or holds
                a non-string key or value. Nothing is written in that case.
        """
        written: list[str] = []
        for key, value in _source_items(other):
            if overwrite or key not in self._entries:
                self._entries[key] = value
                written.append(key)
        return written

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self, stream: _typing.TextIO, *, format: FormatArg = None) -> None:
        """
        Read entries from a stream, restoring the persisted delimiter.

        Loaded entries are added to the store, replacing existing keys.
        If the document carries the delimiter sentinel, the store switches
        to that delimiter. Values already in the store are left as they are.

        Raises:
            PropertiesFormatError: If the document is malformed or its
                sentinel is corrupt. The store is unchanged in that case.
        """
        fmt = formats_registry.resolve(format, constants.DEFAULT_FORMAT)
        data = fmt.read(stream)
        loaded_delimiter = self.extract_delimiter(data)
        incoming = _source_items(data)

        self._entries.update(incoming)
        if loaded_delimiter is not None:
            self._codec = codec.ArrayCodec(loaded_delimiter)
        _logger.debug(
            "Loaded %d properties (%s), delimiter %r", len(incoming), fmt.name, self.delimiter
        )

    def dump(
        self,
        stream: _typing.TextIO,
        comments: str | None = None,
        *,
        format: FormatArg = None,
    ) -> None:
        """
        Write own entries and the delimiter sentinel to a stream.

        Args:
            stream: Writable text stream.
            comments: Optional header comment.
            format: Format name or instance (default: properties).
        """
        fmt = formats_registry.resolve(format, constants.DEFAULT_FORMAT)
        fmt.write(self.embed_delimiter(), stream, comments)

    def loads(self, text: str, *, format: FormatArg = None) -> None:
        """Load entries from a string. See load()."""
        self.load(_io.StringIO(text), format=format)

    def dumps(self, comments: str | None = None, *, format: FormatArg = None) -> str:
        """Serialize to a string. See dump()."""
        buffer = _io.StringIO()
        self.dump(buffer, comments, format=format)
        return buffer.getvalue()

    def load_path(
        self,
        path: _pathlib.Path | str,
        *,
        format: FormatArg = None,
        encoding: str | None = None,
        settings: _settings.Settings | None = None,
    ) -> None:
        """
        Load entries from a file.

        The format is taken from the format argument, then the file suffix,
        then Settings.default_format.

        Raises:
            PropertiesFormatError: If the file cannot be read or parsed.
                The error carries the path.
        """
        path = _pathlib.Path(path)
        settings = _resolve_settings(settings)
        fmt = _format_for(path, format, settings)
        try:
            with path.open("r", encoding=encoding or settings.encoding) as stream:
                self.load(stream, format=fmt)
        except errors.PropertiesFormatError as e:
            if e.path is not None:
                raise
            raise errors.PropertiesFormatError(e.message, path=path, line=e.line) from e
        except (OSError, UnicodeDecodeError) as e:
            raise errors.PropertiesFormatError(f"cannot read file: {e}", path=path) from e
        _logger.debug("Loaded properties from %s", path)

    def save_path(
        self,
        path: _pathlib.Path | str,
        comments: str | None = None,
        *,
        format: FormatArg = None,
        encoding: str | None = None,
        settings: _settings.Settings | None = None,
    ) -> None:
        """
        Write the store to a file, creating parent directories.

        Raises:
            PropertiesFormatError: If the file cannot be written.
        """
        path = _pathlib.Path(path)
        settings = _resolve_settings(settings)
        fmt = _format_for(path, format, settings)
        # Serialize first so a format error never truncates an existing file
        text = self.dumps(comments, format=fmt)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding=encoding or settings.encoding)
        except (OSError, UnicodeEncodeError) as e:
            raise errors.PropertiesFormatError(f"cannot write file: {e}", path=path) from e
        _logger.debug("Saved %d properties to %s", len(self._entries), path)

    @classmethod
    def from_path(
        cls,
        path: _pathlib.Path | str,
        *,
        format: FormatArg = None,
        encoding: str | None = None,
        defaults: PropertyStore | None = None,
        settings: _settings.Settings | None = None,
    ) -> PropertyStore:
        """Create a store and load it from a file."""
        settings = _resolve_settings(settings)
        store = cls(defaults=defaults, delimiter=settings.delimiter)
        store.load_path(path, format=format, encoding=encoding, settings=settings)
        return store

    @classmethod
    def from_string(
        cls,
        text: str,
        *,
        format: FormatArg = None,
        defaults: PropertyStore | None = None,
        settings: _settings.Settings | None = None,
    ) -> PropertyStore:
        """
        Create a store and load it from a string.

        The store starts with Settings.delimiter, as in from_path(). A
        sentinel in the text replaces it.
        """
        settings = _resolve_settings(settings)
        store = cls(defaults=defaults, delimiter=settings.delimiter)
        store.loads(text, format=format)
        return store


def _resolve_settings(settings: _settings.Settings | None) -> _settings.Settings:
    import extprops.config.settings as _settings_module

    if settings is not None:
        return settings
    return _settings_module.Settings()


def _format_for(
    path: _pathlib.Path,
    fmt: FormatArg,
    settings: _settings.Settings,
) -> formats_base.PropertiesFormat:
    if isinstance(fmt, formats_base.PropertiesFormat):
        return fmt
    name = fmt or formats_registry.format_name_for_path(path) or settings.default_format
    return formats_registry.get_format(name, **settings.format_options(name))
