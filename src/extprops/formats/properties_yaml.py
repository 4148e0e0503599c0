"""
YAML property documents.

The top level must be a mapping. Nested mappings are flattened into
dotted keys on read, so these two documents load identically::

    connection1.host: localhost

    connection1:
      host: localhost

Scalars become strings (``true``/``false`` for booleans, ``""`` for null).
Sequences are rejected: arrays are stored as delimited strings.
Written documents are always flat, with every value quoted as needed to
stay a string.
"""

from __future__ import annotations

import datetime as _datetime
import logging as _logging
import re as _re
import typing as _typing

import yaml as _yaml

import extprops.constants as constants
import extprops.errors as errors
import extprops.formats.base as base

_logger = _logging.getLogger(__name__)

# Maps key paths to 1-indexed line numbers
LineRegistry = dict[tuple[str, ...], int]


class _LineTrackingLoader(_yaml.SafeLoader):
    """Safe loader that records the line of every mapping key."""

    def __init__(self, stream: _typing.Any) -> None:
        super().__init__(stream)
        self._line_registry: LineRegistry = {}
        self._path_stack: list[str] = []

    def construct_mapping(
        self, node: _yaml.MappingNode, deep: bool = False
    ) -> dict[_typing.Any, _typing.Any]:
        """Override to track line numbers for each key."""
        self.flatten_mapping(node)
        result: dict[_typing.Any, _typing.Any] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            self._path_stack.append(_to_string(key))
            self._line_registry[tuple(self._path_stack)] = key_node.start_mark.line + 1
            # deep=True so nested mappings see the right path stack
            result[key] = self.construct_object(value_node, deep=True)
            self._path_stack.pop()
        return result


# Characters a plain or single-quoted scalar cannot carry through a load.
# Double quotes escape them.
_NEEDS_ESCAPES = _re.compile("[\x00-\x1f\x7f-\x9f\u2028\u2029\ufeff]")


class _StringDumper(_yaml.SafeDumper):
    """Safe dumper that double-quotes strings holding breaks or controls."""


def _represent_str(dumper: _yaml.SafeDumper, value: str) -> _yaml.ScalarNode:
    style = '"' if _NEEDS_ESCAPES.search(value) else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


_StringDumper.add_representer(str, _represent_str)


def _to_string(value: _typing.Any) -> str:
    """Convert a YAML scalar to its property string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (_datetime.date, _datetime.datetime)):
        return value.isoformat()
    return str(value)


def _flatten(
    data: dict[_typing.Any, _typing.Any],
    lines: LineRegistry,
    path: tuple[str, ...] = (),
    out: dict[str, str] | None = None,
) -> dict[str, str]:
    if out is None:
        out = {}
    for raw_key, value in data.items():
        key_path = path + (_to_string(raw_key),)
        if isinstance(value, dict):
            _flatten(value, lines, key_path, out)
        elif isinstance(value, (list, set)):
            raise errors.PropertiesFormatError(
                f"sequence values are not supported for key "
                f"{constants.PREFIX_SEPARATOR.join(key_path)!r}",
                line=lines.get(key_path),
            )
        else:
            out[constants.PREFIX_SEPARATOR.join(key_path)] = _to_string(value)
    return out


class PropertiesYamlFormat(base.PropertiesFormat):
    """Flat YAML mappings of string keys to string values."""

    name = "yaml"
    suffixes = (".yaml", ".yml")

    def read(self, stream: _typing.TextIO) -> dict[str, str]:
        loader = _LineTrackingLoader(stream.read())
        try:
            data = loader.get_single_data()
        except _yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            raise errors.PropertiesFormatError(f"invalid YAML: {e}", line=line) from e
        finally:
            loader.dispose()

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise errors.PropertiesFormatError(
                f"document must be a YAML mapping, got {type(data).__name__}"
            )
        result = _flatten(data, loader._line_registry)
        _logger.debug("Read %d YAML properties", len(result))
        return result

    def write(
        self,
        data: _typing.Mapping[str, str],
        stream: _typing.TextIO,
        comments: str | None = None,
    ) -> None:
        if comments is not None:
            for comment_line in comments.splitlines():
                stream.write(f"# {comment_line}\n" if comment_line else "#\n")
        if not data:
            stream.write("{}\n")
            return
        _yaml.dump(
            dict(data),
            stream,
            Dumper=_StringDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
