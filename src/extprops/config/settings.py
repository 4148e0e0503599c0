"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with EXTPROPS_ prefix

Example:
  EXTPROPS_DELIMITER=;
  EXTPROPS_DEFAULT_FORMAT=yaml
  EXTPROPS_WRITE_TIMESTAMP=false
"""

import codecs as _codecs
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import extprops.constants as constants
import extprops.store as store
import extprops.store.codec as codec

FormatName = _typing.Literal["properties", "xml", "yaml"]


class Settings(_pydantic_settings.BaseSettings):
    """
    Defaults for new stores and for reading and writing files.

    Settings only affect stores created through new_store() or
    PropertyStore.from_path(), and files read or written by path.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="EXTPROPS_",
        extra="ignore",
    )

    delimiter: str = _pydantic.Field(
        default=constants.DEFAULT_DELIMITER,
        description="Array delimiter for new stores",
    )
    default_format: FormatName = _pydantic.Field(
        default=_typing.cast(FormatName, constants.DEFAULT_FORMAT),
        description="Format used when a file suffix is not recognized",
    )
    encoding: str = _pydantic.Field(
        default=constants.DEFAULT_ENCODING,
        description="Text encoding for files read and written by path",
    )
    write_timestamp: bool = _pydantic.Field(
        default=True,
        description="Write a date comment at the top of .properties files",
    )

    @_pydantic.field_validator("delimiter")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        # InvalidArgumentError is a ValueError, which pydantic reports
        return codec.validate_delimiter(value)

    @_pydantic.field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        try:
            _codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {value}") from e
        return value

    def new_store(
        self,
        initial: _typing.Any = None,
        *,
        defaults: "store.PropertyStore | None" = None,
    ) -> store.PropertyStore:
        """Create an empty (or pre-filled) store using the configured delimiter."""
        return store.PropertyStore(initial, defaults=defaults, delimiter=self.delimiter)

    def format_options(self, name: str) -> dict[str, _typing.Any]:
        """Constructor options for a format created from these settings."""
        if name.lower() == "properties":
            return {"timestamp": self.write_timestamp}
        return {}
