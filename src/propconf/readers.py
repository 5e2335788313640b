"""Configuration source readers for PropConf.

A reader is anything with a ``read()`` method returning an ordered mapping
from key to :class:`PropertyValue`. Readers only perform I/O; merging and
placeholder resolution happen afterwards in the builder.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Protocol, Union, runtime_checkable

import yaml

from .exceptions import SourceUnavailableError
from .utils import flatten_mapping, load_properties, load_yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass(frozen=True)
class PropertyValue:
    """The raw value of a property and whether its placeholders should be expanded."""

    value: str
    resolvable: bool = True

    @classmethod
    def of(cls, value: Union[str, "PropertyValue"]) -> "PropertyValue":
        """Wrap a plain string, passing existing values through."""
        if isinstance(value, PropertyValue):
            return value
        return cls(str(value))


@runtime_checkable
class Reader(Protocol):
    """Protocol for configuration sources."""

    def read(self) -> Dict[str, PropertyValue]:
        """Return the key/value pairs of this source, in source order.

        Raises:
            SourceUnavailableError: If a required source cannot be read
        """
        ...


def _wrap_all(values: Mapping[str, Union[str, PropertyValue]]) -> Dict[str, PropertyValue]:
    return {key: PropertyValue.of(value) for key, value in values.items()}


class MappingReader:
    """Reader returning programmatically supplied values."""

    def __init__(self, values: Optional[Mapping[str, Union[str, PropertyValue]]] = None):
        self._values: Dict[str, PropertyValue] = _wrap_all(values or {})

    def add(self, key: str, value: Union[str, PropertyValue], resolvable: bool = True) -> "MappingReader":
        """Add or replace a value.

        Args:
            key: Property key
            value: Raw value  # (may contain placeholders)
            resolvable: Whether placeholders inside the value are expanded

        Returns:
            This reader, for chaining
        """
        if isinstance(value, PropertyValue):
            self._values[key] = value
        else:
            self._values[key] = PropertyValue(str(value), resolvable)
        return self

    def read(self) -> Dict[str, PropertyValue]:
        return dict(self._values)


class EnvironmentReader:
    """Reader for process environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None, transform_keys: bool = False):
        """Initialize environment reader.

        Args:
            environ: Variables to read  # (defaults to os.environ at read time)
            transform_keys: Lower-case keys and turn `_` into `.`  # (APP_NAME -> app.name)
        """
        self.environ = environ
        self.transform_keys = transform_keys

    def read(self) -> Dict[str, PropertyValue]:
        environ = os.environ if self.environ is None else self.environ
        result = {}
        for key, value in environ.items():
            if self.transform_keys:
                key = key.lower().replace("_", ".")
            result[key] = PropertyValue(value)
        logger.debug("Read %d environment variables (transform_keys=%s)", len(result), self.transform_keys)
        return result


class ArgumentsReader:
    """Reader for `key=value` command-line overrides."""

    def __init__(self, arguments: Iterable[str]):
        self.arguments = list(arguments)

    def read(self) -> Dict[str, PropertyValue]:
        result = {}
        for argument in self.arguments:
            if "=" not in argument:
                raise SourceUnavailableError(argument, "override must be in format <key>=<value>")
            key, value = argument.split("=", 1)
            result[key.strip()] = PropertyValue(value)
        return result


class _FileReader(ABC):
    """Shared logic for readers backed by a file on disk."""

    def __init__(self, path: Union[str, Path], ignore_not_found: bool = False, encoding: str = "utf-8"):
        """Initialize file reader.

        Args:
            path: Path of the file  # (an optional `file:` prefix is accepted)
            ignore_not_found: Return no values instead of failing when the file is missing
            encoding: Text encoding of the file
        """
        path = str(path)
        if path.startswith("file:"):
            path = path[len("file:") :]
        self.path = Path(path)
        self.ignore_not_found = ignore_not_found
        self.encoding = encoding

    def read(self) -> Dict[str, PropertyValue]:
        logger.debug("Reading properties from [%s]", self.path)
        try:
            with open(self.path, "r", encoding=self.encoding) as f:
                values = self._load(f)
        except FileNotFoundError as e:
            if self.ignore_not_found:
                logger.warning("Cannot access properties file [%s]. Error [%s]", self.path, e.strerror)
                return {}
            raise SourceUnavailableError(str(self.path), "file not found") from e
        except OSError as e:
            raise SourceUnavailableError(str(self.path), str(e)) from e
        return _wrap_all(values)

    @abstractmethod
    def _load(self, stream) -> Dict[str, str]:
        """Parse an open text stream into raw key/value strings."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class PropertiesFileReader(_FileReader):
    """Reader for Java-style `.properties` files."""

    def _load(self, stream) -> Dict[str, str]:
        return load_properties(stream)


class YamlFileReader(_FileReader):
    """Reader for YAML files, flattened into dot-separated keys."""

    def _load(self, stream) -> Dict[str, str]:
        try:
            data = load_yaml(stream)
        except yaml.YAMLError as e:
            raise SourceUnavailableError(str(self.path), f"invalid YAML: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SourceUnavailableError(str(self.path), "YAML file must contain a mapping at the top level")
        return flatten_mapping(data)


def reader_for_path(path: Union[str, Path], ignore_not_found: bool = False) -> Reader:
    """Create the file reader matching a path's suffix.

    Args:
        path: File path  # (`.yaml`/`.yml` files are read as YAML, anything else as properties)
        ignore_not_found: Return no values when the file is missing

    Returns:
        Reader for the file
    """
    if str(path).lower().endswith(YAML_SUFFIXES):
        return YamlFileReader(path, ignore_not_found=ignore_not_found)
    return PropertiesFileReader(path, ignore_not_found=ignore_not_found)
