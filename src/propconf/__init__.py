"""PropConf - Prioritized Property Configuration.

Merges configuration from prioritized sources (properties and YAML files,
environment variables, overrides, in-memory mappings) into one flat
namespace and expands `${key}` placeholders across it.
"""
# ruff: noqa: F401

import logging

from .builder import (
    DEFAULT_ARGUMENTS_PRIORITY,
    DEFAULT_ENVIRONMENT_PRIORITY,
    DEFAULT_PRIORITY,
    HIGHEST_PRIORITY,
    LOWEST_PRIORITY,
    BuildOptions,
    Source,
    build,
    environment_sources,
)
from .config import Properties
from .exceptions import (
    PropConfError,
    SourceUnavailableError,
    UnresolvablePlaceholderError,
    UnresolvedPlaceholder,
    ValueParseError,
)
from .interpolation import PlaceholderResolver, resolve_placeholders
from .merge import MergedProperty, merge
from .parser import PropConfParser
from .readers import (
    ArgumentsReader,
    EnvironmentReader,
    MappingReader,
    PropertiesFileReader,
    PropertyValue,
    Reader,
    YamlFileReader,
    reader_for_path,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
