"""PropConf builder module.

Reads every registered source, merges them by priority, expands
placeholders and returns the resolved :class:`~propconf.config.Properties`.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from .config import Properties
from .interpolation import (
    DEFAULT_END_DELIMITER,
    DEFAULT_MAX_DEPTH,
    DEFAULT_START_DELIMITER,
    DEFAULT_VALUE_SEPARATOR,
    PlaceholderResolver,
)
from .merge import merge
from .readers import EnvironmentReader, Reader
from .utils import LIST_SEPARATOR

logger = logging.getLogger(__name__)

HIGHEST_PRIORITY = 0
DEFAULT_ARGUMENTS_PRIORITY = 100
DEFAULT_ENVIRONMENT_PRIORITY = 1000
DEFAULT_PRIORITY = 10000
LOWEST_PRIORITY = sys.maxsize


@dataclass(frozen=True)
class BuildOptions:
    """Settings for merging and placeholder resolution."""

    start_delimiter: str = DEFAULT_START_DELIMITER
    end_delimiter: str = DEFAULT_END_DELIMITER
    default_value_separator: str = DEFAULT_VALUE_SEPARATOR
    ignore_unresolvable_placeholders: bool = False
    case_sensitive: bool = True
    default_priority: int = DEFAULT_PRIORITY
    list_separator: str = LIST_SEPARATOR
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        for name in ("start_delimiter", "end_delimiter", "default_value_separator", "list_separator"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

    def replace(self, **changes: Any) -> "BuildOptions":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Source:
    """A reader registered with a priority; None means the build's default priority."""

    reader: Reader
    priority: Optional[int] = None


SourceLike = Union[Source, Reader, Tuple[Reader, Optional[int]]]


def _as_source(source: SourceLike) -> Source:
    if isinstance(source, Source):
        return source
    if isinstance(source, tuple):
        return Source(*source)
    return Source(source)


def environment_sources(priority: int = DEFAULT_ENVIRONMENT_PRIORITY) -> List[Source]:
    """Standard environment registrations.

    The raw variables and their `app.name` style transformed keys are both
    registered, so `${APP_NAME}` and `${app.name}` can be used alike.

    Args:
        priority: Priority of both registrations

    Returns:
        Sources ready to pass to :func:`build`
    """
    return [
        Source(EnvironmentReader(), priority),
        Source(EnvironmentReader(transform_keys=True), priority),
    ]


def build(sources: Iterable[SourceLike], options: Optional[BuildOptions] = None) -> Properties:
    """Build the resolved property store.

    Args:
        sources: Readers in registration order  # (Source, bare reader, or (reader, priority) tuple)
        options: Merge and resolution settings  # (defaults to BuildOptions())

    Returns:
        Immutable resolved properties

    Raises:
        SourceUnavailableError: If a required source cannot be read
        UnresolvablePlaceholderError: If placeholders cannot be expanded and ignoring
            them was not requested
    """
    options = options or BuildOptions()
    registrations: Sequence[Source] = [_as_source(source) for source in sources]

    # Step 1: Read every source, in registration order
    batches = []
    for registration in registrations:
        priority = options.default_priority if registration.priority is None else registration.priority
        values = registration.reader.read()
        logger.debug("Read %d keys from %r with priority %d", len(values), registration.reader, priority)
        batches.append((priority, values))

    # Step 2: Merge by priority
    merged = merge(batches, case_sensitive=options.case_sensitive)

    # Step 3: Resolve placeholders
    resolver = PlaceholderResolver(
        merged,
        start_delimiter=options.start_delimiter,
        end_delimiter=options.end_delimiter,
        default_value_separator=options.default_value_separator,
        ignore_unresolvable=options.ignore_unresolvable_placeholders,
        case_sensitive=options.case_sensitive,
        max_depth=options.max_depth,
    )
    resolved = resolver.resolve_all()

    logger.info("Built configuration with %d properties from %d sources", len(resolved), len(registrations))
    return Properties(resolved, case_sensitive=options.case_sensitive, list_separator=options.list_separator)
