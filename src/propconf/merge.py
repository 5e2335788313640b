"""Priority-based merging of configuration sources."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple, Union

from .readers import PropertyValue
from .utils import normalize_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergedProperty:
    """The winning raw value of a key across all sources."""

    key: str
    raw_value: str
    priority: int
    resolvable: bool = True


def merge(
    sources: Iterable[Tuple[int, Mapping[str, Union[str, PropertyValue]]]],
    case_sensitive: bool = True,
) -> Dict[str, MergedProperty]:
    """Merge prioritized sources into one mapping.

    Sources are visited in registration order. A new entry for a key replaces
    the current winner when its priority is numerically lower or exactly
    equal, so among equal priorities the source registered last wins.

    Args:
        sources: Ordered (priority, values) pairs  # (lower priority number = higher precedence)
        case_sensitive: When False, keys are lower-cased before merging

    Returns:
        Mapping from (normalized) key to its merged property  # (in first-seen key order)
    """
    result: Dict[str, MergedProperty] = {}

    for index, (priority, values) in enumerate(sources):
        replaced = 0
        for key, value in values.items():
            key = normalize_key(key, case_sensitive)
            incumbent = result.get(key)
            if incumbent is not None and priority > incumbent.priority:
                continue

            value = PropertyValue.of(value)
            if incumbent is not None:
                replaced += 1
            result[key] = MergedProperty(key, value.value, priority, value.resolvable)

        logger.debug(
            "Merged source #%d (priority %d): %d keys, %d overriding earlier sources",
            index,
            priority,
            len(values),
            replaced,
        )

    return result
