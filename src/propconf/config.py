"""PropConf resolved property store module."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Type, TypeVar

from .exceptions import ValueParseError
from .utils import LIST_SEPARATOR, normalize_key, split_list

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


class Properties(Mapping[str, str]):
    """Immutable view of resolved properties with typed accessors."""

    def __init__(
        self,
        data: Mapping[str, str],
        case_sensitive: bool = True,
        list_separator: str = LIST_SEPARATOR,
    ):
        """Initialize property store.

        Args:
            data: Resolved values  # (flat key -> post-substitution string)
            case_sensitive: When False, lookups are lower-cased
            list_separator: Default separator for list accessors
        """
        self._case_sensitive = case_sensitive
        self._list_separator = list_separator
        self._data = MappingProxyType({normalize_key(k, case_sensitive): v for k, v in data.items()})

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    def __getitem__(self, key: str) -> str:
        return self._data[normalize_key(key, self._case_sensitive)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key, self._case_sensitive) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Dict-style get with default."""
        return self._data.get(normalize_key(key, self._case_sensitive), default)

    def get_str(self, key: str, default: Any = None) -> Optional[str]:
        return self.get(key, default)

    def get_mapped(self, key: str, map: Callable[[str], T], default: Any = None) -> Optional[T]:
        """Return the value of a key converted by `map`.

        Args:
            key: Property key
            map: Conversion function  # (raising ValueError/TypeError on bad input)
            default: Returned when the key is not defined

        Returns:
            Converted value, or the default if the key is missing

        Raises:
            ValueParseError: If the conversion fails
        """
        value = self.get(key)
        if value is None:
            return default
        try:
            return map(value)
        except (ValueError, TypeError) as e:
            raise ValueParseError(key, value, map) from e

    def get_int(self, key: str, default: Any = None) -> Optional[int]:
        return self.get_mapped(key, int, default)

    def get_float(self, key: str, default: Any = None) -> Optional[float]:
        return self.get_mapped(key, float, default)

    def get_bool(self, key: str, default: Any = None) -> Optional[bool]:
        """Return a boolean value; only `true` and `false` (any case) are accepted."""
        value = self.get(key)
        if value is None:
            return default
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False
        raise ValueParseError(key, value, bool)

    def get_enum(self, key: str, enum_type: Type[E], default: Any = None) -> Optional[E]:
        """Return the enum member whose name equals the stored value."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return enum_type[value]
        except KeyError as e:
            raise ValueParseError(key, value, enum_type) from e

    def get_list(
        self,
        key: str,
        separator: Optional[str] = None,
        map: Optional[Callable[[str], T]] = None,
    ) -> List[Any]:
        """Return the value split into items.

        Args:
            key: Property key
            separator: Item separator  # (defaults to the store's list separator)
            map: Optional conversion applied to every item

        Returns:
            List of items, empty if the key is not defined  # (trailing empty items dropped)

        Raises:
            ValueParseError: If `map` fails on an item
        """
        value = self.get(key)
        if value is None:
            return []
        items = split_list(value, separator or self._list_separator)
        if map is None:
            return items
        try:
            return [map(item) for item in items]
        except (ValueError, TypeError) as e:
            raise ValueParseError(key, value, map) from e

    def get_tuple(self, key: str, separator: Optional[str] = None) -> Tuple[str, ...]:
        return tuple(self.get_list(key, separator))

    def to_dict(self) -> Dict[str, str]:
        """Convert to plain dictionary."""
        return dict(self._data)

    def __repr__(self) -> str:
        """String representation."""
        return f"Properties({dict(self._data)})"
