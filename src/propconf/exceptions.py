"""Custom exceptions for PropConf."""

from dataclasses import dataclass, field
from typing import Any, List


class PropConfError(Exception):
    """Base exception for PropConf errors."""

    pass


class SourceUnavailableError(PropConfError):
    """Raised when a required configuration source cannot be read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read configuration source [{source}]: {reason}")


@dataclass
class UnresolvedPlaceholder:
    """Represents a value whose placeholders could not be expanded."""

    key: str
    value: str
    placeholders: List[str] = field(default_factory=list)

    def format_error_message(self) -> str:
        """Format error message for an unresolved value.

        Returns:
            Formatted error message string
        """
        lines = [
            "❌ Unresolvable placeholders",
            f"Key: {self.key}",
            f"Value: {self.value}",
            f"Placeholders: {', '.join(self.placeholders)}",
        ]
        return "\n".join(lines)


class UnresolvablePlaceholderError(PropConfError):
    """Raised when one or more placeholders cannot be expanded."""

    def __init__(self, errors: List[UnresolvedPlaceholder]):
        """Initialize unresolvable placeholder error.

        Args:
            errors: Every offending key, in resolution order
        """
        self.errors = errors
        error_messages = [error.format_error_message() for error in errors]
        super().__init__("\n\n".join(error_messages))

    @property
    def keys(self) -> List[str]:
        """Keys of all values that could not be resolved."""
        return [error.key for error in self.errors]


class ValueParseError(PropConfError, ValueError):
    """Raised when a stored value cannot be converted to the requested type."""

    def __init__(self, key: str, value: str, target: Any):
        self.key = key
        self.value = value
        self.target = target
        target_name = getattr(target, "__name__", str(target))
        super().__init__(f"Cannot parse value {value!r} of key [{key}] as {target_name}")
