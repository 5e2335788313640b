"""Placeholder interpolation engine for PropConf properties."""

import logging
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .exceptions import UnresolvablePlaceholderError, UnresolvedPlaceholder
from .merge import MergedProperty
from .utils import normalize_key

logger = logging.getLogger(__name__)

DEFAULT_START_DELIMITER = "${"
DEFAULT_END_DELIMITER = "}"
DEFAULT_VALUE_SEPARATOR = ":"
DEFAULT_MAX_DEPTH = 100


class PlaceholderResolver:
    """Engine for recursive placeholder expansion over a merged property table."""

    def __init__(
        self,
        properties: Mapping[str, Union[MergedProperty, str]],
        start_delimiter: str = DEFAULT_START_DELIMITER,
        end_delimiter: str = DEFAULT_END_DELIMITER,
        default_value_separator: str = DEFAULT_VALUE_SEPARATOR,
        ignore_unresolvable: bool = False,
        case_sensitive: bool = True,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """Initialize placeholder resolver.

        Args:
            properties: Merged raw values  # (key -> MergedProperty or plain string)
            start_delimiter: Text opening a placeholder
            end_delimiter: Text closing a placeholder
            default_value_separator: Separates the key from its fallback inside a placeholder
            ignore_unresolvable: Keep unresolved placeholders as literal text instead of failing
            case_sensitive: When False, keys are compared lower-cased
            max_depth: Deepest placeholder nesting, counting key references, followed before giving up

        Note:
            The table is never modified; every lookup reads the raw merged value.
        """
        self.start_delimiter = start_delimiter
        self.end_delimiter = end_delimiter
        self.default_value_separator = default_value_separator
        self.ignore_unresolvable = ignore_unresolvable
        self.case_sensitive = case_sensitive
        self.max_depth = max_depth

        self.properties: Dict[str, MergedProperty] = {}
        for key, value in properties.items():
            if not isinstance(value, MergedProperty):
                value = MergedProperty(key, value, 0)
            self.properties[normalize_key(key, case_sensitive)] = value

        self.resolving: List[str] = []  # (keys on the active resolution chain, innermost last)
        self.resolved: Dict[str, str] = {}  # (fully expanded values, safe to reuse)
        self.nesting = 0  # (placeholders currently being expanded, across keys)

    def resolve_all(self) -> Dict[str, str]:
        """Resolve the placeholders of every property.

        Returns:
            Mapping from key to its expanded value  # (same key order as the input)

        Raises:
            UnresolvablePlaceholderError: If any value keeps unresolved placeholders
                and ignoring them was not requested
        """
        result: Dict[str, str] = {}
        errors: List[UnresolvedPlaceholder] = []

        for key, prop in self.properties.items():
            value, unresolved = self._resolve_key(key)
            result[key] = value
            if unresolved:
                errors.append(UnresolvedPlaceholder(key, prop.raw_value, unresolved))

        logger.debug("Resolved %d properties, %d with unresolved placeholders", len(result), len(errors))

        if errors and not self.ignore_unresolvable:
            raise UnresolvablePlaceholderError(errors)
        return result

    def resolve(self, key: str) -> str:
        """Resolve the placeholders of a single property.

        Args:
            key: Property key

        Returns:
            Expanded value

        Raises:
            KeyError: If the key is not defined
            UnresolvablePlaceholderError: If the value keeps unresolved placeholders
                and ignoring them was not requested
        """
        key = normalize_key(key, self.case_sensitive)
        prop = self.properties[key]
        value, unresolved = self._resolve_key(key)
        if unresolved and not self.ignore_unresolvable:
            raise UnresolvablePlaceholderError([UnresolvedPlaceholder(key, prop.raw_value, unresolved)])
        return value

    def _resolve_key(self, key: str) -> Tuple[str, List[str]]:
        """Expand the raw value of a defined key.

        Returns:
            Expanded value and the placeholder texts left unresolved in it
        """
        if key in self.resolved:
            return self.resolved[key], []

        prop = self.properties[key]
        if not prop.resolvable:
            return prop.raw_value, []

        self.resolving.append(key)
        try:
            value, unresolved = self._expand(prop.raw_value)
        finally:
            self.resolving.pop()

        # Values with unresolved parts depend on the active chain, so they are never cached
        if not unresolved:
            self.resolved[key] = value
        return value, unresolved

    def _expand(self, text: str) -> Tuple[str, List[str]]:
        """Expand every placeholder of a string, rescanning until nothing changes.

        Substitution can assemble new placeholder text (`${open}key${close}`), so the
        result of each pass is scanned again. The number of passes is bounded by `max_depth`.

        Args:
            text: Text possibly containing placeholders

        Returns:
            Expanded text and the placeholder texts left unresolved in it
        """
        for _ in range(self.max_depth):
            expanded, unresolved = self._expand_once(text)
            if expanded == text or self.start_delimiter not in expanded:
                return expanded, unresolved
            text = expanded

        logger.debug("Placeholder expansion still changing after %d passes: %s", self.max_depth, text)
        expanded, unresolved = self._expand_once(text)
        if expanded != text:
            unresolved = unresolved or [expanded]
        return expanded, unresolved

    def _expand_once(self, text: str) -> Tuple[str, List[str]]:
        """Expand every placeholder of a string in one left to right pass."""
        start, end = self.start_delimiter, self.end_delimiter
        parts: List[str] = []
        unresolved: List[str] = []
        pos = 0

        while True:
            begin = text.find(start, pos)
            if begin < 0:
                parts.append(text[pos:])
                break

            parts.append(text[pos:begin])
            close = self._find_closing_delimiter(text, begin)
            if close < 0:
                # Unterminated start delimiter is plain text; inner placeholders may still close
                parts.append(start)
                pos = begin + len(start)
                continue

            replacement, failed = self._expand_placeholder(text[begin + len(start) : close])
            parts.append(replacement)
            unresolved.extend(failed)
            pos = close + len(end)

        return "".join(parts), unresolved

    def _find_closing_delimiter(self, text: str, begin: int) -> int:
        """Find the end delimiter matching the start delimiter at `begin`, honoring nesting.

        Returns:
            Index of the matching end delimiter, or -1 if it is missing
        """
        start, end = self.start_delimiter, self.end_delimiter
        depth = 1
        i = begin + len(start)

        while i < len(text):
            if text.startswith(end, i):
                depth -= 1
                if depth == 0:
                    return i
                i += len(end)
            elif text.startswith(start, i):
                depth += 1
                i += len(start)
            else:
                i += 1
        return -1

    def _split_expression(self, body: str) -> Tuple[str, Optional[str]]:
        """Split a placeholder body into key and fallback at the first top-level separator."""
        start, end, separator = self.start_delimiter, self.end_delimiter, self.default_value_separator
        depth = 0
        i = 0

        while i < len(body):
            if depth == 0 and body.startswith(separator, i):
                return body[:i], body[i + len(separator) :]
            if depth > 0 and body.startswith(end, i):
                depth -= 1
                i += len(end)
            elif body.startswith(start, i):
                depth += 1
                i += len(start)
            else:
                i += 1
        return body, None

    def _expand_placeholder(self, body: str) -> Tuple[str, List[str]]:
        """Resolve one placeholder from the text between its delimiters.

        Args:
            body: Placeholder expression  # (`key` or `key:fallback`, possibly nested)

        Returns:
            Replacement text and the placeholder texts left unresolved in it

        Note:
            Placeholders nested in keys, fallbacks and referenced values all count
            towards `max_depth`; anything deeper is left unresolved.
        """
        if self.nesting >= self.max_depth:
            logger.debug("Placeholders nested deeper than %d: %s", self.max_depth, " -> ".join(self.resolving))
            literal = self.start_delimiter + body + self.end_delimiter
            return literal, [literal]

        self.nesting += 1
        try:
            key_part, fallback = self._split_expression(body)

            # Nested placeholders in the key are resolved first, innermost outward
            key, failed = self._expand(key_part)
            literal = self.start_delimiter + key
            if fallback is not None:
                literal += self.default_value_separator + fallback
            literal += self.end_delimiter

            if failed:
                return literal, [literal]

            lookup_key = normalize_key(key, self.case_sensitive)
            prop = self.properties.get(lookup_key)

            if prop is None:
                if fallback is not None:
                    return self._expand(fallback)
                return literal, [literal]

            if lookup_key in self.resolving:
                logger.debug("Circular placeholder reference: %s -> %s", " -> ".join(self.resolving), lookup_key)
                return literal, [literal]

            # Literal values referenced from elsewhere are usable only if they hold no placeholder
            if not prop.resolvable:
                if self.start_delimiter in prop.raw_value:
                    return literal, [literal]
                return prop.raw_value, []

            value, failed = self._resolve_key(lookup_key)
            if failed:
                return literal, [literal]
            return value, []
        finally:
            self.nesting -= 1


def resolve_placeholders(
    properties: Mapping[str, Union[MergedProperty, str]],
    start_delimiter: str = DEFAULT_START_DELIMITER,
    end_delimiter: str = DEFAULT_END_DELIMITER,
    default_value_separator: str = DEFAULT_VALUE_SEPARATOR,
    ignore_unresolvable: bool = False,
    case_sensitive: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Dict[str, str]:
    """Resolve the placeholders of every property in a merged table.

    Raises:
        UnresolvablePlaceholderError: If any value keeps unresolved placeholders
            and ignoring them was not requested
    """
    resolver = PlaceholderResolver(
        properties,
        start_delimiter=start_delimiter,
        end_delimiter=end_delimiter,
        default_value_separator=default_value_separator,
        ignore_unresolvable=ignore_unresolvable,
        case_sensitive=case_sensitive,
        max_depth=max_depth,
    )
    return resolver.resolve_all()
