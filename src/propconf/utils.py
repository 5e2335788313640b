"""Utility functions for PropConf."""

import re
from typing import Any, Dict, Iterable, List, TextIO, Tuple

import yaml

LIST_SEPARATOR = ","

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class _ConfigLoader(yaml.SafeLoader):
    """Safe loader that also reads `1e-4` style numbers as floats."""


# Custom loader to handle scientific notation correctly
_ConfigLoader.add_implicit_resolver(
    tag="tag:yaml.org,2002:float",
    regexp=re.compile(r"-? [1-9] ( \. [0-9]* [1-9] )? ( e [-+] [1-9] [0-9]* )?", re.X),
    first=list("-+0123456789."),
)


def load_yaml(stream: Any) -> Any:
    """Load YAML content from a stream.

    Args:
        stream: Stream to read YAML from  # (file-like object or string)
    Returns:
        Parsed YAML content  # (nested dict structure for configuration files)
    """
    return yaml.load(stream, Loader=_ConfigLoader)


def dump_yaml(data: Dict[str, Any]) -> str:
    """Dump a mapping as block-style YAML, keeping key order."""
    return yaml.dump(data, default_flow_style=False, indent=2, sort_keys=False, allow_unicode=True)


def normalize_key(key: str, case_sensitive: bool) -> str:
    """Return the lookup form of a key for the given normalization mode."""
    return key if case_sensitive else key.lower()


def to_property_string(value: Any) -> str:
    """Render a scalar YAML value the way it would be written in a properties file."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_mapping(data: Dict[str, Any], separator: str = LIST_SEPARATOR) -> Dict[str, str]:
    """Flatten nested configuration data into dot-separated keys.

    Args:
        data: Nested mapping  # (as loaded from a YAML file)
        separator: Separator used to join lists of scalars

    Returns:
        Flat mapping from dotted key to string value
    """
    result: Dict[str, str] = {}

    def _flatten(value: Any, prefix: str) -> None:
        # Handle nested structures
        if isinstance(value, dict):
            for key, child in value.items():
                full_key = f"{prefix}.{key}" if prefix else str(key)
                _flatten(child, full_key)
        elif isinstance(value, list):
            if any(isinstance(item, (dict, list)) for item in value):
                for index, item in enumerate(value):
                    _flatten(item, f"{prefix}.{index}")
            else:
                result[prefix] = separator.join(to_property_string(item) for item in value)
        else:
            result[prefix] = to_property_string(value)

    _flatten(data, "")
    return result


def split_list(value: str, separator: str = LIST_SEPARATOR) -> List[str]:
    """Split a stored value into items, dropping trailing empty items."""
    items = value.split(separator)
    while items and items[-1] == "":
        items.pop()
    return items


def _logical_lines(lines: Iterable[str]) -> Iterable[str]:
    """Join backslash-continued physical lines into logical lines."""
    buffer = ""
    continuing = False
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if continuing:
            line = line.lstrip()
        elif not line.strip() or line.lstrip()[0] in "#!":
            # Comment or blank line
            continue
        else:
            line = line.lstrip()

        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continuing = True
            continue

        yield buffer + line
        buffer = ""
        continuing = False

    if continuing:
        yield buffer


def _unescape(text: str) -> str:
    """Apply properties-file escape sequences."""
    chars: List[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            chars.append(char)
            i += 1
            continue

        escaped = text[i + 1]
        if escaped == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", text[i + 2 : i + 6]):
            chars.append(chr(int(text[i + 2 : i + 6], 16)))
            i += 6
        else:
            chars.append(_ESCAPES.get(escaped, escaped))
            i += 2
    return "".join(chars)


def _split_key_value(line: str) -> Tuple[str, str]:
    """Split a logical line at the first unescaped separator."""
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in "=:" or char.isspace():
            break
        i += 1

    key = line[:i]
    # Whitespace around a single `=` or `:` belongs to the separator
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def load_properties(stream: TextIO) -> Dict[str, str]:
    """Load key/value pairs from a Java-style properties stream.

    Supports `#` and `!` comments, `=`, `:` or whitespace separators,
    backslash line continuation and the usual escape sequences. Later
    duplicates of a key override earlier ones.

    Args:
        stream: Text stream to read  # (opened properties file)

    Returns:
        Ordered mapping from key to raw value
    """
    result: Dict[str, str] = {}
    for line in _logical_lines(stream):
        key, value = _split_key_value(line)
        result[key] = value
    return result
