"""Mapping of path prefixes to named components, loaded from a JSON file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Dict, List, Union

from .core import ExitCode, RepadduError

_WHITESPACE = " \t\n\r\f\v"
_ESCAPES = {'"': '"', "\\": "\\", "/": "/", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}


@dataclass
class ComponentMap:
    """Component name to the path prefixes that belong to it."""

    component_to_prefixes: Dict[str, List[str]] = field(default_factory=dict)


class _SyntaxFailure(Exception):
    pass


class _Reader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def consume(self, expected: str) -> bool:
        self.skip_whitespace()
        if self.text.startswith(expected, self.pos):
            self.pos += 1
            return True
        return False

    def string(self) -> str:
        self.skip_whitespace()
        if not self.text.startswith('"', self.pos):
            raise _SyntaxFailure
        self.pos += 1
        chars: List[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            self.pos += 1
            if ch == '"':
                return "".join(chars)
            if ch == "\\":
                if self.pos >= len(self.text):
                    raise _SyntaxFailure
                escaped = self.text[self.pos]
                self.pos += 1
                if escaped not in _ESCAPES:
                    raise _SyntaxFailure
                chars.append(_ESCAPES[escaped])
            else:
                chars.append(ch)
        raise _SyntaxFailure

    def string_array(self) -> List[str]:
        if not self.consume("["):
            raise _SyntaxFailure
        values: List[str] = []
        if self.consume("]"):
            return values
        while True:
            values.append(self.string())
            if self.consume("]"):
                return values
            if not self.consume(","):
                raise _SyntaxFailure


def _normalize_prefix(value: str) -> str:
    return value.replace("\\", "/")


def _invalid(message: str) -> RepadduError:
    return RepadduError(message, ExitCode.invalid_usage)


def load_component_map(path: Union[str, Path]) -> ComponentMap:
    """Read a JSON object of ``{"component": ["prefix", ...]}``.

    Prefixes get forward slashes and lose one leading slash. Raises
    RepadduError with io_failure if the file cannot be read, and with
    invalid_usage if its content is malformed or empty.
    """
    try:
        with open(path, encoding="utf-8") as stream:
            text = stream.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise RepadduError("Failed to open component map.", ExitCode.io_failure) from exc

    reader = _Reader(text)
    if not reader.consume("{"):
        raise _invalid("Component map must be a JSON object.")
    if reader.consume("}"):
        raise _invalid("Component map is empty.")

    result = ComponentMap()
    while True:
        try:
            key = reader.string()
        except _SyntaxFailure:
            raise _invalid("Invalid JSON key in component map.") from None
        if not reader.consume(":"):
            raise _invalid("Expected ':' after component key.")
        try:
            prefixes = reader.string_array()
        except _SyntaxFailure:
            raise _invalid("Component map values must be arrays of strings.") from None

        normalized = []
        for prefix in prefixes:
            prefix = _normalize_prefix(prefix)
            if prefix.startswith("/"):
                prefix = prefix[1:]
            normalized.append(prefix)
        result.component_to_prefixes.setdefault(key, normalized)

        if reader.consume("}"):
            break
        if not reader.consume(","):
            raise _invalid("Expected ',' between component entries.")

    return result


def resolve_component(component_map: ComponentMap, relative_path: Union[str, PurePath]) -> str:
    """Name of the component with the longest prefix matching the path, or "unmapped"."""
    normalized = PurePath(relative_path).as_posix()
    best_component = "unmapped"
    best_length = 0
    for component in sorted(component_map.component_to_prefixes):
        for raw in component_map.component_to_prefixes[component]:
            prefix = _normalize_prefix(raw)
            if prefix and normalized.startswith(prefix) and len(prefix) > best_length:
                best_length = len(prefix)
                best_component = component
    return best_component