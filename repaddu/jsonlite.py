"""A small, lenient JSON reader."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from .core import ExitCode, RepadduError

_NUMBER_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_WHITESPACE = " \t\n\r\f\v"
_ESCAPES = {'"': '"', "\\": "\\", "/": "/", "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t"}


class JsonParseError(RepadduError):
    def __init__(self, message: str = "JSON parse error") -> None:
        super().__init__(message, ExitCode.invalid_usage)


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def peek(self, expected: str) -> bool:
        self.skip_whitespace()
        return self.text.startswith(expected, self.pos)

    def consume(self, expected: str) -> bool:
        if self.peek(expected):
            self.pos += 1
            return True
        return False

    def expect(self, expected: str) -> None:
        if not self.consume(expected):
            raise JsonParseError()

    def parse_value(self) -> Any:
        self.skip_whitespace()
        if self.pos >= len(self.text):
            raise JsonParseError()
        ch = self.text[self.pos]
        if ch == "{":
            return self.parse_object()
        if ch == "[":
            return self.parse_array()
        if ch == '"':
            return self.parse_string()
        if ch == "t":
            return self.parse_literal("true", True)
        if ch == "f":
            return self.parse_literal("false", False)
        if ch == "n":
            return self.parse_literal("null", None)
        return self.parse_number()

    def parse_literal(self, literal: str, value: Any) -> Any:
        if not self.text.startswith(literal, self.pos):
            raise JsonParseError()
        self.pos += len(literal)
        return value

    def parse_number(self) -> float:
        start = self.pos
        end = start
        if end < len(self.text) and self.text[end] == "-":
            end += 1
        while end < len(self.text) and (self.text[end] in "0123456789."):
            end += 1
        if end == start:
            raise JsonParseError()
        self.pos = end
        match = _NUMBER_PREFIX.match(self.text, start, end)
        if match is None:
            raise JsonParseError()
        return float(match.group())

    def parse_string(self) -> str:
        self.expect('"')
        chars: List[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            self.pos += 1
            if ch == '"':
                return "".join(chars)
            if ch == "\\":
                if self.pos >= len(self.text):
                    break
                escaped = self.text[self.pos]
                self.pos += 1
                if escaped not in _ESCAPES:
                    raise JsonParseError()
                chars.append(_ESCAPES[escaped])
            else:
                chars.append(ch)
        raise JsonParseError()

    def parse_object(self) -> Dict[str, Any]:
        self.expect("{")
        result: Dict[str, Any] = {}
        if self.consume("}"):
            return result
        while True:
            key = self.parse_string()
            self.expect(":")
            result[key] = self.parse_value()
            if self.consume("}"):
                return result
            self.expect(",")

    def parse_array(self) -> List[Any]:
        self.expect("[")
        result: List[Any] = []
        if self.consume("]"):
            return result
        while True:
            result.append(self.parse_value())
            if self.consume("]"):
                return result
            self.expect(",")


def parse(text: str) -> Any:
    """Parse the first JSON value in ``text``; trailing text is ignored.

    Numbers come back as floats. Raises JsonParseError on malformed input.
    """
    return _Parser(text).parse_value()