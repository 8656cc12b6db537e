"""A small JSON reader with the tolerances the map files rely on, and a printer."""

import re
from pathlib import Path

_WHITESPACE = " \n\r\t"
_NUMERIC = "-0123456789"
_ESCAPES = {"n": "\n", "b": "\b", "f": "\f", "r": "\r", "t": "\t", "\\": "\\"}
_LITERALS = (("true", True), ("false", False), ("null", None))
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class JsonError(ValueError):
    """Raised when a document cannot be parsed."""


class _Parser:
    def __init__(self, text):
        self.text = text
        self.pos = 0

    def _current(self):
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_whitespace(self):
        while self._current() and self._current() in _WHITESPACE:
            self.pos += 1

    def _expect(self, char, what):
        found = self._current()
        if found != char:
            raise JsonError(f"expected {what} at position {self.pos}, got {found!r}")
        self.pos += 1

    def value(self):
        char = self._current()
        if char and char in _NUMERIC:
            return self._number()
        for word, result in _LITERALS:
            if self.text.startswith(word, self.pos):
                self.pos += len(word)
                return result
        if char == "{":
            return self._object()
        if char == "[":
            return self._array()
        if char == '"':
            return self._string()
        raise JsonError(f"invalid token at position {self.pos}: {char!r}")

    def _scan_numeric(self, pos):
        while pos < len(self.text) and self.text[pos] in _NUMERIC:
            pos += 1
        return pos

    def _number(self):
        start = self.pos
        end = self._scan_numeric(start)
        if end < len(self.text) and self.text[end] == ".":
            end = self._scan_numeric(end + 1)
        match = _NUMBER_PREFIX.match(self.text, start)
        if match is None:
            raise JsonError(f"malformed number at position {start}")
        self.pos = end
        literal = match.group()
        if any(mark in literal for mark in ".eE"):
            return float(literal)
        return int(literal)

    def _string(self):
        self._expect('"', "quotes")
        chars = []
        while True:
            char = self._current()
            if not char:
                raise JsonError("unterminated string")
            self.pos += 1
            if char == '"':
                return "".join(chars)
            if char == "\\":
                escaped = self._current()
                if not escaped:
                    raise JsonError("unterminated string")
                self.pos += 1
                if escaped == "u":
                    raise JsonError("\\u escapes are not supported")
                char = _ESCAPES.get(escaped, escaped)
            chars.append(char)

    def _object(self):
        self.pos += 1
        result = {}
        self._skip_whitespace()
        if self._current() == "}":
            self.pos += 1
            return result
        while True:
            key = self._string()
            self._skip_whitespace()
            self._expect(":", "colon")
            self._skip_whitespace()
            result.setdefault(key, self.value())
            self._skip_whitespace()
            if self._current() == "}":
                break
            self._expect(",", "comma")
            self._skip_whitespace()
        self.pos += 1
        return result

    def _array(self):
        self.pos += 1
        result = []
        self._skip_whitespace()
        if self._current() == "]":
            self.pos += 1
            return result
        while True:
            result.append(self.value())
            self._skip_whitespace()
            if self._current() == "]":
                break
            self._expect(",", "comma")
            self._skip_whitespace()
        self.pos += 1
        return result


def loads(data):
    """Parse the JSON value at the start of ``data`` (str or UTF-8 bytes).

    Integers come back as ``int``, other numbers as ``float``. For repeated
    object keys the first value wins. Anything after the value is ignored.
    """
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    return _Parser(data).value()


def load_file(path):
    """Read and parse the JSON file at ``path``."""
    return loads(Path(path).read_bytes())


def dumps(value):
    """Render ``value`` compactly; numbers get six decimals and strings are not escaped."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return f"{value:f}"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, dict):
        parts = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"object keys must be strings, got {type(key).__name__}")
            parts.append(f'"{key}": {dumps(item)}')
        return "{" + ", ".join(parts) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(dumps(item) for item in value) + "]"
    raise TypeError(f"cannot render {type(value).__name__} as JSON")