# plugins/core_config_editor/literal.py

"""
Parser and formatter for the object literal inside a config module.

The accepted grammar is deliberately small: the JSON value types written
with JavaScript's relaxed syntax. Objects, arrays, single or double quoted
strings, numbers, ``true``, ``false`` and ``null``; unquoted identifier
keys; trailing commas; comments between tokens. Anything that would need
evaluating (function values, computed keys, spreads, references to other
identifiers, ``undefined``) is rejected with a ParseError instead of being
guessed at.

Formatting is ``json.dumps`` with two-space indentation, which is also
valid JavaScript, so a parsed and re-formatted literal loads back to the
same value.
"""

import json
import math
import re
from typing import Any, Dict, List

from backend.core.errors import ParseError

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER = re.compile(
    r"[+-]?(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?)"
)
_KEYWORDS = {"true": True, "false": False, "null": None}
_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0",
}


class _LiteralParser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    # --- low-level helpers ---

    def _error(self, message: str, position: int = None) -> ParseError:
        return ParseError(message, self.pos if position is None else position)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_insignificant(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated block comment")
                self.pos = end + 2
            else:
                return

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            found = self._peek() or "end of input"
            raise self._error(f"Expected '{ch}' but found '{found}'")
        self.pos += 1

    # --- grammar ---

    def parse(self) -> Any:
        self._skip_insignificant()
        value = self._value()
        self._skip_insignificant()
        if self.pos != len(self.text):
            raise self._error("Unexpected content after the literal")
        return value

    def _value(self) -> Any:
        ch = self._peek()
        if ch == "":
            raise self._error("Unexpected end of input")
        if ch == "{":
            return self._object()
        if ch == "[":
            return self._array()
        if ch in ("'", '"'):
            return self._string()
        if ch == "`":
            raise self._error("Template literals are not supported")
        if ch.isdigit() or ch in "+-.":
            return self._number()

        match = _IDENTIFIER.match(self.text, self.pos)
        if not match:
            raise self._error(f"Unexpected character '{ch}'")
        word = match.group(0)
        if word in _KEYWORDS:
            self.pos = match.end()
            return _KEYWORDS[word]
        raise self._error(f"Unsupported value '{word}': only plain data literals are allowed")

    def _object(self) -> Dict[str, Any]:
        self._expect("{")
        result: Dict[str, Any] = {}
        while True:
            self._skip_insignificant()
            if self._peek() == "}":
                self.pos += 1
                return result
            key = self._key()
            self._skip_insignificant()
            if self._peek() == "(":
                raise self._error(f"Method '{key}' is not supported in a config literal")
            self._expect(":")
            self._skip_insignificant()
            result[key] = self._value()
            self._skip_insignificant()
            if self._peek() == ",":
                self.pos += 1
            elif self._peek() != "}":
                raise self._error("Expected ',' or '}' in object")

    def _key(self) -> str:
        ch = self._peek()
        if ch in ("'", '"'):
            return self._string()
        if ch == "[":
            raise self._error("Computed keys are not supported")
        if self.text.startswith("...", self.pos):
            raise self._error("Spread syntax is not supported")
        if ch.isdigit():
            return str(self._number())
        match = _IDENTIFIER.match(self.text, self.pos)
        if not match:
            raise self._error(f"Invalid object key starting with '{ch or 'end of input'}'")
        self.pos = match.end()
        return match.group(0)

    def _array(self) -> List[Any]:
        self._expect("[")
        result: List[Any] = []
        while True:
            self._skip_insignificant()
            ch = self._peek()
            if ch == "]":
                self.pos += 1
                return result
            if ch == ",":
                raise self._error("Array holes are not supported")
            if self.text.startswith("...", self.pos):
                raise self._error("Spread syntax is not supported")
            result.append(self._value())
            self._skip_insignificant()
            if self._peek() == ",":
                self.pos += 1
            elif self._peek() != "]":
                raise self._error("Expected ',' or ']' in array")

    def _string(self) -> str:
        quote = self._peek()
        start = self.pos
        self.pos += 1
        chunks: List[str] = []
        text = self.text
        while True:
            if self.pos >= len(text):
                raise self._error("Unterminated string", start)
            ch = text[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(chunks)
            if ch == "\n":
                raise self._error("Unterminated string", start)
            if ch != "\\":
                chunks.append(ch)
                self.pos += 1
                continue
            chunks.append(self._escape())

    def _escape(self) -> str:
        text = self.text
        start = self.pos
        self.pos += 1  # backslash
        if self.pos >= len(text):
            raise self._error("Unterminated escape sequence")
        ch = text[self.pos]
        self.pos += 1
        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        if ch == "\r":
            if self._peek() == "\n":
                self.pos += 1
            return ""
        if ch in ("\n", "\u2028", "\u2029"):
            return ""
        if ch == "x":
            return chr(self._hex_digits(2))
        if ch == "u":
            if self._peek() == "{":
                end = text.find("}", self.pos)
                if end == -1:
                    raise self._error("Unterminated unicode escape")
                digits = text[self.pos + 1:end]
                self.pos = end + 1
                try:
                    code = int(digits, 16)
                    char = chr(code)
                except ValueError:
                    raise self._error(f"Invalid unicode escape '\\u{{{digits}}}'")
                if 0xD800 <= code <= 0xDFFF:
                    raise self._error("Unpaired surrogate in unicode escape", start)
                return char
            code = self._hex_digits(4)
            # surrogate pair written as two escapes
            if 0xD800 <= code <= 0xDBFF and text.startswith("\\u", self.pos):
                saved = self.pos
                self.pos += 2
                low = self._hex_digits(4)
                if 0xDC00 <= low <= 0xDFFF:
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
                self.pos = saved
            # a lone surrogate cannot be written back as UTF-8
            if 0xD800 <= code <= 0xDFFF:
                raise self._error("Unpaired surrogate in unicode escape", start)
            return chr(code)
        # unknown escapes stand for the character itself
        return ch

    def _hex_digits(self, count: int) -> int:
        digits = self.text[self.pos:self.pos + count]
        if len(digits) != count or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise self._error("Invalid hexadecimal escape")
        self.pos += count
        return int(digits, 16)

    def _number(self) -> Any:
        start = self.pos
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            word = _IDENTIFIER.match(self.text, self.pos + 1)
            if word and word.group(0) in ("Infinity", "NaN"):
                raise self._error("Non-finite numbers are not supported")
            raise self._error("Invalid number")
        self.pos = match.end()
        if _IDENTIFIER.match(self.text, self.pos):
            raise self._error("Invalid number", start)

        raw = match.group(0).replace("_", "")
        sign = -1 if raw.startswith("-") else 1
        body = raw.lstrip("+-")
        lowered = body.lower()
        if lowered.startswith(("0x", "0o", "0b")):
            return sign * int(body, 0)
        if "." in body or "e" in lowered:
            number = float(body)
            if not math.isfinite(number):
                raise self._error("Non-finite numbers are not supported", start)
            return sign * number
        return sign * int(body)


def parse_literal(text: str) -> Any:
    """Parses one literal value. Raises ParseError with the failing offset."""
    return _LiteralParser(text).parse()


def format_literal(value: Any) -> str:
    """Canonical two-space-indented rendering, insertion order and non-ASCII kept."""
    return json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
