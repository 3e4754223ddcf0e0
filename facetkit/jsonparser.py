"""A small JSON tokenizer that reads one value piece at a time."""

from __future__ import annotations

import enum
import string
from typing import Optional

_WHITESPACE = " \t\n\r"
_HEX_DIGITS = frozenset(string.hexdigits)
_U64_MAX = (1 << 64) - 1
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_CONTEXT_RADIUS = 20


class JsonParseErrorKind(enum.Enum):
    """The reasons a JSON parse can fail, each with its message."""

    EXPECTED_OPENING_QUOTE = "Expected opening quote for string"
    UNTERMINATED_STRING = "Unterminated string"
    INVALID_ESCAPE_SEQUENCE = "Invalid escape sequence"
    INCOMPLETE_UNICODE_ESCAPE = "Incomplete Unicode escape sequence"
    INVALID_UNICODE_ESCAPE = "Invalid Unicode escape sequence"
    EXPECTED_NUMBER = "Expected a number"
    INVALID_NUMBER_FORMAT = "Invalid number format"
    EXPECTED_OPENING_BRACE = "Expected opening brace for object"
    EXPECTED_OPENING_BRACKET = "Expected opening bracket for array"
    EXPECTED_COLON = "Expected ':' after object key"
    UNEXPECTED_END_OF_INPUT = "Unexpected end of input"
    INVALID_VALUE = "Invalid value"
    EXPECTED_CLOSING_BRACE = "Expected closing brace for object"
    EXPECTED_CLOSING_BRACKET = "Expected closing bracket for array"
    UNKNOWN_FIELD = "Unknown field"
    CUSTOM = "Custom"


class JsonParseError(ValueError):
    """A JSON parse failure at a position in an input string.

    ``detail`` carries the offending escape character, the unknown field name,
    or the message of a custom error.
    """

    def __init__(
        self,
        kind: JsonParseErrorKind,
        position: int,
        input: str = "",
        detail: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.position = position
        self.input = input
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        kind = self.kind
        if kind is JsonParseErrorKind.INVALID_ESCAPE_SEQUENCE:
            return f"Invalid escape sequence: \\{self.detail}"
        if kind is JsonParseErrorKind.UNKNOWN_FIELD:
            return f"Unknown field: {self.detail}"
        text = self.detail if kind is JsonParseErrorKind.CUSTOM else kind.value
        return f"{text} at position {self.position}"

    def __str__(self) -> str:
        return self.message

    def with_context(self) -> str:
        """The message, the surrounding input, and a caret under the error position."""
        start = max(self.position - _CONTEXT_RADIUS, 0)
        end = min(self.position + _CONTEXT_RADIUS, len(self.input))
        context = self.input[start:end]
        arrow = " " * (self.position - start)
        return (
            f"{self.message}\n"
            f"\x1b[36m{context}\x1b[0m\n"
            f"{arrow}\x1b[31m^\x1b[0m"
        )


class JsonParser:
    """Reads JSON tokens from a string, advancing ``position`` as it goes."""

    def __init__(self, input: str) -> None:
        self.input = input
        self.position = 0

    def make_error(
        self, kind: JsonParseErrorKind, detail: Optional[str] = None
    ) -> JsonParseError:
        """Build an error of ``kind`` at the current position."""
        return JsonParseError(kind, self.position, self.input, detail)

    def _peek_char(self) -> Optional[str]:
        if self.position < len(self.input):
            return self.input[self.position]
        return None

    def skip_whitespace(self) -> None:
        while self._peek_char() is not None and self._peek_char() in _WHITESPACE:
            self.position += 1

    def parse_string(self) -> str:
        self.skip_whitespace()
        if self._peek_char() != '"':
            raise self.make_error(JsonParseErrorKind.EXPECTED_OPENING_QUOTE)
        self.position += 1

        simple_escapes = {
            '"': '"', "\\": "\\", "/": "/",
            "b": "\x08", "f": "\x0c", "n": "\n", "r": "\r", "t": "\t",
        }
        parts: list[str] = []
        escaped = False
        while self.position < len(self.input):
            ch = self.input[self.position]
            self.position += 1
            if escaped:
                if ch in simple_escapes:
                    parts.append(simple_escapes[ch])
                elif ch == "u":
                    parts.append(self._parse_unicode_escape())
                else:
                    raise self.make_error(JsonParseErrorKind.INVALID_ESCAPE_SEQUENCE, ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                return "".join(parts)
            else:
                parts.append(ch)

        raise self.make_error(JsonParseErrorKind.UNTERMINATED_STRING)

    def _parse_unicode_escape(self) -> str:
        if self.position + 4 > len(self.input):
            raise self.make_error(JsonParseErrorKind.INCOMPLETE_UNICODE_ESCAPE)
        hex_text = self.input[self.position : self.position + 4]
        self.position += 4
        if not all(c in _HEX_DIGITS for c in hex_text):
            raise self.make_error(JsonParseErrorKind.INVALID_UNICODE_ESCAPE)
        code = int(hex_text, 16)
        if 0xD800 <= code <= 0xDFFF:
            return "\ufffd"
        return chr(code)

    def parse_u64(self) -> int:
        self.skip_whitespace()
        start = self.position
        while self._peek_char() is not None and self._peek_char() in string.digits:
            self.position += 1
        if start == self.position:
            raise self.make_error(JsonParseErrorKind.EXPECTED_NUMBER)
        value = int(self.input[start : self.position])
        if value > _U64_MAX:
            raise self.make_error(JsonParseErrorKind.INVALID_NUMBER_FORMAT)
        return value

    def _scan_number(self) -> str:
        self.skip_whitespace()
        start = self.position
        if self._peek_char() == "-":
            self.position += 1
        while self._peek_char() is not None and (
            self._peek_char() in string.digits or self._peek_char() == "."
        ):
            self.position += 1
        text = self.input[start : self.position]
        if text in ("", "-"):
            raise self.make_error(JsonParseErrorKind.EXPECTED_NUMBER)
        return text

    def parse_i64(self) -> int:
        text = self._scan_number()
        try:
            value = int(text)
        except ValueError:
            raise self.make_error(JsonParseErrorKind.INVALID_NUMBER_FORMAT) from None
        if not _I64_MIN <= value <= _I64_MAX:
            raise self.make_error(JsonParseErrorKind.INVALID_NUMBER_FORMAT)
        return value

    def parse_f64(self) -> float:
        text = self._scan_number()
        try:
            return float(text)
        except ValueError:
            raise self.make_error(JsonParseErrorKind.INVALID_NUMBER_FORMAT) from None

    def parse_bool(self) -> bool:
        self.skip_whitespace()
        if self.input.startswith("true", self.position):
            self.position += 4
            return True
        if self.input.startswith("false", self.position):
            self.position += 5
            return False
        raise self.make_error(JsonParseErrorKind.INVALID_VALUE)

    def expect_array_start(self) -> bool:
        """Consume ``[``; return False if the array is immediately closed."""
        self.skip_whitespace()
        if self._peek_char() != "[":
            raise self.make_error(JsonParseErrorKind.EXPECTED_OPENING_BRACKET)
        self.position += 1
        self.skip_whitespace()
        if self._peek_char() == "]":
            self.position += 1
            return False
        return True

    def parse_array_element(self) -> bool:
        """Return True if another element follows, False at the closing bracket."""
        self.skip_whitespace()
        ch = self._peek_char()
        if ch is None:
            raise self.make_error(JsonParseErrorKind.UNEXPECTED_END_OF_INPUT)
        if ch == ",":
            self.position += 1
            self.skip_whitespace()
            return True
        if ch == "]":
            self.position += 1
            return False
        return True

    def _parse_key_and_colon(self) -> str:
        key = self.parse_string()
        self.skip_whitespace()
        if self._peek_char() != ":":
            raise self.make_error(JsonParseErrorKind.EXPECTED_COLON)
        self.position += 1
        return key

    def expect_object_start(self) -> Optional[str]:
        """Consume ``{`` and return the first key, or None for an empty object."""
        self.skip_whitespace()
        if self._peek_char() != "{":
            raise self.make_error(JsonParseErrorKind.EXPECTED_OPENING_BRACE)
        self.position += 1
        self.skip_whitespace()
        ch = self._peek_char()
        if ch == '"':
            return self._parse_key_and_colon()
        if ch == "}":
            self.position += 1
            return None
        raise self.make_error(JsonParseErrorKind.INVALID_VALUE)

    def parse_object_key(self) -> Optional[str]:
        """Return the next key after a comma, or None at the closing brace."""
        self.skip_whitespace()
        ch = self._peek_char()
        if ch is None:
            raise self.make_error(JsonParseErrorKind.UNEXPECTED_END_OF_INPUT)
        if ch == ",":
            self.position += 1
            self.skip_whitespace()
            if self._peek_char() == '"':
                return self._parse_key_and_colon()
            raise self.make_error(JsonParseErrorKind.INVALID_VALUE)
        if ch == "}":
            self.position += 1
            return None
        raise self.make_error(JsonParseErrorKind.INVALID_VALUE)