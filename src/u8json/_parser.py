"""
JSON parser over decoded code points.

Every production takes the code-point sequence and a start position and
returns the parsed value with the position just past it. The first
grammar violation raises :class:`ParseError`; nothing is recovered.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Final
from typing import TypeAlias

from loguru import logger

from ._errors import ParseError
from ._errors import Position
from ._profile import profiled
from ._utf8_decoder import decode_bytes
from ._values import JSON_FALSE
from ._values import JSON_NULL
from ._values import JSON_TRUE
from ._values import JsonArray
from ._values import JsonFloat
from ._values import JsonInt
from ._values import JsonMember
from ._values import JsonObject
from ._values import JsonString
from ._values import JsonValue
from ._values import kind_of

CodePoints: TypeAlias = Sequence[int]

_WHITESPACE: Final = frozenset(map(ord, " \t\n\r"))
_DIGITS: Final = frozenset(map(ord, "0123456789"))
_ZERO: Final = ord("0")

# Tried in this order; no keyword is a prefix of another
_LITERALS: Final = (
    ("true", JSON_TRUE),
    ("false", JSON_FALSE),
    ("null", JSON_NULL),
)

_SIMPLE_ESCAPES: Final = {
    ord('"'): '"',
    ord("\\"): "\\",
    ord("/"): "/",
    ord("b"): "\b",
    ord("f"): "\f",
    ord("n"): "\n",
    ord("r"): "\r",
    ord("t"): "\t",
}

_CLOSING_BRACKETS: Final = {ord("["): "]", ord("{"): "}"}

# Trial order after the exponent marker
_EXPONENT_SIGNS: Final = (("+", False), ("-", True))

_MAX_CODE_POINT: Final = 0x10FFFF
_INT64_MASK: Final = (1 << 64) - 1
_INT64_SIGN: Final = 1 << 63


def _wrap_int64(value: int) -> int:
    """Reduces an integer to the signed 64-bit range, two's complement."""
    value &= _INT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


def _pow10(exponent: int) -> float:
    try:
        return 10.0**exponent
    except OverflowError:
        return math.inf


def _describe(code: int) -> str:
    """Renders a code point for error messages, e.g. ``'a' (0x61)``."""
    if 0 <= code <= _MAX_CODE_POINT:
        return f"{chr(code)!r} ({code:#x})"
    return f"({code:#x})"


def _is_no_escape(code: int) -> bool:
    """Whether a code point may appear unescaped inside a string."""
    return (
        0x23 <= code <= 0x5B
        or 0x5D <= code <= _MAX_CODE_POINT
        or code == 0x20
        or code == 0x21
    )


def _hex_value(code: int) -> int | None:
    if 0x30 <= code <= 0x39:  # 0-9
        return code - 0x30
    if 0x61 <= code <= 0x66:  # a-f
        return code - 0x61 + 10
    if 0x41 <= code <= 0x46:  # A-F
        return code - 0x41 + 10
    return None


@dataclass(slots=True)
class _OpenContainer:
    """An array or object whose closing bracket is still ahead."""

    closing: str
    items: list[JsonValue] = field(default_factory=list)
    pairs: list[JsonMember] = field(default_factory=list)
    pending_key: str = ""

    @property
    def is_object(self) -> bool:
        return self.closing == "}"

    def append(self, value: JsonValue) -> None:
        if self.is_object:
            self.pairs.append(JsonMember(self.pending_key, value))
        else:
            self.items.append(value)

    def build(self) -> JsonValue:
        """Freezes the collected items; a repeated key keeps its last value."""
        if not self.is_object:
            return JsonArray(tuple(self.items))

        members: dict[str, JsonValue] = {}
        for pair in self.pairs:
            members[pair.key] = pair.value
        return JsonObject(MappingProxyType(members))


class JsonParser:
    """
    Grammar productions over one code-point sequence.

    The parser holds no cursor of its own: positions flow in and out of
    each production, so one instance may serve any number of calls.
    """

    def __init__(self, text: CodePoints) -> None:
        self.text = text
        self.length = len(text)

    def error(self, msg: str, pos: Position) -> ParseError:
        return ParseError(msg, pos, self.text)

    def skip_whitespace(self, pos: Position) -> Position:
        """Returns the first non-whitespace position at or after ``pos``."""
        text = self.text
        while pos < self.length and text[pos] in _WHITESPACE:
            pos += 1
        return pos

    def try_consume(self, pos: Position, literal: str) -> tuple[bool, Position]:
        """
        Skips whitespace and compares ``literal`` at the resulting position.

        Returns ``(True, end)`` with the position past the literal, or
        ``(False, where)`` with the position of the first mismatch.
        """
        start = self.skip_whitespace(pos)
        if self.length - start < len(literal):
            return False, start

        for offset, char in enumerate(literal):
            if self.text[start + offset] != ord(char):
                return False, start + offset
        return True, start + len(literal)

    def consume(self, pos: Position, literal: str) -> Position:
        """Like :meth:`try_consume` but raises when the literal is absent."""
        matched, where = self.try_consume(pos, literal)
        if not matched:
            raise self.error(f"expect {literal!r}", where)
        return where

    def parse_value(self, pos: Position) -> tuple[JsonValue, Position]:
        """
        Parses any JSON value, chosen by the first non-blank code point.

        Arrays and objects are walked with an explicit stack of the
        containers still waiting for their closing bracket, so nesting
        depth is bounded by memory rather than by the call stack.
        """
        open_containers: list[_OpenContainer] = []
        while True:
            if open_containers and open_containers[-1].is_object:
                key, pos = self.parse_string(pos)
                pos = self.consume(pos, ":")
                open_containers[-1].pending_key = key

            pos = self.skip_whitespace(pos)
            closing = (
                _CLOSING_BRACKETS.get(self.text[pos])
                if pos < self.length
                else None
            )
            if closing is None:
                value, pos = self.parse_scalar(pos)
            else:
                container = _OpenContainer(closing)
                closed, end = self.try_consume(pos + 1, closing)
                if not closed:
                    open_containers.append(container)
                    pos += 1
                    continue
                value, pos = container.build(), end

            # Hand the value to its parent, closing each completed parent
            while open_containers:
                container = open_containers[-1]
                container.append(value)

                more, end = self.try_consume(pos, ",")
                if more:
                    pos = end
                    break

                closed, end = self.try_consume(pos, container.closing)
                if not closed:
                    raise self.error(
                        f"expect {container.closing!r} or ','", end
                    )
                open_containers.pop()
                value, pos = container.build(), end
            else:
                return value, pos

    def parse_scalar(self, pos: Position) -> tuple[JsonValue, Position]:
        """Parses a string, number or keyword starting exactly at ``pos``."""
        if pos >= self.length:
            raise self.error("expect something, got EOS", pos)

        code = self.text[pos]
        match code:
            case 0x22:  # "
                string, pos = self.parse_string(pos)
                return JsonString(string), pos
            case 0x2D:  # -
                return self.parse_number(pos)
            case 0x74 | 0x66 | 0x6E:  # t f n
                return self.parse_literal(pos)
            case _ if code in _DIGITS:
                return self.parse_number(pos)
            case _:
                raise self.error(f"bad char: {_describe(code)}", pos)

    def parse_literal(self, pos: Position) -> tuple[JsonValue, Position]:
        """Parses one of the keywords ``true``, ``false`` or ``null``."""
        for keyword, value in _LITERALS:
            matched, end = self.try_consume(pos, keyword)
            if matched:
                return value, end
        raise self.error("expect true|false|null", self.skip_whitespace(pos))

    def parse_string(self, pos: Position) -> tuple[str, Position]:
        """Parses a quoted string, resolving escape sequences."""
        pos = self.consume(pos, '"')
        with profiled("parse_string"):
            text = self.text
            chars: list[str] = []
            while pos < self.length:
                code = text[pos]
                if code == 0x22:  # closing quote
                    return "".join(chars), pos + 1
                if code == 0x5C:  # backslash
                    char, pos = self._parse_escape(pos + 1)
                    chars.append(char)
                elif _is_no_escape(code):
                    chars.append(chr(code))
                    pos += 1
                else:
                    raise self.error(f"unescaped char: {_describe(code)}", pos)

            raise self.error("string not terminated", pos)

    def _parse_escape(self, pos: Position) -> tuple[str, Position]:
        """Resolves the escape whose selector character sits at ``pos``."""
        if pos >= self.length:
            raise self.error("string not terminated, expect escape", pos)

        code = self.text[pos]
        simple = _SIMPLE_ESCAPES.get(code)
        if simple is not None:
            return simple, pos + 1
        if code == 0x75:  # u
            # Surrogate halves are kept as separate code points
            return chr(self._scan_hex(pos + 1)), pos + 5
        raise self.error(f"bad escape char: {_describe(code)}", pos)

    def _scan_hex(self, pos: Position) -> int:
        """Reads exactly four hexadecimal digits as one 16-bit unit."""
        if pos + 4 > self.length:
            raise self.error("expect 4 hex digit", pos)

        value = 0
        for i in range(pos, pos + 4):
            digit = _hex_value(self.text[i])
            if digit is None:
                raise self.error(
                    f"expect hex, got {_describe(self.text[i])}", i
                )
            value = (value << 4) | digit
        return value

    def _scan_digits(self, pos: Position) -> tuple[int, Position]:
        """
        Folds a non-empty run of decimal digits into a signed 64-bit value.

        Runs longer than the accumulator wrap around silently.
        """
        text = self.text
        if not (pos < self.length and text[pos] in _DIGITS):
            raise self.error("expect digits", pos)

        value = 0
        while pos < self.length and text[pos] in _DIGITS:
            value = _wrap_int64(value * 10 + (text[pos] - _ZERO))
            pos += 1
        return value, pos

    def _scan_integer_part(self, pos: Position) -> tuple[int, Position]:
        if pos < self.length and self.text[pos] == _ZERO:
            return 0, pos + 1
        return self._scan_digits(pos)

    def _scan_fraction_part(self, pos: Position) -> tuple[float, Position]:
        """Reads the digits after ``.`` as a value in ``[0, 1)``."""
        text = self.text
        if not (pos < self.length and text[pos] in _DIGITS):
            raise self.error("expect digits", pos)

        fraction = 0.0
        scale = 10.0
        while pos < self.length and text[pos] in _DIGITS:
            fraction += (text[pos] - _ZERO) / scale
            scale *= 10
            pos += 1
        return fraction, pos

    def _scan_exponent_part(self, pos: Position) -> tuple[int, Position]:
        """Reads an optional sign and the exponent digits after ``e``."""
        negative = False
        for sign, is_negative in _EXPONENT_SIGNS:
            matched, pos = self.try_consume(pos, sign)
            if matched:
                negative = is_negative
                break

        exponent, pos = self._scan_digits(pos)
        return (_wrap_int64(-exponent) if negative else exponent), pos

    def parse_number(self, pos: Position) -> tuple[JsonValue, Position]:
        """
        Parses a number literal.

        The literal becomes a :class:`JsonInt` unless it has a fraction or
        an exponent, in which case it becomes a :class:`JsonFloat`.
        """
        with profiled("parse_number"):
            negative, pos = self.try_consume(pos, "-")
            whole, pos = self._scan_integer_part(pos)

            fraction: float | None = None
            if pos < self.length and self.text[pos] == 0x2E:  # .
                fraction, pos = self._scan_fraction_part(pos + 1)

            exponent: int | None = None
            if pos < self.length and self.text[pos] in (0x65, 0x45):  # e E
                exponent, pos = self._scan_exponent_part(pos + 1)

            if fraction is None and exponent is None:
                return JsonInt(_wrap_int64(-whole) if negative else whole), pos

            number = float(whole) + (fraction or 0.0)
            if exponent is not None:
                number *= _pow10(exponent)
            return JsonFloat(-number if negative else number), pos


def skip_whitespace(text: CodePoints, pos: Position) -> Position:
    """Returns the first non-whitespace position at or after ``pos``."""
    return JsonParser(text).skip_whitespace(pos)


def consume(text: CodePoints, pos: Position, literal: str) -> Position:
    """
    Skips whitespace, then requires ``literal`` at the resulting position.

    Returns the position just past the literal.
    """
    return JsonParser(text).consume(pos, literal)


def parse_value_at(
    text: CodePoints, pos: Position
) -> tuple[JsonValue, Position]:
    """Parses one value starting at ``pos``; trailing input is left alone."""
    return JsonParser(text).parse_value(pos)


def parse_codepoints(text: CodePoints) -> JsonValue:
    """
    Parses a complete JSON document from decoded code points.

    Only whitespace may follow the value.
    """
    with profiled("parse_codepoints", len(text)):
        parser = JsonParser(text)
        try:
            value, pos = parser.parse_value(0)
            pos = parser.skip_whitespace(pos)
            if pos != parser.length:
                raise parser.error("not terminated", pos)
        except ParseError as e:
            logger.debug(
                "JSON parsing failed at line {}, column {}: {}",
                e.lineno,
                e.colno,
                e.msg,
            )
            raise

        logger.trace("parsed {} from {} code points", kind_of(value), len(text))
        return value


def parse_text(text: bytes | bytearray | memoryview | str) -> JsonValue:
    """
    Decodes UTF-8 input and parses it as one JSON document.

    ``str`` input is encoded to UTF-8 first; lone surrogates survive the
    trip unchanged.
    """
    if isinstance(text, str):
        text = text.encode("utf-8", "surrogatepass")
    elif not isinstance(text, bytes | bytearray | memoryview):
        raise TypeError(
            "the JSON document must be bytes or str, "
            f"not {type(text).__name__}"
        )

    return parse_codepoints(decode_bytes(text))
