"""
Error types raised by the UTF-8 decoder and the grammar parser.

The two kinds are disjoint: byte-level failures never surface as parse
errors and parse errors always refer to already-decoded code points.
"""

from collections.abc import Sequence
from typing import TypeAlias

Position: TypeAlias = int


def _check_fields(msg: object, pos: object) -> None:
    if not isinstance(msg, str):
        raise TypeError("msg must be a string")
    if not isinstance(pos, int) or pos < 0:
        raise ValueError("pos must be a non-negative integer")


class DecodingError(ValueError):
    """
    Reports malformed UTF-8 input.

    Carries the byte offset of the failing sequence, the offending byte
    (0 when no byte applies, e.g. reading past the end) and a message.
    """

    def __init__(self, msg: str, pos: Position, byte: int = 0) -> None:
        _check_fields(msg, pos)
        if not isinstance(byte, int) or not 0 <= byte <= 0xFF:
            raise ValueError("byte must be an integer in range(256)")

        self.msg = msg
        self.pos = pos
        self.byte = byte

        super().__init__(f"{msg} at byte {pos} (byte={byte:#04x})")


class ParseError(ValueError):
    """
    Reports a JSON grammar violation at a code-point offset.

    When the decoded code points are supplied, line and column numbers are
    computed from the line feeds preceding the offset.
    """

    def __init__(
        self, msg: str, pos: Position, text: Sequence[int] = ()
    ) -> None:
        _check_fields(msg, pos)

        self.msg = msg
        self.pos = pos

        newline = 0x0A
        self.lineno = 1
        last_newline = -1
        for i in range(min(pos, len(text))):
            if text[i] == newline:
                self.lineno += 1
                last_newline = i
        self.colno = pos - last_newline

        super().__init__(
            f"{msg} at line {self.lineno}, column {self.colno} (char {pos})"
        )
