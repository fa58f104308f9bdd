"""UTF-8 decoding of raw bytes into a tuple of code points."""

from __future__ import annotations

from typing import Final
from typing import TypeAlias

from loguru import logger

from ._errors import DecodingError
from ._errors import Position
from ._profile import profiled

BytesLike: TypeAlias = bytes | bytearray | memoryview

# (upper bound of leader byte, sequence length, payload mask); a length of 0
# marks a byte that cannot start a sequence.
_LEADERS: Final = (
    (0x80, 1, 0x7F),  # 0xxxxxxx
    (0xC0, 0, 0x00),  # 10xxxxxx
    (0xE0, 2, 0x1F),  # 110xxxxx
    (0xF0, 3, 0x0F),  # 1110xxxx
    (0xF8, 4, 0x07),  # 11110xxx
)
_CONTINUATION_MASK: Final = 0x3F


def _sequence_length(leader: int, pos: Position) -> tuple[int, int]:
    """Returns the encoded length and payload mask announced by a leader."""
    for bound, length, mask in _LEADERS:
        if leader < bound:
            if length == 0:
                raise DecodingError("unexpected leading char", pos, leader)
            return length, mask
    raise DecodingError("bad leading char", pos, leader)


def read_one_codepoint(data: BytesLike, pos: Position) -> tuple[int, Position]:
    """
    Reads the code point whose encoding starts at ``pos``.

    Returns the code point and the offset just past its encoding. Only the
    leader byte is validated: continuation bytes contribute their low six
    bits as-is, and overlong forms, surrogates or values above 0x10FFFF are
    accepted.
    """
    remaining = len(data) - pos
    if remaining <= 0:
        raise DecodingError("not enough data", pos)

    leader = data[pos]
    length, mask = _sequence_length(leader, pos)
    if length > remaining:
        raise DecodingError(
            f"buf not enough. req: {length}, remain: {remaining}",
            pos,
            leader,
        )

    code = leader & mask
    for i in range(pos + 1, pos + length):
        code = (code << 6) | (data[i] & _CONTINUATION_MASK)
    return code, pos + length


def decode_bytes(data: BytesLike) -> tuple[int, ...]:
    """Decodes a whole byte sequence, failing on the first malformed code."""
    with profiled("decode_bytes", len(data)):
        output: list[int] = []
        pos = 0
        end = len(data)
        try:
            while pos < end:
                code, pos = read_one_codepoint(data, pos)
                output.append(code)
        except DecodingError as e:
            logger.debug(
                "UTF-8 decoding failed at byte {} ({:#04x}): {}",
                e.pos,
                e.byte,
                e.msg,
            )
            raise
        return tuple(output)
