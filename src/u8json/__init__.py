"""
Self-validating JSON reader with its own UTF-8 decoder.

Raw bytes are decoded into code points by :func:`decode_bytes`, then parsed
by a recursive-descent parser into a closed tree of immutable
:data:`JsonValue` variants. Malformed bytes raise :class:`DecodingError`;
malformed JSON raises :class:`ParseError`.
"""

from typing import IO

from loguru import logger

from ._errors import DecodingError
from ._errors import ParseError
from ._errors import Position
from ._parser import JsonParser
from ._parser import consume
from ._parser import parse_codepoints
from ._parser import parse_text
from ._parser import parse_value_at
from ._parser import skip_whitespace
from ._profile import HotPathStats
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._utf8_decoder import decode_bytes
from ._utf8_decoder import read_one_codepoint
from ._values import JSON_FALSE
from ._values import JSON_NULL
from ._values import JSON_TRUE
from ._values import JsonArray
from ._values import JsonBool
from ._values import JsonFloat
from ._values import JsonInt
from ._values import JsonNull
from ._values import JsonObject
from ._values import JsonString
from ._values import JsonValue
from ._values import PythonValue
from ._values import kind_of
from ._values import to_python

__version__ = "0.1.0"

# Library code stays silent until the application opts in
logger.disable(__name__)


def load(fp: IO[bytes]) -> JsonValue:
    """
    Parses a JSON document from a binary file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse_text(fp.read())


__all__ = [
    "JSON_FALSE",
    "JSON_NULL",
    "JSON_TRUE",
    "DecodingError",
    "HotPathStats",
    "JsonArray",
    "JsonBool",
    "JsonFloat",
    "JsonInt",
    "JsonNull",
    "JsonObject",
    "JsonParser",
    "JsonString",
    "JsonValue",
    "ParseError",
    "Position",
    "PythonValue",
    "clear_hot_path_stats",
    "consume",
    "decode_bytes",
    "get_hot_path_stats",
    "kind_of",
    "load",
    "parse_codepoints",
    "parse_text",
    "parse_value_at",
    "read_one_codepoint",
    "skip_whitespace",
    "to_python",
]
