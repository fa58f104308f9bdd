"""
Closed tagged union of JSON values.

Each variant is a frozen dataclass; consumers branch on the variant with a
``match`` statement. Containers hold a tuple or a read-only mapping so a
tree cannot be mutated once built.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Final

# Plain Python rendering of a value tree, as returned by ``to_python``
PythonValue = (
    str
    | int
    | float
    | bool
    | None
    | dict[str, "PythonValue"]
    | list["PythonValue"]
)


@dataclass(frozen=True, slots=True)
class JsonNull:
    """The ``null`` literal."""


@dataclass(frozen=True, slots=True)
class JsonBool:
    value: bool


@dataclass(frozen=True, slots=True)
class JsonInt:
    """A number written without fraction or exponent (signed 64-bit)."""

    value: int


@dataclass(frozen=True, slots=True)
class JsonFloat:
    """A number written with a fraction and/or an exponent."""

    value: float


@dataclass(frozen=True, slots=True)
class JsonString:
    value: str


@dataclass(frozen=True, slots=True)
class JsonArray:
    items: tuple["JsonValue", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "JsonValue":
        return self.items[index]


def _empty_members() -> Mapping[str, "JsonValue"]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class JsonObject:
    """
    A JSON object.

    ``members`` keeps the order in which keys first appeared; a key that
    occurs more than once maps to its last value.
    """

    members: Mapping[str, "JsonValue"] = field(default_factory=_empty_members)

    def __post_init__(self) -> None:
        if not isinstance(self.members, MappingProxyType):
            object.__setattr__(
                self, "members", MappingProxyType(dict(self.members))
            )

    def __len__(self) -> int:
        return len(self.members)

    def __getitem__(self, key: str) -> "JsonValue":
        return self.members[key]

    def __contains__(self, key: object) -> bool:
        return key in self.members


JsonValue = (
    JsonNull
    | JsonBool
    | JsonInt
    | JsonFloat
    | JsonString
    | JsonArray
    | JsonObject
)

JSON_NULL: Final = JsonNull()
JSON_TRUE: Final = JsonBool(True)
JSON_FALSE: Final = JsonBool(False)


@dataclass(frozen=True, slots=True)
class JsonMember:
    """Key-value pair produced while parsing an object body."""

    key: str
    value: JsonValue


def to_python(value: JsonValue) -> PythonValue:
    """Converts a value tree into plain ``dict``/``list``/scalar objects."""
    match value:
        case JsonNull():
            return None
        case JsonBool(flag):
            return flag
        case JsonInt(number):
            return number
        case JsonFloat(number):
            return number
        case JsonString(text):
            return text
        case JsonArray(items):
            return [to_python(item) for item in items]
        case JsonObject(members):
            return {key: to_python(item) for key, item in members.items()}
        case _:
            raise TypeError(
                f"Object of type {type(value).__name__} is not a JSON value"
            )


def kind_of(value: JsonValue) -> str:
    """Returns the JSON type name of a value, e.g. ``"object"``."""
    match value:
        case JsonNull():
            return "null"
        case JsonBool():
            return "boolean"
        case JsonInt():
            return "integer"
        case JsonFloat():
            return "float"
        case JsonString():
            return "string"
        case JsonArray():
            return "array"
        case JsonObject():
            return "object"
        case _:
            raise TypeError(
                f"Object of type {type(value).__name__} is not a JSON value"
            )
