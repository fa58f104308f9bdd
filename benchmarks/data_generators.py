"""
Test document generators for parsing benchmarks.

Every generator returns UTF-8 bytes so each reader starts from the same
raw input:
- small and large objects
- a mixed-type array
- a deeply nested structure
- escape-heavy and non-ASCII-heavy strings
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

_SEED = 20240115
_ESCAPES = ['"', "\\", "/", "\b", "\f", "\n", "\r", "\t"]
_NON_ASCII = "éßøλжשب啊漢字😀"


def generate_test_data(data_type: str) -> bytes:
    """Generates a UTF-8 JSON document of the requested shape."""
    generators: dict[str, Callable[[random.Random], Any]] = {
        "small_object": _small_object,
        "large_object": _large_object,
        "mixed_array": _mixed_array,
        "nested_structure": _nested_structure,
        "string_heavy": _string_heavy,
        "unicode_heavy": _unicode_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    rng = random.Random(_SEED)
    document = generators[data_type](rng)
    return json.dumps(document, ensure_ascii=False).encode("utf-8")


def _small_object(_: random.Random) -> dict[str, Any]:
    """A small object (< 1KB) with one nested member."""
    return {
        "id": 12345,
        "name": "Alice Johnson",
        "active": True,
        "balance": 1234.56,
        "tags": ["a", "b"],
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": None},
    }


def _large_object(rng: random.Random) -> dict[str, Any]:
    """A large object (> 10KB) of records."""
    return {
        "user_id": rng.randint(1_000_000, 9_999_999),
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(rng.uniform(1.0, 1000.0), 2),
                "currency": rng.choice(["USD", "EUR", "GBP", "JPY"]),
                "status": rng.choice(["completed", "pending", "failed"]),
                "note": _random_string(rng, 20),
            }
            for i in range(100)
        ],
    }


def _mixed_array(rng: random.Random) -> list[Any]:
    """An array mixing every scalar kind with small objects."""
    makers: list[Callable[[], Any]] = [
        lambda: rng.randint(-1000, 1000),
        lambda: round(rng.uniform(-100.0, 100.0), 3),
        lambda: _random_string(rng, rng.randint(5, 30)),
        lambda: rng.choice([True, False]),
        lambda: None,
        lambda: {"value": _random_string(rng, 10), "score": rng.random()},
    ]
    return [rng.choice(makers)() for _ in range(300)]


def _nested_structure(rng: random.Random) -> dict[str, Any]:
    """Objects nested eight levels deep with a fan-out of three."""

    def node(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(rng, 10)}
        return {
            "level": depth,
            "items": [node(depth - 1) for _ in range(3)],
        }

    return node(8)


def _string_heavy(rng: random.Random) -> dict[str, Any]:
    """Strings where roughly a third of the characters need escaping."""

    def escaped() -> str:
        return "".join(
            rng.choice(_ESCAPES)
            if rng.random() < 0.3
            else rng.choice(string.ascii_letters)
            for _ in range(50)
        )

    return {"strings": [escaped() for _ in range(200)]}


def _unicode_heavy(rng: random.Random) -> dict[str, Any]:
    """Strings made mostly of multi-byte UTF-8 sequences."""
    return {
        "lines": [
            "".join(rng.choices(_NON_ASCII, k=40)) for _ in range(200)
        ]
    }


def _random_string(rng: random.Random, length: int) -> str:
    """Generates a random ASCII string of the given length."""
    return "".join(rng.choices(string.ascii_letters, k=length))
