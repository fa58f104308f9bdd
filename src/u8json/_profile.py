"""
Hot-path profiling for the decoder and parser.

Set ``U8JSON_PROFILE`` in the environment before import to collect
per-production timings. Otherwise :func:`profiled` hands back one shared
null context and nothing is recorded.
"""

import os
import time
from contextlib import AbstractContextManager
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Final

PROFILE_HOT_PATHS: Final = __debug__ and "U8JSON_PROFILE" in os.environ

_UNTIMED: Final = nullcontext()


@dataclass
class HotPathStats:
    """Accumulated timings of one named production."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


_stats_by_name: dict[str, HotPathStats] = {}


class _Stopwatch:
    __slots__ = ("stats", "chars", "started_ns")

    def __init__(self, stats: HotPathStats, chars: int) -> None:
        self.stats = stats
        self.chars = chars
        self.started_ns = 0

    def __enter__(self) -> None:
        self.started_ns = time.perf_counter_ns()

    def __exit__(self, *exc_info: object) -> None:
        elapsed = time.perf_counter_ns() - self.started_ns
        self.stats.record_call(elapsed, self.chars)


def profiled(name: str, chars: int = 0) -> AbstractContextManager[None]:
    """
    Times the enclosed block under ``name`` when profiling is switched on.

    ``chars`` is added to the production's processed-input counter on
    exit, including exits by exception.
    """
    if not PROFILE_HOT_PATHS:
        return _UNTIMED
    stats = _stats_by_name.get(name)
    if stats is None:
        stats = _stats_by_name[name] = HotPathStats(name)
    return _Stopwatch(stats, chars)


def get_hot_path_stats() -> dict[str, HotPathStats]:
    """Returns a snapshot of the statistics keyed by production name."""
    return dict(_stats_by_name)


def clear_hot_path_stats() -> None:
    _stats_by_name.clear()
