"""Replaceable clock used for protocol timeouts."""

from __future__ import annotations

import time
from typing import Callable, Optional


def _default_get() -> int:
    return time.monotonic_ns()


def _default_diff(start_time: int) -> int:
    return max(0, (time.monotonic_ns() - start_time) // 1_000_000)


class _Clock:
    get: Callable[[], int] = staticmethod(_default_get)
    diff: Callable[[int], int] = staticmethod(_default_diff)


def time_get() -> int:
    """Return the current time in the clock's own unit."""
    return _Clock.get()


def time_diff(start_time: int) -> int:
    """Return milliseconds elapsed since ``start_time`` from :func:`time_get`."""
    return _Clock.diff(start_time)


def set_time_functions(
    time_get: Optional[Callable[[], int]],
    time_diff: Optional[Callable[[int], int]],
) -> None:
    """Replace the clock functions; passing None restores the default."""
    _Clock.get = staticmethod(time_get if time_get is not None else _default_get)
    _Clock.diff = staticmethod(time_diff if time_diff is not None else _default_diff)