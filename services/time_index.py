"""Binary search over sorted timestamp strings."""

from __future__ import annotations

from typing import Sequence


def lower_bound(times: Sequence[str], target: str) -> int:
    """Return the first index whose timestamp is ``>= target``, or ``len(times)``.

    Timestamps compare lexicographically, which orders zero-padded
    ``HH:MM:SS`` and ISO-8601 strings chronologically.
    """
    lo, hi = 0, len(times)
    while lo < hi:
        mid = (lo + hi) // 2
        if times[mid] < target:
            lo = mid + 1
        else:
            hi = mid
    return lo


def find_closest_index(times: Sequence[str], target: str) -> int:
    """Locate the last timestamp at or before ``target``.

    Targets before the first entry clamp to ``0`` and targets past the last
    entry clamp to ``len(times) - 1``. ``times`` must not be empty.
    """
    index = lower_bound(times, target)
    if index == 0:
        return 0
    if index == len(times):
        return len(times) - 1
    return index if times[index] == target else index - 1
