from __future__ import annotations

from datetime import timedelta
from typing import Iterable, List, Optional, Tuple


def synthesize_intervals(
    onsets: Iterable[Tuple[timedelta, str]],
    duration: Optional[timedelta] = None,
) -> List[Tuple[str, timedelta, timedelta]]:
    """Turn ``(start, text)`` onsets into ``(text, start, end)`` ranges.

    Each range ends where the next one starts. The last one ends at
    ``duration``, or at its own start when no duration is known.
    """
    ordered = sorted(onsets, key=lambda onset: onset[0])
    intervals: List[Tuple[str, timedelta, timedelta]] = []
    for index, (start, text) in enumerate(ordered):
        if index + 1 < len(ordered):
            end = ordered[index + 1][0]
        elif duration is not None:
            end = duration
        else:
            end = start
        intervals.append((text, start, end))
    return intervals
