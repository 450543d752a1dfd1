from __future__ import annotations

import re
from datetime import timedelta
from typing import Optional, Tuple

# [time]text, the time token holds no closing bracket, the text may be empty.
LINE_PATTERN = re.compile(r"\[(?P<time>[^\]]+)\](?P<text>.*)")

_HOURS = r"(?P<hours>\d+)"
_MINUTES_2 = r"(?P<minutes>\d{2})"
_MINUTES_1 = r"(?P<minutes>\d)"
_SECONDS = r"(?P<seconds>\d{2})"
# three digits normally, two in legacy LRC files
_FRACTION = r"\.(?P<fraction>\d{1,3})"

# Ordered most specific first; the first exact match wins.
TIMESTAMP_FORMATS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("h:mm:ss.fff", re.compile(f"{_HOURS}:{_MINUTES_2}:{_SECONDS}{_FRACTION}")),
    ("mm:ss.fff", re.compile(f"{_MINUTES_2}:{_SECONDS}{_FRACTION}")),
    ("m:ss.fff", re.compile(f"{_MINUTES_1}:{_SECONDS}{_FRACTION}")),
    ("h:mm:ss", re.compile(f"{_HOURS}:{_MINUTES_2}:{_SECONDS}")),
    ("mm:ss", re.compile(f"{_MINUTES_2}:{_SECONDS}")),
    ("m:ss", re.compile(f"{_MINUTES_1}:{_SECONDS}")),
)

_ONE_MS = timedelta(milliseconds=1)


def parse_timestamp(value: str) -> Optional[timedelta]:
    for _name, pattern in TIMESTAMP_FORMATS:
        match = pattern.fullmatch(value)
        if not match:
            continue
        parts = match.groupdict()
        minutes = int(parts["minutes"])
        seconds = int(parts["seconds"])
        if minutes >= 60 or seconds >= 60:
            return None
        hours = int(parts.get("hours") or 0)
        fraction = parts.get("fraction") or ""
        millis = int(fraction.ljust(3, "0")) if fraction else 0
        return timedelta(hours=hours, minutes=minutes, seconds=seconds, milliseconds=millis)
    return None


def format_timestamp(value: timedelta, digits: int = 3, always_hours: bool = False) -> str:
    """Render ``value`` as ``mm:ss.fff`` (``h:mm:ss.fff`` past one hour).

    Sub-millisecond precision is truncated, never rounded. ``digits=2`` gives
    the legacy two-digit fraction; ``always_hours`` gives the fixed
    ``hh:mm:ss.fff`` form used in stored documents.
    """
    if digits not in (2, 3):
        raise ValueError(f"digits must be 2 or 3, got {digits}")
    total_ms = max(0, value // _ONE_MS)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    fraction = f"{millis:03d}"[:digits]
    if always_hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction}"
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}.{fraction}"
    return f"{minutes:02d}:{seconds:02d}.{fraction}"


def parse_line(line: str) -> Optional[Tuple[timedelta, str]]:
    match = LINE_PATTERN.fullmatch(line)
    if not match:
        return None
    time = parse_timestamp(match.group("time"))
    if time is None:
        return None
    return time, match.group("text")


def format_line(time: timedelta, text: str, digits: int = 3) -> str:
    return f"[{format_timestamp(time, digits)}]{text}"


def is_timestamp_line(line: str) -> bool:
    return parse_line(line) is not None
