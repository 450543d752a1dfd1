from __future__ import annotations

from datetime import timedelta
from enum import Enum, Flag, auto
from typing import Any, Optional, Protocol, TypeVar

M = TypeVar("M")


class AdapterKind(str, Enum):
    """The closed set of encodings a model can be stored in."""

    FRAME = "frame"  # ID3 frames
    FIELD = "field"  # Vorbis comment fields
    SINGLE_STRING = "single_string"  # one free-text slot (APEv2)
    RICH = "rich"  # self-describing JSON document
    SIDECAR = "sidecar"  # .lrc / .chp text next to the media file


class LyricTypes(Flag):
    SIMPLE = auto()
    SYNCED = auto()
    RICH = auto()
    ALL = SIMPLE | SYNCED | RICH

    @classmethod
    def from_names(cls, names) -> "LyricTypes":
        result = cls(0)
        for name in names:
            result |= cls[name.upper()]
        return result


class Adapter(Protocol[M]):
    kind: AdapterKind

    def decode(self, source: Any, duration: Optional[timedelta] = None) -> Optional[M]: ...

    def encode(self, sink: Any, value: Optional[M]) -> bool: ...
