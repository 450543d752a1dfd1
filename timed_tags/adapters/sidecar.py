from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Sequence

from ..containers import FileSystem, LocalFileSystem
from ..models import ChapterCollection, Lyrics
from ..timestamps import parse_line
from .base import AdapterKind

logger = logging.getLogger(__name__)


def _parse_lines(lines: Sequence[str]):
    onsets = []
    for line in lines:
        parsed = parse_line(line)
        if parsed is None:
            if line.strip():
                logger.debug("Skipping line without a valid timestamp: %r", line)
            continue
        onsets.append(parsed)
    return onsets


def lyrics_from_lines(
    lines: Sequence[str], duration: Optional[timedelta] = None
) -> Optional[Lyrics]:
    """Decode LRC lines, or plain text when the first non-empty line has no timestamp."""
    first = next((line for line in lines if line.strip()), None)
    if first is None:
        return None
    if parse_line(first) is None:
        return Lyrics.from_plain_text("\n".join(lines))
    return Lyrics.from_onsets(_parse_lines(lines), duration)


def lyrics_to_lines(lyrics: Lyrics, digits: int = 3) -> List[str]:
    if not lyrics.synchronized:
        return [entry.text for entry in lyrics.all_entries()]
    return lyrics.to_lrc(digits)


def chapters_from_lines(
    lines: Sequence[str], duration: Optional[timedelta] = None
) -> Optional[ChapterCollection]:
    onsets = _parse_lines(lines)
    if not onsets:
        return None
    return ChapterCollection.from_onsets(onsets, duration)


class _SidecarAdapter:
    kind = AdapterKind.SIDECAR

    def __init__(self, fs: Optional[FileSystem] = None, digits: int = 3) -> None:
        self.fs = fs or LocalFileSystem()
        self.digits = digits

    def _read(self, path: Path) -> Optional[List[str]]:
        if not self.fs.exists(path):
            return None
        return self.fs.read_lines(path)

    def _write(self, path: Path, desired: Optional[List[str]]) -> bool:
        existing = self._read(path)
        if desired is None:
            if existing is None:
                return False
            self.fs.remove(path)
            logger.info("Removed sidecar %s", path)
            return True
        if existing == desired:
            return False
        self.fs.write_lines(path, desired)
        logger.info("Wrote sidecar %s", path)
        return True


class LrcSidecarAdapter(_SidecarAdapter):
    def decode(self, source: Path, duration: Optional[timedelta] = None) -> Optional[Lyrics]:
        lines = self._read(source)
        if lines is None:
            return None
        return lyrics_from_lines(lines, duration)

    def encode(self, sink: Path, value: Optional[Lyrics]) -> bool:
        desired = lyrics_to_lines(value, self.digits) if value is not None else None
        return self._write(sink, desired)


class ChpSidecarAdapter(_SidecarAdapter):
    def decode(
        self, source: Path, duration: Optional[timedelta] = None
    ) -> Optional[ChapterCollection]:
        lines = self._read(source)
        if lines is None:
            return None
        return chapters_from_lines(lines, duration)

    def encode(self, sink: Path, value: Optional[ChapterCollection]) -> bool:
        desired = value.to_chp(self.digits) if value is not None else None
        return self._write(sink, desired)
