from __future__ import annotations

import logging
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from ..changes import items_changed, replace_field
from ..containers import FieldContainer
from ..models import ChapterCollection, Lyrics
from ..tag_keys import (
    MAX_FIELD_CHAPTERS,
    RICH_CHAPTERS,
    RICH_LYRICS,
    VORBIS_CHAPTER_NAME,
    VORBIS_LYRICS,
    VORBIS_UNSYNCED_LYRICS,
    chapter_key,
)
from ..timestamps import format_timestamp, parse_timestamp
from .base import AdapterKind, LyricTypes
from .rich import RichChaptersAdapter, RichLyricsAdapter
from .sidecar import lyrics_from_lines, lyrics_to_lines

logger = logging.getLogger(__name__)


def _replace_rich(fields: FieldContainer, key: str, adapter, value) -> bool:
    slot = fields.get_field(key)
    changed = adapter.encode(slot, value)
    fields.set_field(key, slot or None)
    return changed


class VorbisLyricsAdapter:
    """Lyrics in Vorbis comments: RICH LYRICS, LYRICS (LRC or plain) and UNSYNCED LYRICS."""

    kind = AdapterKind.FIELD

    def __init__(self, digits: int = 3) -> None:
        self.digits = digits
        self.rich = RichLyricsAdapter()

    def decode(self, source: FieldContainer, duration: Optional[timedelta] = None) -> Optional[Lyrics]:
        rich = source.get_field(RICH_LYRICS)
        if rich:
            return self.rich.decode(rich[0])
        text = source.get_field(VORBIS_LYRICS)
        if text:
            return lyrics_from_lines("\n".join(text).splitlines(), duration)
        unsynced = source.get_field(VORBIS_UNSYNCED_LYRICS)
        if unsynced:
            return Lyrics.from_plain_text("\n".join(unsynced))
        return None

    def encode(
        self,
        sink: FieldContainer,
        value: Optional[Lyrics],
        types: LyricTypes = LyricTypes.ALL,
    ) -> bool:
        synced = simple = None
        if value is not None:
            if LyricTypes.SYNCED in types:
                synced = "\n".join(lyrics_to_lines(value, self.digits))
            if LyricTypes.SIMPLE in types:
                simple = value.to_simple()
        rich = value if value is not None and LyricTypes.RICH in types else None
        changed = False
        changed |= replace_field(sink, VORBIS_LYRICS, synced)
        changed |= replace_field(sink, VORBIS_UNSYNCED_LYRICS, simple)
        changed |= _replace_rich(sink, RICH_LYRICS, self.rich, rich)
        return changed


def _chapter_fields(index: int) -> Tuple[str, str]:
    key = chapter_key(index)
    return key, key + VORBIS_CHAPTER_NAME


class VorbisChaptersAdapter:
    """Chapters as numbered CHAPTERnnn / CHAPTERnnnNAME comment pairs."""

    kind = AdapterKind.FIELD

    def __init__(self) -> None:
        self.rich = RichChaptersAdapter()

    def decode(
        self, source: FieldContainer, duration: Optional[timedelta] = None
    ) -> Optional[ChapterCollection]:
        rich = source.get_field(RICH_CHAPTERS)
        if rich:
            return self.rich.decode(rich[0])
        onsets = []
        for index in range(MAX_FIELD_CHAPTERS + 1):
            time_key, name_key = _chapter_fields(index)
            times = source.get_field(time_key)
            if not times:
                continue
            start = parse_timestamp(times[0])
            if start is None:
                logger.debug("Skipping %s with unreadable time %r", time_key, times[0])
                continue
            names = source.get_field(name_key)
            title = names[0] if names else f"Chapter {index}"
            onsets.append((start, title))
        if not onsets:
            return None
        return ChapterCollection.from_onsets(onsets, duration)

    def _existing(self, fields: FieldContainer) -> Dict[str, List[str]]:
        existing: Dict[str, List[str]] = {}
        for index in range(MAX_FIELD_CHAPTERS + 1):
            for key in _chapter_fields(index):
                values = fields.get_field(key)
                if values:
                    existing[key] = values
        return existing

    def _desired(self, chapters: Optional[ChapterCollection]) -> Dict[str, List[str]]:
        desired: Dict[str, List[str]] = {}
        if chapters is None:
            return desired
        ordered = chapters.chapters
        if len(ordered) > MAX_FIELD_CHAPTERS:
            logger.warning(
                "Only %d of %d chapters fit in Vorbis comments; dropping the rest",
                MAX_FIELD_CHAPTERS,
                len(ordered),
            )
        for index, chapter in enumerate(ordered[:MAX_FIELD_CHAPTERS], start=1):
            time_key, name_key = _chapter_fields(index)
            desired[time_key] = [format_timestamp(chapter.start, always_hours=True)]
            desired[name_key] = [chapter.title]
        return desired

    def encode(
        self,
        sink: FieldContainer,
        value: Optional[ChapterCollection],
        rich: bool = True,
    ) -> bool:
        existing = self._existing(sink)
        desired = self._desired(value)
        changed = items_changed(
            list(existing.items()),
            list(desired.items()),
            key=lambda item: item[0],
            render=lambda item: item[1],
        )
        for key in existing:
            if key not in desired:
                sink.set_field(key, None)
        for key, values in desired.items():
            sink.set_field(key, values)
        changed |= _replace_rich(sink, RICH_CHAPTERS, self.rich, value if rich else None)
        return changed
