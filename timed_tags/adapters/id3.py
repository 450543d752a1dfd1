from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional

from mutagen.id3 import CHAP, SYLT, TIT2, TXXX, USLT, Encoding, Frame, TextFrame

from ..changes import replace_items
from ..containers import FrameContainer
from ..models import Chapter, ChapterCollection, Lyrics
from ..tag_keys import (
    ID3_CHAPTER,
    ID3_RICH_CHAPTERS,
    ID3_RICH_LYRICS,
    ID3_SYNCED_LYRICS,
    ID3_UNSYNCED_LYRICS,
    RICH_CHAPTERS,
    RICH_LYRICS,
    chapter_key,
)
from .base import AdapterKind, LyricTypes
from .rich import RichChaptersAdapter, RichLyricsAdapter, chapters_to_json, lyrics_to_json

logger = logging.getLogger(__name__)

# SYLT timestamp formats and content types (ID3v2.4 section 4.9)
SYLT_MPEG_FRAMES = 1
SYLT_ABSOLUTE_MS = 2
SYLT_CONTENT_LYRICS = 1

UNKNOWN_LANGUAGE = "XXX"
_MAX_MS = 0xFFFFFFFF


def render_frame(frame: Frame) -> bytes:
    """The frame body exactly as mutagen writes it into a v2.4 tag.

    mutagen has no public call for a single frame's bytes, so this relies on
    ``Frame._writeData`` (present through the 1.x series, hence the ``<2``
    pin in pyproject.toml).
    """
    return frame._writeData()


def _hash_key(frame: Frame) -> str:
    return frame.HashKey


def _to_ms(value: timedelta) -> int:
    return min(max(0, value // timedelta(milliseconds=1)), _MAX_MS)


def _frame_language(language: Optional[str]) -> str:
    if language and len(language) == 3 and language.isascii():
        return language
    return UNKNOWN_LANGUAGE


def _replace(frames: FrameContainer, kind: str, desired: List[Frame]) -> bool:
    return replace_items(frames, kind, desired, key=_hash_key, render=render_frame)


def _first_text(frames: FrameContainer, kind: str) -> Optional[str]:
    if not frames.has_structure(kind):
        return None
    for frame in frames.get_items(kind):
        if frame.text and frame.text[0]:
            return frame.text[0]
    return None


class Id3LyricsAdapter:
    """Lyrics as ID3 frames: a rich TXXX payload, SYLT for timing and USLT for text."""

    kind = AdapterKind.FRAME

    def __init__(self) -> None:
        self.rich = RichLyricsAdapter()

    def decode(self, source: FrameContainer, duration: Optional[timedelta] = None) -> Optional[Lyrics]:
        payload = _first_text(source, ID3_RICH_LYRICS)
        if payload is not None:
            return self.rich.decode(payload)
        for frame in source.get_items(ID3_SYNCED_LYRICS):
            if frame.format != SYLT_ABSOLUTE_MS:
                logger.debug("Skipping %s: timestamps are not in milliseconds", frame.HashKey)
                continue
            onsets = [(timedelta(milliseconds=time), text) for text, time in frame.text]
            return Lyrics.from_onsets(onsets, duration)
        return None

    def decode_plain(self, source: FrameContainer) -> Optional[Lyrics]:
        for frame in source.get_items(ID3_UNSYNCED_LYRICS):
            if frame.text:
                return Lyrics.from_plain_text(frame.text)
        return None

    def encode(
        self,
        sink: FrameContainer,
        value: Optional[Lyrics],
        types: LyricTypes = LyricTypes.ALL,
        language: Optional[str] = None,
    ) -> bool:
        lang = _frame_language(language)
        synced: List[Frame] = []
        simple: List[Frame] = []
        rich: List[Frame] = []
        if value is not None:
            if LyricTypes.SYNCED in types and value.synchronized:
                synced.append(
                    SYLT(
                        encoding=Encoding.UTF8,
                        lang=lang,
                        format=SYLT_ABSOLUTE_MS,
                        type=SYLT_CONTENT_LYRICS,
                        desc="",
                        text=[(text, min(max(0, ms), _MAX_MS)) for text, ms in value.to_synched_text()],
                    )
                )
            if LyricTypes.SIMPLE in types:
                simple.append(USLT(encoding=Encoding.UTF8, lang=lang, desc="", text=value.to_simple()))
            if LyricTypes.RICH in types:
                rich.append(TXXX(encoding=Encoding.UTF8, desc=RICH_LYRICS, text=[lyrics_to_json(value)]))
        changed = False
        changed |= _replace(sink, ID3_SYNCED_LYRICS, synced)
        changed |= _replace(sink, ID3_UNSYNCED_LYRICS, simple)
        changed |= _replace(sink, ID3_RICH_LYRICS, rich)
        return changed


def _chapter_title(frame: CHAP) -> Optional[str]:
    sub_frames = frame.sub_frames
    candidates = sub_frames.getall("TIT2") or [
        sub for sub in sub_frames.values() if isinstance(sub, TextFrame)
    ]
    for sub in candidates:
        if sub.text and sub.text[0]:
            return sub.text[0]
    return None


class Id3ChaptersAdapter:
    """Chapters as CHAP frames with a TIT2 title sub-frame, plus an optional rich TXXX."""

    kind = AdapterKind.FRAME

    def __init__(self) -> None:
        self.rich = RichChaptersAdapter()

    def decode(
        self, source: FrameContainer, duration: Optional[timedelta] = None
    ) -> Optional[ChapterCollection]:
        payload = _first_text(source, ID3_RICH_CHAPTERS)
        if payload is not None:
            return self.rich.decode(payload)
        chapters = []
        for frame in source.get_items(ID3_CHAPTER):
            title = _chapter_title(frame)
            if title is None:
                logger.debug("Skipping %s without a title", frame.HashKey)
                continue
            chapters.append(
                Chapter(
                    title,
                    timedelta(milliseconds=frame.start_time),
                    timedelta(milliseconds=frame.end_time),
                )
            )
        if not chapters:
            return None
        return ChapterCollection(chapters)

    def encode(
        self,
        sink: FrameContainer,
        value: Optional[ChapterCollection],
        rich: bool = True,
    ) -> bool:
        frames: List[Frame] = []
        rich_frames: List[Frame] = []
        if value is not None:
            for num, chapter in enumerate(value.chapters, start=1):
                frames.append(
                    CHAP(
                        element_id=chapter_key(num),
                        start_time=_to_ms(chapter.start),
                        end_time=_to_ms(chapter.end),
                        sub_frames=[TIT2(encoding=Encoding.UTF8, text=[chapter.title])],
                    )
                )
            if rich:
                rich_frames.append(
                    TXXX(encoding=Encoding.UTF8, desc=RICH_CHAPTERS, text=[chapters_to_json(value)])
                )
        changed = False
        changed |= _replace(sink, ID3_CHAPTER, frames)
        changed |= _replace(sink, ID3_RICH_CHAPTERS, rich_frames)
        return changed
