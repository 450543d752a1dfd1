"""Lossless JSON documents for lyrics and chapters.

A rich payload is stored whole under a single reserved field/frame. Unlike the
other encodings it is never partially recovered: a payload that does not
validate raises :class:`RichPayloadError`.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional, Union

from pydantic import BaseModel, ValidationError, field_serializer, field_validator

from ..models import (
    Chapter,
    ChapterCollection,
    Lyrics,
    LyricsChannel,
    RichPayloadError,
    TimedEntry,
)
from ..timestamps import format_timestamp, parse_timestamp
from .base import AdapterKind


def _coerce_time(value: object) -> timedelta:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
    raise ValueError(f"invalid timestamp {value!r}")


class RichEntry(BaseModel):
    text: str
    start: timedelta
    end: timedelta

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_time(cls, value: object) -> timedelta:
        return _coerce_time(value)

    @field_serializer("start", "end")
    def _format_time(self, value: timedelta) -> str:
        return format_timestamp(value, always_hours=True)


class RichChannel(BaseModel):
    name: Optional[str] = None
    lyrics: List[Union[str, RichEntry]]


class RichLyricsDocument(BaseModel):
    channels: List[RichChannel]


class RichChapter(BaseModel):
    title: str
    start: timedelta
    end: timedelta

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_time(cls, value: object) -> timedelta:
        return _coerce_time(value)

    @field_serializer("start", "end")
    def _format_time(self, value: timedelta) -> str:
        return format_timestamp(value, always_hours=True)


class RichChaptersDocument(BaseModel):
    chapters: List[RichChapter]


def lyrics_to_json(lyrics: Lyrics) -> str:
    channels = []
    for channel in lyrics.channels:
        if lyrics.synchronized:
            items: List[Union[str, RichEntry]] = [
                RichEntry(text=entry.text, start=entry.start, end=entry.end)
                for entry in channel.entries
            ]
        else:
            items = [entry.text for entry in channel.entries]
        channels.append(RichChannel(name=channel.name, lyrics=items))
    return RichLyricsDocument(channels=channels).model_dump_json(exclude_none=True)


def lyrics_from_json(payload: str) -> Lyrics:
    try:
        document = RichLyricsDocument.model_validate_json(payload)
    except ValidationError as exc:
        raise RichPayloadError(f"Invalid rich lyrics payload: {exc}") from exc
    # timing is only claimed when at least one entry carries it and none are bare strings
    timed = plain = False
    channels = []
    for item in document.channels:
        channel = LyricsChannel(item.name)
        for line in item.lyrics:
            if isinstance(line, str):
                plain = True
                channel.add(TimedEntry(line))
            else:
                timed = True
                channel.add(TimedEntry(line.text, line.start, line.end))
        channels.append(channel)
    return Lyrics(timed and not plain, channels)


def chapters_to_json(chapters: ChapterCollection) -> str:
    document = RichChaptersDocument(
        chapters=[
            RichChapter(title=chapter.title, start=chapter.start, end=chapter.end)
            for chapter in chapters.chapters
        ]
    )
    return document.model_dump_json()


def chapters_from_json(payload: str) -> ChapterCollection:
    try:
        document = RichChaptersDocument.model_validate_json(payload)
    except ValidationError as exc:
        raise RichPayloadError(f"Invalid rich chapters payload: {exc}") from exc
    return ChapterCollection(
        Chapter(item.title, item.start, item.end) for item in document.chapters
    )


class RichLyricsAdapter:
    """Payload-level adapter; the frame and field adapters store its output."""

    kind = AdapterKind.RICH

    def decode(self, source: str, duration: Optional[timedelta] = None) -> Optional[Lyrics]:
        return lyrics_from_json(source) if source else None

    def encode(self, sink: List[str], value: Optional[Lyrics]) -> bool:
        desired = [lyrics_to_json(value)] if value is not None else []
        changed = sink != desired
        sink[:] = desired
        return changed


class RichChaptersAdapter:
    kind = AdapterKind.RICH

    def decode(
        self, source: str, duration: Optional[timedelta] = None
    ) -> Optional[ChapterCollection]:
        return chapters_from_json(source) if source else None

    def encode(self, sink: List[str], value: Optional[ChapterCollection]) -> bool:
        desired = [chapters_to_json(value)] if value is not None else []
        changed = sink != desired
        sink[:] = desired
        return changed
