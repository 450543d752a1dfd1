from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .intervals import synthesize_intervals
from .timestamps import format_line

Listener = Callable[[object, str], None]

_NEVER = timedelta.max


class TimedTagsError(Exception):
    """Base class for errors raised by timed_tags."""


class RichPayloadError(TimedTagsError):
    """Raised when a stored rich lyrics/chapters document cannot be deserialized."""


class UnsupportedFileError(TimedTagsError):
    """Raised when the tagging library cannot identify a media file."""


class Observable:
    """Keeps a list of callbacks that are told about every successful mutation."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Listener:
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def _notify(self, prop: str) -> None:
        for listener in list(self._listeners):
            listener(self, prop)


@dataclass(slots=True)
class TimedEntry:
    text: str
    start: timedelta = timedelta(0)
    end: timedelta = timedelta(0)

    def contains(self, time: timedelta) -> bool:
        return self.start <= time <= self.end

    def to_lrc_line(self, digits: int = 3) -> str:
        return format_line(self.start, self.text, digits=digits)

    def __str__(self) -> str:
        return f"[{self.start}]-[{self.end}]: {self.text}"


@dataclass(slots=True)
class Chapter(TimedEntry):
    @property
    def title(self) -> str:
        return self.text

    @title.setter
    def title(self, value: str) -> None:
        self.text = value


def entry_sort_key(entry: TimedEntry) -> Tuple[timedelta, timedelta, str]:
    # str comparison is by code point, never locale aware
    return (entry.start, entry.end, entry.text)


def channel_sort_key(channel: "LyricsChannel") -> Tuple[timedelta, timedelta, bool, str]:
    start = channel.start
    end = channel.end
    return (
        _NEVER if start is None else start,
        _NEVER if end is None else end,
        channel.name is not None,
        channel.name or "",
    )


def _remove_identical(items: List, item: object) -> bool:
    for index, candidate in enumerate(items):
        if candidate is item:
            del items[index]
            return True
    return False


class LyricsChannel(Observable):
    """A named voice/track of lyrics. Entries are stored unordered and read back sorted."""

    def __init__(self, name: Optional[str] = None, entries: Iterable[TimedEntry] = ()) -> None:
        super().__init__()
        self._name = name
        self._entries: List[TimedEntry] = list(entries)

    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value
        self._notify("name")

    def rename(self, value: Optional[str]) -> None:
        self.name = value

    @property
    def entries(self) -> List[TimedEntry]:
        return sorted(self._entries, key=entry_sort_key)

    @property
    def start(self) -> Optional[timedelta]:
        if not self._entries:
            return None
        return min(entry.start for entry in self._entries)

    @property
    def end(self) -> Optional[timedelta]:
        if not self._entries:
            return None
        return max(entry.end for entry in self._entries)

    def add(self, entry: TimedEntry) -> None:
        self._entries.append(entry)
        self._notify("entries")

    def remove(self, entry: TimedEntry) -> bool:
        if _remove_identical(self._entries, entry):
            self._notify("entries")
            return True
        return False

    def clear(self) -> None:
        if not self._entries:
            return
        self._entries.clear()
        self._notify("entries")

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TimedEntry]:
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"LyricsChannel(name={self._name!r}, entries={len(self._entries)})"


class Lyrics(Observable):
    """Lyrics made of one or more channels.

    ``synchronized`` is False for plain text lyrics; their entries all carry
    zero-length ranges at 0:00 and only the text is meaningful.
    """

    def __init__(self, synchronized: bool, channels: Iterable[LyricsChannel] = ()) -> None:
        super().__init__()
        self.synchronized = synchronized
        self._channels: List[LyricsChannel] = list(channels)

    @classmethod
    def from_onsets(
        cls,
        onsets: Iterable[Tuple[timedelta, str]],
        duration: Optional[timedelta] = None,
    ) -> "Lyrics":
        channel = LyricsChannel()
        for text, start, end in synthesize_intervals(onsets, duration):
            channel.add(TimedEntry(text, start, end))
        return cls(True, [channel])

    @classmethod
    def from_entries(cls, entries: Iterable[TimedEntry]) -> "Lyrics":
        return cls(True, [LyricsChannel(entries=entries)])

    @classmethod
    def from_plain_text(cls, text: str) -> "Lyrics":
        channel = LyricsChannel()
        for line in text.splitlines():
            if line.strip():
                channel.add(TimedEntry(line))
        return cls(False, [channel])

    @property
    def channels(self) -> List[LyricsChannel]:
        return sorted(self._channels, key=channel_sort_key)

    def all_entries(self) -> List[TimedEntry]:
        # merge across channels so lines read in time order, not channel by channel
        return sorted(
            (entry for channel in self._channels for entry in channel._entries),
            key=entry_sort_key,
        )

    def add_channel(self, channel: LyricsChannel) -> None:
        self._channels.append(channel)
        self._notify("channels")

    def remove_channel(self, channel: LyricsChannel) -> bool:
        if _remove_identical(self._channels, channel):
            self._notify("channels")
            return True
        return False

    def clear_channels(self) -> None:
        if not self._channels:
            return
        self._channels.clear()
        self._notify("channels")

    def lyrics_at_time(self, time: timedelta) -> List[TimedEntry]:
        if not self.synchronized:
            return []
        return [
            entry
            for channel in self.channels
            for entry in channel.entries
            if entry.contains(time)
        ]

    def to_synched_text(self) -> List[Tuple[str, int]]:
        return [
            (entry.text, entry.start // timedelta(milliseconds=1))
            for entry in self.all_entries()
        ]

    def to_simple(self) -> str:
        return "\n".join(entry.text for entry in self.all_entries())

    def to_lrc(self, digits: int = 3) -> List[str]:
        return [entry.to_lrc_line(digits) for entry in self.all_entries()]

    def __len__(self) -> int:
        return sum(len(channel) for channel in self._channels)

    def __repr__(self) -> str:
        return (
            f"Lyrics(synchronized={self.synchronized}, "
            f"channels={len(self._channels)}, entries={len(self)})"
        )


class ChapterCollection(Observable):
    def __init__(self, chapters: Iterable[Chapter] = ()) -> None:
        super().__init__()
        self._entries: List[Chapter] = list(chapters)

    @classmethod
    def from_onsets(
        cls,
        onsets: Iterable[Tuple[timedelta, str]],
        duration: Optional[timedelta] = None,
    ) -> "ChapterCollection":
        return cls(
            Chapter(title, start, end)
            for title, start, end in synthesize_intervals(onsets, duration)
        )

    @property
    def chapters(self) -> List[Chapter]:
        return sorted(self._entries, key=entry_sort_key)

    def add(self, chapter: Chapter) -> None:
        self._entries.append(chapter)
        self._notify("chapters")

    def remove(self, chapter: Chapter) -> bool:
        if _remove_identical(self._entries, chapter):
            self._notify("chapters")
            return True
        return False

    def clear(self) -> None:
        if not self._entries:
            return
        self._entries.clear()
        self._notify("chapters")

    def chapters_at_time(self, time: timedelta) -> List[Chapter]:
        return [chapter for chapter in self.chapters if chapter.contains(time)]

    def to_chp(self, digits: int = 3) -> List[str]:
        return [chapter.to_lrc_line(digits) for chapter in self.chapters]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Chapter]:
        return iter(self.chapters)

    def __repr__(self) -> str:
        return f"ChapterCollection(chapters={len(self._entries)})"
