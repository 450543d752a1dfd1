from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, List, Optional, Protocol

from mutagen import File as MutagenFile
from mutagen._vorbis import VCommentDict
from mutagen.apev2 import APEv2, APETextValue
from mutagen.id3 import ID3, Frame
from mutagen.mp4 import MP4Tags

from .models import UnsupportedFileError

logger = logging.getLogger(__name__)


class FrameContainer(Protocol):
    def has_structure(self, kind: str) -> bool: ...

    def get_items(self, kind: str) -> List[Any]: ...

    def add_item(self, kind: str, item: Any) -> None: ...

    def remove_item(self, kind: str, item: Any) -> None: ...


class FieldContainer(Protocol):
    def get_field(self, key: str) -> List[str]: ...

    def set_field(self, key: str, values: Optional[List[str]]) -> None: ...


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def read_lines(self, path: Path) -> List[str]: ...

    def write_lines(self, path: Path, lines: List[str]) -> None: ...

    def remove(self, path: Path) -> None: ...


class Id3Frames:
    """Frame access over a mutagen ID3 tag.

    ``kind`` is a frame id (``SYLT``) or a hash-key prefix (``TXXX:RICH LYRICS``).
    """

    def __init__(self, tags: ID3) -> None:
        self.tags = tags

    def has_structure(self, kind: str) -> bool:
        return bool(self.tags.getall(kind))

    def get_items(self, kind: str) -> List[Frame]:
        return list(self.tags.getall(kind))

    def add_item(self, kind: str, item: Frame) -> None:
        if item.HashKey != kind and not item.HashKey.startswith(kind + ":"):
            raise ValueError(f"{item.HashKey} is not a {kind} frame")
        self.tags.add(item)

    def remove_item(self, kind: str, item: Frame) -> None:
        if item.HashKey in self.tags:
            del self.tags[item.HashKey]


class VorbisFields:
    def __init__(self, comment: VCommentDict) -> None:
        self.comment = comment

    def get_field(self, key: str) -> List[str]:
        try:
            return list(self.comment[key])
        except KeyError:
            return []

    def set_field(self, key: str, values: Optional[List[str]]) -> None:
        if values:
            self.comment[key] = list(values)
        elif key in self.comment:
            del self.comment[key]


class ApeFields:
    def __init__(self, tags: APEv2) -> None:
        self.tags = tags

    def get_field(self, key: str) -> List[str]:
        try:
            value = self.tags[key]
        except KeyError:
            return []
        if not isinstance(value, APETextValue):
            logger.debug("Ignoring non-text APEv2 value for %s", key)
            return []
        return list(value)

    def set_field(self, key: str, values: Optional[List[str]]) -> None:
        if values:
            self.tags[key] = list(values)
        elif key in self.tags:
            del self.tags[key]


class Mp4Fields:
    """Text atoms of an MP4 ``ilst``; non-text values read as absent."""

    def __init__(self, tags: MP4Tags) -> None:
        self.tags = tags

    def get_field(self, key: str) -> List[str]:
        values = self.tags.get(key) or []
        return [value for value in values if isinstance(value, str)]

    def set_field(self, key: str, values: Optional[List[str]]) -> None:
        if values:
            self.tags[key] = list(values)
        elif key in self.tags:
            del self.tags[key]


class LocalFileSystem:
    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_lines(self, path: Path) -> List[str]:
        text = path.read_text(encoding=self.encoding, errors="replace")
        return text.lstrip("\ufeff").splitlines()

    def write_lines(self, path: Path, lines: List[str]) -> None:
        path.write_text("\n".join(lines) + "\n", encoding=self.encoding)

    def remove(self, path: Path) -> None:
        path.unlink(missing_ok=True)


@dataclass
class TagFile:
    """A media file opened through mutagen plus the file system around it."""

    path: Path
    audio: Any
    fs: FileSystem = field(default_factory=LocalFileSystem)

    @classmethod
    def open(cls, path: Path, fs: Optional[FileSystem] = None) -> "TagFile":
        audio = MutagenFile(path)
        if audio is None:
            raise UnsupportedFileError(f"Unrecognised media file: {path}")
        return cls(path=Path(path), audio=audio, fs=fs or LocalFileSystem())

    @property
    def duration(self) -> Optional[timedelta]:
        info = getattr(self.audio, "info", None)
        length = getattr(info, "length", None)
        if not length:
            return None
        return timedelta(seconds=length)

    @property
    def id3(self) -> Optional[Id3Frames]:
        tags = self.audio.tags
        return Id3Frames(tags) if isinstance(tags, ID3) else None

    @property
    def vorbis(self) -> Optional[VorbisFields]:
        tags = self.audio.tags
        return VorbisFields(tags) if isinstance(tags, VCommentDict) else None

    @property
    def ape(self) -> Optional[ApeFields]:
        tags = self.audio.tags
        return ApeFields(tags) if isinstance(tags, APEv2) else None

    @property
    def mp4(self) -> Optional[Mp4Fields]:
        tags = self.audio.tags
        return Mp4Fields(tags) if isinstance(tags, MP4Tags) else None

    def ensure_tags(self) -> None:
        if self.audio.tags is None:
            self.audio.add_tags()

    def sidecar(self, suffix: str) -> Path:
        return self.path.with_suffix(suffix)

    def save(self) -> None:
        self.audio.save()
        logger.info("Saved tags for %s", self.path)
