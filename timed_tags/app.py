from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .chapters_io import read_chapters, write_chapters, write_chapters_sidecar
from .config import Settings
from .containers import FileSystem, LocalFileSystem, TagFile
from .language import set_language
from .lyrics_io import read_lyrics, write_lyrics, write_lyrics_sidecar
from .models import ChapterCollection, Lyrics

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FileReport:
    path: Path
    lyrics: Optional[Lyrics] = None
    chapters: Optional[ChapterCollection] = None
    changed: bool = False
    saved: bool = False
    sidecars: List[Path] = field(default_factory=list)


@dataclass
class TimedTagsApp:
    settings: Settings
    fs: FileSystem

    @classmethod
    def create(cls, settings: Settings) -> "TimedTagsApp":
        return cls(settings=settings, fs=LocalFileSystem(settings.sidecar.encoding))

    def open(self, path: Path) -> TagFile:
        return TagFile.open(path, fs=self.fs)

    def inspect(self, path: Path) -> FileReport:
        tag_file = self.open(path)
        return FileReport(
            path=tag_file.path,
            lyrics=read_lyrics(tag_file, self.settings.sidecar),
            chapters=read_chapters(tag_file, self.settings.sidecar),
        )

    def embed(self, path: Path, *, language: Optional[str] = None, dry_run: bool = False) -> FileReport:
        """Copy the best lyrics/chapters found for ``path`` into all of its tag encodings."""
        settings = self.settings
        tag_file = self.open(path)
        report = FileReport(
            path=tag_file.path,
            lyrics=read_lyrics(tag_file, settings.sidecar),
            chapters=read_chapters(tag_file, settings.sidecar),
        )
        tag_file.ensure_tags()
        changed = False
        if language is not None:
            changed |= set_language(tag_file, language)
        if report.lyrics is not None:
            changed |= write_lyrics(
                tag_file,
                report.lyrics,
                settings.lyrics.lyric_types,
                digits=settings.sidecar.timestamp_digits,
            )
        if report.chapters is not None:
            changed |= write_chapters(tag_file, report.chapters, rich=settings.chapters.rich)
        report.changed = changed
        if dry_run:
            return report
        if settings.lyrics.write_sidecar and report.lyrics is not None:
            if write_lyrics_sidecar(tag_file, report.lyrics, settings.sidecar):
                report.sidecars.append(tag_file.sidecar(settings.sidecar.lyrics_suffix))
        if settings.chapters.write_sidecar and report.chapters is not None:
            if write_chapters_sidecar(tag_file, report.chapters, settings.sidecar):
                report.sidecars.append(tag_file.sidecar(settings.sidecar.chapters_suffix))
        if changed:
            tag_file.save()
            report.saved = True
        else:
            logger.debug("Tags already up to date for %s", tag_file.path)
        return report

    def clear(
        self,
        path: Path,
        *,
        lyrics: bool = True,
        chapters: bool = True,
        dry_run: bool = False,
    ) -> FileReport:
        tag_file = self.open(path)
        report = FileReport(path=tag_file.path)
        changed = False
        if lyrics:
            changed |= write_lyrics(tag_file, None)
        if chapters:
            changed |= write_chapters(tag_file, None)
        report.changed = changed
        if changed and not dry_run:
            tag_file.save()
            report.saved = True
        return report
