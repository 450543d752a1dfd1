from __future__ import annotations

import logging
from typing import Optional

from .adapters import ChpSidecarAdapter, Id3ChaptersAdapter, VorbisChaptersAdapter
from .config import SidecarSettings
from .containers import TagFile
from .models import ChapterCollection
from .resolver import attempt, first_result

logger = logging.getLogger(__name__)

ID3 = Id3ChaptersAdapter()
VORBIS = VorbisChaptersAdapter()


def read_chapters(
    tag_file: TagFile, sidecar: Optional[SidecarSettings] = None
) -> Optional[ChapterCollection]:
    sidecar = sidecar or SidecarSettings()
    duration = tag_file.duration
    chp = ChpSidecarAdapter(tag_file.fs, sidecar.timestamp_digits)
    return first_result(
        [
            attempt(lambda: tag_file.id3, lambda frames: ID3.decode(frames, duration)),
            attempt(lambda: tag_file.vorbis, lambda fields: VORBIS.decode(fields, duration)),
            attempt(
                lambda: tag_file.sidecar(sidecar.chapters_suffix),
                lambda path: chp.decode(path, duration),
            ),
        ],
        label="chapters",
    )


def write_chapters(
    tag_file: TagFile, chapters: Optional[ChapterCollection], rich: bool = True
) -> bool:
    changed = False
    frames = tag_file.id3
    if frames is not None:
        changed |= ID3.encode(frames, chapters, rich=rich)
    fields = tag_file.vorbis
    if fields is not None:
        changed |= VORBIS.encode(fields, chapters, rich=rich)
    if changed:
        logger.info("Chapters changed for %s", tag_file.path)
    return changed


def write_chapters_sidecar(
    tag_file: TagFile,
    chapters: Optional[ChapterCollection],
    sidecar: Optional[SidecarSettings] = None,
) -> bool:
    sidecar = sidecar or SidecarSettings()
    adapter = ChpSidecarAdapter(tag_file.fs, sidecar.timestamp_digits)
    return adapter.encode(tag_file.sidecar(sidecar.chapters_suffix), chapters)
