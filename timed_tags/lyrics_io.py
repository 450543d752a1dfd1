from __future__ import annotations

import logging
from typing import Optional

from .adapters import (
    ApeLyricsAdapter,
    Id3LyricsAdapter,
    LrcSidecarAdapter,
    LyricTypes,
    Mp4LyricsAdapter,
    VorbisLyricsAdapter,
)
from .config import SidecarSettings
from .containers import TagFile
from .language import get_language
from .models import Lyrics
from .resolver import attempt, first_result

logger = logging.getLogger(__name__)

ID3 = Id3LyricsAdapter()
APE = ApeLyricsAdapter()
MP4 = Mp4LyricsAdapter()


def read_lyrics(tag_file: TagFile, sidecar: Optional[SidecarSettings] = None) -> Optional[Lyrics]:
    """Resolve lyrics from the richest encoding present.

    Priority: ID3 (rich, SYLT), Vorbis comments (rich, LRC, plain), the
    ``.lrc`` sidecar, then plain-text slots (USLT, APEv2, MP4 ``©lyr``).
    """
    sidecar = sidecar or SidecarSettings()
    duration = tag_file.duration
    lrc = LrcSidecarAdapter(tag_file.fs, sidecar.timestamp_digits)
    vorbis = VorbisLyricsAdapter(sidecar.timestamp_digits)
    return first_result(
        [
            attempt(lambda: tag_file.id3, lambda frames: ID3.decode(frames, duration)),
            attempt(lambda: tag_file.vorbis, lambda fields: vorbis.decode(fields, duration)),
            attempt(
                lambda: tag_file.sidecar(sidecar.lyrics_suffix),
                lambda path: lrc.decode(path, duration),
            ),
            attempt(lambda: tag_file.id3, ID3.decode_plain),
            attempt(lambda: tag_file.ape, APE.decode),
            attempt(lambda: tag_file.mp4, MP4.decode),
        ],
        label="lyrics",
    )


def write_lyrics(
    tag_file: TagFile,
    lyrics: Optional[Lyrics],
    types: LyricTypes = LyricTypes.ALL,
    digits: int = 3,
) -> bool:
    """Store ``lyrics`` (or clear them with None) in every tag the file carries.

    Every target is rewritten; the result tells whether any stored form changed.
    """
    changed = False
    frames = tag_file.id3
    if frames is not None:
        changed |= ID3.encode(frames, lyrics, types, language=get_language(tag_file))
    ape = tag_file.ape
    if ape is not None:
        changed |= APE.encode(ape, lyrics, types)
    mp4 = tag_file.mp4
    if mp4 is not None:
        changed |= MP4.encode(mp4, lyrics, types)
    fields = tag_file.vorbis
    if fields is not None:
        changed |= VorbisLyricsAdapter(digits).encode(fields, lyrics, types)
    if changed:
        logger.info("Lyrics changed for %s", tag_file.path)
    return changed


def write_lyrics_sidecar(
    tag_file: TagFile, lyrics: Optional[Lyrics], sidecar: Optional[SidecarSettings] = None
) -> bool:
    sidecar = sidecar or SidecarSettings()
    adapter = LrcSidecarAdapter(tag_file.fs, sidecar.timestamp_digits)
    return adapter.encode(tag_file.sidecar(sidecar.lyrics_suffix), lyrics)
