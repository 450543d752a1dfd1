from __future__ import annotations

from typing import Optional

from mutagen.id3 import TLAN, Encoding

from .adapters.id3 import render_frame
from .changes import replace_field, replace_items
from .containers import TagFile
from .tag_keys import ID3_LANGUAGE, VORBIS_LANGUAGE


def get_language(tag_file: TagFile) -> Optional[str]:
    frames = tag_file.id3
    if frames is not None:
        for frame in frames.get_items(ID3_LANGUAGE):
            if frame.text and frame.text[0]:
                return frame.text[0]
    fields = tag_file.vorbis
    if fields is not None:
        values = fields.get_field(VORBIS_LANGUAGE)
        if values:
            return values[0]
    return None


def set_language(tag_file: TagFile, value: Optional[str]) -> bool:
    changed = False
    frames = tag_file.id3
    if frames is not None:
        desired = [TLAN(encoding=Encoding.UTF8, text=[value])] if value else []
        changed |= replace_items(
            frames,
            ID3_LANGUAGE,
            desired,
            key=lambda frame: frame.HashKey,
            render=render_frame,
        )
    fields = tag_file.vorbis
    if fields is not None:
        changed |= replace_field(fields, VORBIS_LANGUAGE, value or None)
    return changed
