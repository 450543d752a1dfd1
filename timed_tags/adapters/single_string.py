from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ..changes import replace_field
from ..containers import FieldContainer
from ..models import Lyrics
from ..tag_keys import APE_LYRICS, MP4_LYRICS
from .base import AdapterKind, LyricTypes


class _SingleStringLyricsAdapter:
    """One free-text lyrics slot; timing is not stored."""

    kind = AdapterKind.SINGLE_STRING
    key: str

    def decode(self, source: FieldContainer, duration: Optional[timedelta] = None) -> Optional[Lyrics]:
        text = "\n".join(source.get_field(self.key))
        if not text:
            return None
        return Lyrics.from_plain_text(text)

    def encode(
        self,
        sink: FieldContainer,
        value: Optional[Lyrics],
        types: LyricTypes = LyricTypes.ALL,
    ) -> bool:
        desired = None
        if value is not None and LyricTypes.SIMPLE in types:
            desired = value.to_simple()
        return replace_field(sink, self.key, desired)


class ApeLyricsAdapter(_SingleStringLyricsAdapter):
    """The APEv2 ``Lyrics`` text item."""

    key = APE_LYRICS


class Mp4LyricsAdapter(_SingleStringLyricsAdapter):
    """The iTunes ``©lyr`` atom of MP4/M4A files."""

    key = MP4_LYRICS
