"Encoders/decoders for each place lyrics and chapters can be stored."

from .base import Adapter, AdapterKind, LyricTypes
from .id3 import Id3ChaptersAdapter, Id3LyricsAdapter
from .rich import RichChaptersAdapter, RichLyricsAdapter
from .sidecar import ChpSidecarAdapter, LrcSidecarAdapter
from .single_string import ApeLyricsAdapter, Mp4LyricsAdapter
from .vorbis import VorbisChaptersAdapter, VorbisLyricsAdapter

__all__ = [
    "Adapter",
    "AdapterKind",
    "ApeLyricsAdapter",
    "ChpSidecarAdapter",
    "Id3ChaptersAdapter",
    "Id3LyricsAdapter",
    "LrcSidecarAdapter",
    "LyricTypes",
    "Mp4LyricsAdapter",
    "RichChaptersAdapter",
    "RichLyricsAdapter",
    "VorbisChaptersAdapter",
    "VorbisLyricsAdapter",
]
