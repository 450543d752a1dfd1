from __future__ import annotations

# Field names and frame selectors shared by the adapters.
# Keep these centralized; changing one changes what existing files decode to.

RICH_LYRICS = "RICH LYRICS"
RICH_CHAPTERS = "RICH CHAPTERS"

VORBIS_LYRICS = "LYRICS"
VORBIS_UNSYNCED_LYRICS = "UNSYNCED LYRICS"
VORBIS_LANGUAGE = "LANGUAGE"
VORBIS_CHAPTER_NAME = "NAME"

APE_LYRICS = "Lyrics"

MP4_LYRICS = "\xa9lyr"

ID3_SYNCED_LYRICS = "SYLT"
ID3_UNSYNCED_LYRICS = "USLT"
ID3_CHAPTER = "CHAP"
ID3_LANGUAGE = "TLAN"
ID3_RICH_LYRICS = f"TXXX:{RICH_LYRICS}"
ID3_RICH_CHAPTERS = f"TXXX:{RICH_CHAPTERS}"

MAX_FIELD_CHAPTERS = 999


def chapter_key(num: int) -> str:
    return f"CHAPTER{num:03d}"
