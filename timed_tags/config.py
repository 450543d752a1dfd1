from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .adapters.base import LyricTypes

LYRIC_TYPE_NAMES = ("simple", "synced", "rich")


class LyricsSettings(BaseModel):
    types: List[str] = Field(default_factory=lambda: list(LYRIC_TYPE_NAMES))
    write_sidecar: bool = False

    @field_validator("types", mode="before")
    @classmethod
    def _normalise_types(cls, values: List[str]) -> List[str]:
        if isinstance(values, str):
            values = [values]
        normalised = [str(value).strip().lower() for value in values]
        unknown = [value for value in normalised if value not in LYRIC_TYPE_NAMES]
        if unknown:
            raise ValueError(f"unknown lyric types: {', '.join(unknown)}")
        return normalised

    @property
    def lyric_types(self) -> LyricTypes:
        return LyricTypes.from_names(self.types)


class ChapterSettings(BaseModel):
    rich: bool = True
    write_sidecar: bool = False


class SidecarSettings(BaseModel):
    lyrics_suffix: str = ".lrc"
    chapters_suffix: str = ".chp"
    encoding: str = "utf-8"
    timestamp_digits: int = 3

    @field_validator("lyrics_suffix", "chapters_suffix", mode="before")
    @classmethod
    def _dotted(cls, value: str) -> str:
        value = str(value).strip()
        return value if value.startswith(".") else f".{value}"

    @field_validator("timestamp_digits")
    @classmethod
    def _digits(cls, value: int) -> int:
        if value not in (2, 3):
            raise ValueError("timestamp_digits must be 2 or 3")
        return value


class Settings(BaseModel):
    lyrics: LyricsSettings = LyricsSettings()
    chapters: ChapterSettings = ChapterSettings()
    sidecar: SidecarSettings = SidecarSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
