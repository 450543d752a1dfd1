from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from pathlib import Path
from typing import Optional

from ..config import Settings
from .output import disabled, enabled, error, ok as ok_line


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings, *, config_path: Optional[Path] = None) -> DoctorReport:
    checks: list[str] = []
    ok = True

    if config_path is None:
        checks.append(ok_line("Config", "defaults (no config.yaml found)"))
    else:
        checks.append(ok_line("Config", str(config_path)))

    try:
        checks.append(ok_line("mutagen", metadata.version("mutagen")))
    except metadata.PackageNotFoundError:
        ok = False
        checks.append(error("mutagen", "not installed"))

    types = settings.lyrics.types
    if types:
        checks.append(enabled("Lyric encodings", ", ".join(types)))
    else:
        checks.append(disabled("Lyric encodings", "lyrics will only be cleared"))

    checks.append(
        enabled("Rich chapters") if settings.chapters.rich else disabled("Rich chapters")
    )

    sidecar = settings.sidecar
    if sidecar.lyrics_suffix == sidecar.chapters_suffix:
        ok = False
        checks.append(error("Sidecars", f"lyrics and chapters share {sidecar.lyrics_suffix}"))
    else:
        checks.append(
            ok_line(
                "Sidecars",
                f"{sidecar.lyrics_suffix} / {sidecar.chapters_suffix}, {sidecar.encoding}",
            )
        )
    try:
        "".encode(sidecar.encoding)
    except LookupError:
        ok = False
        checks.append(error("Sidecar encoding", f"unknown codec {sidecar.encoding}"))

    return DoctorReport(ok=ok, checks=checks)
