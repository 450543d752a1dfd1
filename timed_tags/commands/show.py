from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..app import FileReport, TimedTagsApp
from ..models import TimedTagsError
from .output import time_range

logger = logging.getLogger(__name__)


def render(report: FileReport) -> List[str]:
    lines = [str(report.path)]
    lyrics = report.lyrics
    if lyrics is None:
        lines.append("  lyrics: none")
    else:
        kind = "synchronized" if lyrics.synchronized else "plain"
        lines.append(f"  lyrics: {kind}, {len(lyrics)} line(s)")
        for channel in lyrics.channels:
            if channel.name:
                lines.append(f"    [{channel.name}]")
            for entry in channel.entries:
                if lyrics.synchronized:
                    lines.append(f"    {time_range(entry.start, entry.end)}  {entry.text}")
                else:
                    lines.append(f"    {entry.text}")
    chapters = report.chapters
    if chapters is None:
        lines.append("  chapters: none")
    else:
        lines.append(f"  chapters: {len(chapters)}")
        for chapter in chapters.chapters:
            lines.append(f"    {time_range(chapter.start, chapter.end)}  {chapter.title}")
    return lines


def run(app: TimedTagsApp, paths: List[Path]) -> int:
    """Print what each file resolves to; returns the number of files shown."""
    shown = 0
    for path in paths:
        try:
            report = app.inspect(path)
        except TimedTagsError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        shown += 1
        for line in render(report):
            print(line)
    return shown
