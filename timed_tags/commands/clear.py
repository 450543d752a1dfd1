from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..app import TimedTagsApp
from ..models import TimedTagsError

logger = logging.getLogger(__name__)


def run(
    app: TimedTagsApp,
    paths: List[Path],
    *,
    lyrics: bool = True,
    chapters: bool = True,
    dry_run: bool = False,
) -> int:
    cleared = 0
    for path in paths:
        try:
            report = app.clear(path, lyrics=lyrics, chapters=chapters, dry_run=dry_run)
        except TimedTagsError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        if report.changed:
            cleared += 1
            prefix = "[dry-run] Would clear" if dry_run else "Cleared"
            print(f"{prefix} {path}")
    suffix = " (dry-run)" if dry_run else ""
    print(f"Clear complete{suffix}: {cleared} of {len(paths)} file(s) changed.")
    return cleared
