from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from ..app import TimedTagsApp
from ..models import TimedTagsError

logger = logging.getLogger(__name__)


def run(
    app: TimedTagsApp,
    paths: List[Path],
    *,
    language: Optional[str] = None,
    dry_run: bool = False,
) -> int:
    """Embed resolved lyrics/chapters into each file; returns the number of changed files."""
    changed = 0
    for path in paths:
        try:
            report = app.embed(path, language=language, dry_run=dry_run)
        except TimedTagsError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        if report.lyrics is None and report.chapters is None:
            print(f"{path}: nothing to embed")
            continue
        if report.changed:
            changed += 1
            prefix = "[dry-run] Would update" if dry_run else "Updated"
            print(f"{prefix} {path}")
        else:
            print(f"{path}: up to date")
        for sidecar in report.sidecars:
            print(f"  wrote {sidecar}")
    suffix = " (dry-run)" if dry_run else ""
    print(f"Embed complete{suffix}: {changed} of {len(paths)} file(s) changed.")
    return changed
