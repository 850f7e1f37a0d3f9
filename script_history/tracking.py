"""Allow-list of project files that take part in history diffs."""
from __future__ import annotations

TRACKED_SUFFIXES = (".ts", ".jres", ".py", ".blocks")
MANIFEST_FILENAME = "pxt.json"


def is_tracked(filename: str) -> bool:
    return filename.endswith(TRACKED_SUFFIXES) or filename == MANIFEST_FILENAME
