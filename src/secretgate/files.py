"""Narrow the staged-file list to what can actually be read."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path


def filter_readable(paths: Iterable[str], repo_root: str | Path) -> list[str]:
    """Keep staged paths that are regular files readable by this process.

    Paths that were deleted from disk after staging, directories, broken
    symlinks and files without read permission are dropped silently. Input
    order is preserved.
    """
    root = Path(repo_root)
    readable: list[str] = []
    for rel_path in paths:
        abs_path = root / rel_path
        if abs_path.is_file() and os.access(abs_path, os.R_OK):
            readable.append(rel_path)
    return readable
