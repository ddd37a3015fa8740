"""Locate the external commands SecretGate shells out to."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Sequence

from secretgate.errors import MissingDependency


def default_search_path() -> list[str]:
    """Directories listed in ``PATH``, in order, empty entries dropped."""
    return [d for d in os.environ.get("PATH", "").split(os.pathsep) if d]


def locate_commands(
    names: Iterable[str],
    search_path: Sequence[str] | None = None,
) -> dict[str, str]:
    """Resolve each command name to an absolute executable path.

    A candidate only counts when it exists and the current user may execute
    it; directories never count. The first matching directory in
    ``search_path`` wins.

    Args:
        names: Command names to resolve (e.g. ``{"git"}``).
        search_path: Directories to search. Defaults to ``PATH``.

    Returns:
        Mapping of command name to absolute path.

    Raises:
        MissingDependency: If any command cannot be found. Lists every
            unresolved name, not only the first.
    """
    directories = list(search_path) if search_path is not None else default_search_path()

    located: dict[str, str] = {}
    missing: list[str] = []
    for name in sorted(set(names)):
        found = shutil.which(name, path=os.pathsep.join(directories)) if directories else None
        if found is None:
            missing.append(name)
        else:
            located[name] = os.path.abspath(found)

    if missing:
        raise MissingDependency(missing)
    return located
