"""Path normalization for staged dependency archives.

Archives are staged under a subdirectory named after the archive's own
location, truncated so it is relative to the local artifact cache. Two
archives shipping the same entry name therefore never share a directory.
"""

from __future__ import annotations

import re
from pathlib import Path

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:/")


def normalize_separators(path: str) -> str:
    """Replace Windows separators with forward slashes."""
    return path.replace("\\", "/")


def truncate_path(archive_path: str | Path, repository: str | Path) -> str:
    """Truncate an archive path so it is relative to the local repository.

    The repository directory gets a trailing separator before it is searched
    for, so ``/repo`` never matches inside ``/repository/...``. The search is
    a plain substring search, not anchored at the start of the path. Paths
    outside the repository keep their full form minus any drive prefix.

    Args:
        archive_path: Full path of an archive file.
        repository: Root directory of the local artifact cache.

    Returns:
        Forward-slash path relative to the repository, or to the drive root.

    Example:
        >>> truncate_path(r"C:\\repo\\cache\\g\\a\\1.0\\a.jar", r"C:\\repo\\cache")
        'g/a/1.0/a.jar'
    """
    base = normalize_separators(str(repository))
    if not base.endswith("/"):
        base += "/"

    path = normalize_separators(str(archive_path))
    index = path.find(base)
    if index != -1:
        path = path[index + len(base) :]

    if _DRIVE_PREFIX.match(path):
        path = path[3:]

    return path
