"""Locate proto files under a source root.

Include and exclude patterns are globs relative to the scanned directory,
matched through pathspec. ``*`` never crosses a ``/`` and only ``**`` spans
directories, so ``*.proto`` matches top-level files while ``**/*.proto``
matches files at the root as well as nested ones. Version-control metadata
directories are always excluded.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pathspec
import structlog

from protopath_core.errors import InvalidInputError, ProtopathIOError

logger = structlog.get_logger(__name__)

PROTO_FILE_SUFFIX = ".proto"
DEFAULT_INCLUDES: tuple[str, ...] = (f"**/*{PROTO_FILE_SUFFIX}",)

# Directories a source scanner never descends into.
DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/.bzr/**",
    "**/CVS/**",
    "**/_darcs/**",
    "**/.DS_Store",
)


def _anchor(pattern: str) -> str:
    # Wildmatch lets a slash-less pattern match at any depth.
    negate = pattern.startswith("!")
    body = pattern[1:] if negate else pattern
    if not body.strip() or "/" in body.rstrip("/"):
        return pattern
    return ("!/" if negate else "/") + body


def _compile(patterns: Iterable[str]) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", [_anchor(p) for p in patterns])


def find_proto_files_in_directory(
    directory: Path | str,
    includes: Iterable[str] = DEFAULT_INCLUDES,
    excludes: Iterable[str] = (),
) -> frozenset[Path]:
    """Find the proto files under a directory.

    Args:
        directory: Root to scan recursively.
        includes: Patterns a file must match, relative to ``directory``.
        excludes: Patterns that drop a matching file.

    Returns:
        Absolute, resolved paths of the matching files.

    Raises:
        InvalidInputError: If ``directory`` is not an existing directory.
        ProtopathIOError: If the tree cannot be walked.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise InvalidInputError("is not a directory", path=directory)

    include_spec = _compile(includes)
    exclude_spec = _compile((*DEFAULT_EXCLUDES, *excludes))

    root = directory.resolve()
    found: set[Path] = set()
    try:
        for file_path in root.rglob("*"):
            if not file_path.is_file():
                continue
            relative_path = file_path.relative_to(root).as_posix()
            if not include_spec.match_file(relative_path):
                continue
            if exclude_spec.match_file(relative_path):
                logger.debug("proto_file_excluded", path=relative_path)
                continue
            found.add(file_path.resolve())
    except OSError as e:
        raise ProtopathIOError(
            f"Failed to scan {directory} for proto files",
            internal_details=str(e),
        ) from e

    logger.debug("proto_files_located", directory=str(root), count=len(found))
    return frozenset(found)


def find_proto_files_in_directories(
    directories: Iterable[Path | str],
    includes: Iterable[str] = DEFAULT_INCLUDES,
    excludes: Iterable[str] = (),
) -> frozenset[Path]:
    """Union of :func:`find_proto_files_in_directory` over several roots."""
    includes = tuple(includes)
    excludes = tuple(excludes)
    found: set[Path] = set()
    for directory in directories:
        found |= find_proto_files_in_directory(directory, includes, excludes)
    return frozenset(found)
