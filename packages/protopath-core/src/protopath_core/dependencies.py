"""Dependency artifact collaborators.

Which archives and directories make up a build's dependencies is decided
outside protopath. The runner only asks a DependencyResolver for them.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from protopath_core.errors import InvalidInputError

logger = structlog.get_logger(__name__)

ARCHIVE_SUFFIXES: frozenset[str] = frozenset({".jar", ".zip"})


@runtime_checkable
class DependencyResolver(Protocol):
    """Supplies the dependency artifacts of a build."""

    def resolve(self) -> list[Path]:
        """Return archive files or directories, in processing order."""
        ...


class StaticDependencies:
    """A fixed list of dependency artifacts.

    Example:
        >>> StaticDependencies([Path("lib/common.jar")]).resolve()
        [PosixPath('lib/common.jar')]
    """

    def __init__(self, artifacts: Iterable[Path | str] = ()) -> None:
        self.artifacts = [Path(artifact) for artifact in artifacts]

    def resolve(self) -> list[Path]:
        return list(self.artifacts)


class DirectoryDependencies:
    """Every archive and subdirectory directly inside a folder, such as ``lib/``.

    Entries are returned sorted by name so repeated runs see the same order.
    A missing folder yields no dependencies.
    """

    def __init__(
        self,
        directory: Path | str,
        suffixes: Iterable[str] = ARCHIVE_SUFFIXES,
    ) -> None:
        self.directory = Path(directory)
        self.suffixes = frozenset(suffixes)

    def resolve(self) -> list[Path]:
        if not self.directory.exists():
            logger.debug("dependency_directory_missing", directory=str(self.directory))
            return []
        if not self.directory.is_dir():
            raise InvalidInputError("is not a directory", path=self.directory)

        artifacts = [
            child
            for child in sorted(self.directory.iterdir())
            if child.is_dir() or child.suffix.lower() in self.suffixes
        ]
        logger.debug(
            "dependencies_resolved",
            directory=str(self.directory),
            count=len(artifacts),
        )
        return artifacts


class ChainedDependencies:
    """Concatenate several resolvers, dropping repeated paths."""

    def __init__(self, *resolvers: DependencyResolver) -> None:
        self.resolvers = resolvers

    def resolve(self) -> list[Path]:
        seen: dict[Path, None] = {}
        for resolver in self.resolvers:
            for artifact in resolver.resolve():
                seen.setdefault(artifact, None)
        return list(seen)
