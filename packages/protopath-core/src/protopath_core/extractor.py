"""Stage proto files from dependency archives.

protoc cannot read inside archives, so the proto entries of every dependency
archive are copied into a staging directory. Each archive gets its own
subdirectory derived from its location in the local repository, which keeps
like-named entries from different archives apart. Plain directories that
already hold proto files are referenced in place.

The staging directory is emptied at the start of every extraction and
scheduled for removal at interpreter exit. Removal at exit is best-effort;
the clean at the start of each run is what keeps stale files out.
"""

from __future__ import annotations

import atexit
import os
import shutil
import zipfile
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

import structlog

from protopath_core.errors import InvalidInputError, ProtopathIOError
from protopath_core.locator import PROTO_FILE_SUFFIX
from protopath_core.paths import normalize_separators, truncate_path

logger = structlog.get_logger(__name__)

_scheduled_for_removal: set[Path] = set()


def clean_directory(directory: Path) -> None:
    """Remove everything inside ``directory``, keeping the directory itself.

    Raises:
        ProtopathIOError: If an entry cannot be removed.
    """
    if not directory.exists():
        return
    try:
        for child in directory.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as e:
        raise ProtopathIOError(
            f"Failed to clean staging directory {directory}",
            internal_details=str(e),
        ) from e


def delete_on_exit(directory: Path) -> None:
    """Schedule ``directory`` for best-effort removal when the process exits."""
    directory = directory.absolute()
    if directory in _scheduled_for_removal:
        return
    _scheduled_for_removal.add(directory)
    atexit.register(shutil.rmtree, directory, ignore_errors=True)


def _entry_path(entry_name: str, archive: Path) -> PurePosixPath:
    """Validate an archive entry name and return it as a relative path."""
    entry = PurePosixPath(normalize_separators(entry_name))
    if entry.is_absolute() or ".." in entry.parts or ":" in entry.parts[0]:
        raise InvalidInputError(
            f"contains an entry outside the archive root: {entry_name}",
            path=archive,
        )
    return entry


class ArchiveExtractor:
    """Build protopath elements from dependency archives and directories.

    Attributes:
        repository: Local artifact cache root, used to name per-archive
            staging subdirectories.

    Example:
        >>> extractor = ArchiveExtractor(Path.home() / ".m2" / "repository")
        >>> elements = extractor.extract(Path("target/protoc-dependencies"), jars)
    """

    def __init__(self, repository: Path | str) -> None:
        self.repository = Path(repository)
        self._log = logger.bind(component="archive_extractor")

    def extract(
        self,
        staging_directory: Path | str,
        dependency_artifacts: Iterable[Path | str],
    ) -> frozenset[Path]:
        """Stage proto files from archives and collect protopath elements.

        Args:
            staging_directory: Scratch directory for extracted entries.
            dependency_artifacts: Archive files or directories, processed in
                the order given.

        Returns:
            Directories protoc should search: the parent of every staged
            entry plus every dependency directory holding proto files.

        Raises:
            InvalidInputError: If a dependency file cannot be read as an archive.
            ProtopathIOError: If cleaning or copying fails.
        """
        staging_directory = Path(staging_directory)
        clean_directory(staging_directory)

        elements: set[Path] = set()
        for artifact in dependency_artifacts:
            artifact = Path(artifact)
            if artifact.is_file():
                elements |= self._extract_archive(staging_directory, artifact)
            elif artifact.is_dir():
                if self._has_proto_files(artifact):
                    self._log.debug("directory_referenced", directory=str(artifact))
                    elements.add(artifact)
            else:
                self._log.debug("artifact_skipped", artifact=str(artifact))

        delete_on_exit(staging_directory)
        self._log.info(
            "dependencies_extracted",
            staging_directory=str(staging_directory),
            protopath_elements=len(elements),
        )
        return frozenset(elements)

    def _extract_archive(self, staging_directory: Path, archive: Path) -> set[Path]:
        try:
            handle = zipfile.ZipFile(archive)
        except (OSError, zipfile.BadZipFile) as e:
            raise InvalidInputError(
                "was not a readable artifact",
                path=archive,
                internal_details=f"{type(e).__name__}: {e}",
            ) from e

        archive_root = self._archive_root(staging_directory, archive)
        directories: set[Path] = set()
        with handle:
            for info in handle.infolist():
                if info.is_dir() or not info.filename.endswith(PROTO_FILE_SUFFIX):
                    continue
                destination = archive_root / _entry_path(info.filename, archive)
                try:
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    with handle.open(info) as source, destination.open("wb") as target:
                        shutil.copyfileobj(source, target)
                except (OSError, zipfile.BadZipFile) as e:
                    raise ProtopathIOError(
                        f"Failed to extract {info.filename} from {archive}",
                        internal_details=f"{type(e).__name__}: {e}",
                    ) from e
                directories.add(destination.parent)

        self._log.debug("archive_extracted", archive=str(archive), directories=len(directories))
        return directories

    def _archive_root(self, staging_directory: Path, archive: Path) -> Path:
        # Normalized first so ".." segments cannot climb out of staging.
        name = truncate_path(os.path.abspath(archive), os.path.abspath(self.repository))
        return staging_directory / name.lstrip("/")

    @staticmethod
    def _has_proto_files(directory: Path) -> bool:
        try:
            return any(
                child.name.endswith(PROTO_FILE_SUFFIX) and child.is_file()
                for child in directory.iterdir()
            )
        except OSError as e:
            raise ProtopathIOError(
                f"Failed to list dependency directory {directory}",
                internal_details=str(e),
            ) from e
