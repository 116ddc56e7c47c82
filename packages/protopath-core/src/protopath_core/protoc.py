"""Build and run protoc command lines.

A CompileRequest is assembled once per run with ProtocBuilder and is
immutable afterwards. run_protoc blocks until protoc exits and captures
both output streams in memory. A non-zero exit status is reported in the
CompileResult, not raised; the caller decides what a failure means.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from protopath_core.errors import InvalidInputError, ProtopathIOError

logger = structlog.get_logger(__name__)

DEFAULT_PROTOC_EXECUTABLE = "protoc"
DEFAULT_LANGUAGE = "python"


class CompileRequest(BaseModel):
    """A single protoc invocation.

    Attributes:
        executable: protoc executable, a path or a name looked up on PATH.
        output_directory: Directory protoc generates into.
        protopath: Search path elements in the order protoc receives them.
        proto_files: Proto files to compile.
        language: Generator name used for the ``--<language>_out`` flag.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    executable: str = Field(..., min_length=1, description="protoc executable")
    output_directory: Path = Field(..., description="Generation target directory")
    protopath: tuple[Path, ...] = Field(default=(), description="Ordered search path")
    proto_files: tuple[Path, ...] = Field(..., min_length=1, description="Files to compile")
    language: str = Field(default=DEFAULT_LANGUAGE, min_length=1, description="Output generator")

    def command(self) -> list[str]:
        """Return the full argument vector for this request."""
        args = [self.executable]
        args.extend(f"--proto_path={element}" for element in self.protopath)
        args.append(f"--{self.language}_out={self.output_directory}")
        args.extend(str(proto_file) for proto_file in self.proto_files)
        return args


class CompileResult(BaseModel):
    """Outcome of a protoc invocation."""

    model_config = ConfigDict(frozen=True)

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProtocBuilder:
    """Accumulate the pieces of a CompileRequest.

    Protopath elements keep insertion order; a directory added twice keeps
    its first position. Proto files are a set and are passed to protoc in
    sorted order.

    Example:
        >>> request = (
        ...     ProtocBuilder("protoc", Path("target/generated-sources/protoc"))
        ...     .add_protopath_element(Path("src/main/proto"))
        ...     .add_protopath_elements(extracted)
        ...     .add_proto_files(proto_files)
        ...     .build()
        ... )
    """

    def __init__(
        self,
        executable: str | Path,
        output_directory: Path | str,
        *,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.executable = str(executable)
        self.output_directory = Path(output_directory)
        self.language = language
        self._protopath: dict[Path, None] = {}
        self._proto_files: set[Path] = set()

    def add_protopath_element(self, element: Path | str) -> ProtocBuilder:
        self._protopath.setdefault(Path(element), None)
        return self

    def add_protopath_elements(self, elements: Iterable[Path | str]) -> ProtocBuilder:
        for element in elements:
            self.add_protopath_element(element)
        return self

    def add_proto_file(self, proto_file: Path | str) -> ProtocBuilder:
        self._proto_files.add(Path(proto_file))
        return self

    def add_proto_files(self, proto_files: Iterable[Path | str]) -> ProtocBuilder:
        for proto_file in proto_files:
            self.add_proto_file(proto_file)
        return self

    def build(self) -> CompileRequest:
        """Create the request and the output directory.

        Raises:
            InvalidInputError: If no proto files were added, or the output
                directory cannot be created.
        """
        if not self._proto_files:
            raise InvalidInputError("has no proto files to compile", path=self.output_directory)

        try:
            self.output_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InvalidInputError(
                "could not be created as the output directory",
                path=self.output_directory,
                internal_details=str(e),
            ) from e

        return CompileRequest(
            executable=self.executable,
            output_directory=self.output_directory,
            protopath=tuple(self._protopath),
            proto_files=tuple(sorted(self._proto_files)),
            language=self.language,
        )


def build_request(
    executable: str | Path,
    output_directory: Path | str,
    protopath_elements: Iterable[Path | str],
    proto_files: Iterable[Path | str],
    *,
    language: str = DEFAULT_LANGUAGE,
) -> CompileRequest:
    """Shorthand for a ProtocBuilder filled in one call."""
    return (
        ProtocBuilder(executable, output_directory, language=language)
        .add_protopath_elements(protopath_elements)
        .add_proto_files(proto_files)
        .build()
    )


def run_protoc(request: CompileRequest) -> CompileResult:
    """Run protoc and wait for it to exit.

    No timeout is applied; a hung protoc hangs the caller.

    Raises:
        ProtopathIOError: If the process cannot be started.
    """
    command = request.command()
    logger.debug("protoc_started", command=command)

    try:
        completed = subprocess.run(  # noqa: S603
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ProtopathIOError(
            f"Failed to invoke protoc ({request.executable})",
            internal_details=f"{type(e).__name__}: {e}",
        ) from e

    logger.debug("protoc_exited", exit_code=completed.returncode)
    return CompileResult(
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
