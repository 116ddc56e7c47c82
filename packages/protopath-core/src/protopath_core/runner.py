"""Protoc orchestration.

ProtocRunner drives one compilation end to end:

    IDLE -> VALIDATED -> LOCATED -> EXTRACTED -> INVOKED -> SUCCEEDED | FAILED

A missing source root, or a source root without proto files, ends the run
as SUCCEEDED without extracting anything or starting protoc. Every stage
runs on the calling thread and blocks on the next; there is no timeout and
no cancellation.
"""

from __future__ import annotations

import time
from enum import Enum
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from protopath_core.config import ProtocConfig
from protopath_core.dependencies import DependencyResolver, StaticDependencies
from protopath_core.errors import (
    CompilationError,
    ConfigurationError,
    ProtopathError,
    ProtopathIOError,
)
from protopath_core.extractor import ArchiveExtractor
from protopath_core.locator import find_proto_files_in_directory
from protopath_core.outputs import OutputRegistrar
from protopath_core.protoc import CompileResult, ProtocBuilder, run_protoc

logger = structlog.get_logger(__name__)


class RunState(str, Enum):
    """Stages of a protoc run."""

    IDLE = "idle"
    VALIDATED = "validated"
    LOCATED = "located"
    EXTRACTED = "extracted"
    INVOKED = "invoked"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunResult(BaseModel):
    """Summary of a finished run.

    Attributes:
        state: Final state, always SUCCEEDED for a returned result.
        skipped_reason: Why no compilation happened, if it was skipped.
        proto_files: Proto files handed to protoc.
        protopath: Search path handed to protoc.
        output_directory: Generation target.
        compile_result: protoc exit status and output, if protoc ran.
        duration_ms: Wall-clock duration of the run.
    """

    model_config = ConfigDict(frozen=True)

    state: RunState
    skipped_reason: str | None = None
    proto_files: tuple[Path, ...] = ()
    protopath: tuple[Path, ...] = ()
    output_directory: Path
    compile_result: CompileResult | None = None
    duration_ms: int = Field(default=0, ge=0)

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


class ProtocRunner:
    """Locate, extract, compile and register for one ProtocConfig.

    Attributes:
        config: Run configuration.
        dependencies: Supplies dependency archives and directories.
            Defaults to ``config.dependencies``.
        registrar: Told about the output directory after a successful
            compile. Optional.
        state: Current RunState.

    Example:
        >>> config = ProtocConfig.for_scope("main", base_dir="my-service")
        >>> result = ProtocRunner(config).run()
        >>> result.state
        <RunState.SUCCEEDED: 'succeeded'>
    """

    def __init__(
        self,
        config: ProtocConfig,
        dependencies: DependencyResolver | None = None,
        registrar: OutputRegistrar | None = None,
    ) -> None:
        self.config = config
        self.dependencies = (
            dependencies if dependencies is not None else StaticDependencies(config.dependencies)
        )
        self.registrar = registrar
        self.state = RunState.IDLE
        self._log = logger.bind(component="protoc_runner", scope=config.scope.value)

    def run(self) -> RunResult:
        """Run the compilation.

        Returns:
            RunResult for a successful or skipped run.

        Raises:
            ConfigurationError: If a configured directory is a regular file.
            InvalidInputError: If a dependency artifact or directory is unusable.
            ProtopathIOError: If a filesystem or process operation fails.
            CompilationError: If protoc exits with a non-zero status.
        """
        self.state = RunState.IDLE
        start_time = time.monotonic()
        try:
            return self._run(start_time)
        except ProtopathError:
            self.state = RunState.FAILED
            raise
        except OSError as e:
            self.state = RunState.FAILED
            raise ProtopathIOError(
                f"I/O error during protoc run ({self.config.scope.value})",
                internal_details=f"{type(e).__name__}: {e}",
            ) from e

    def _run(self, start_time: float) -> RunResult:
        config = self.config
        self._validate()
        self.state = RunState.VALIDATED

        source_root = config.proto_source_root
        if not source_root.exists():
            self._log.info(
                "proto_source_root_missing",
                proto_source_root=str(source_root),
                hint="Review the configuration or consider disabling the protoc step",
            )
            return self._finish(start_time, skipped_reason=f"{source_root} does not exist")

        proto_files = find_proto_files_in_directory(
            source_root, config.includes, config.excludes
        )
        self.state = RunState.LOCATED
        if not proto_files:
            self._log.info("no_proto_files_to_compile", proto_source_root=str(source_root))
            return self._finish(start_time, skipped_reason="No proto files to compile")

        artifacts = self.dependencies.resolve()
        extractor = ArchiveExtractor(config.local_repository)
        derived = extractor.extract(config.temporary_proto_file_directory, artifacts)
        self.state = RunState.EXTRACTED

        request = (
            ProtocBuilder(
                config.protoc_executable,
                config.output_directory,
                language=config.language,
            )
            .add_protopath_element(source_root)
            .add_protopath_elements(sorted(derived))
            .add_protopath_elements(config.additional_protopath_elements)
            .add_proto_files(proto_files)
            .build()
        )
        self._log.info(
            "protoc_invoking",
            proto_files=len(request.proto_files),
            protopath_elements=len(request.protopath),
        )
        result = run_protoc(request)
        self.state = RunState.INVOKED

        if not result.succeeded:
            self._log.error("protoc_failed_output", output=result.stdout)
            self._log.error("protoc_failed_error", error=result.stderr)
            raise CompilationError(result.exit_code, result.stdout, result.stderr)

        if self.registrar is not None:
            self.registrar.register(config.scope, config.output_directory, source_root)

        return self._finish(
            start_time,
            proto_files=request.proto_files,
            protopath=request.protopath,
            compile_result=result,
        )

    def _validate(self) -> None:
        checks = (
            ("proto_source_root", self.config.proto_source_root),
            ("temporary_proto_file_directory", self.config.temporary_proto_file_directory),
            ("output_directory", self.config.output_directory),
        )
        for field, path in checks:
            if path.is_file():
                raise ConfigurationError(
                    f"{path} is a file, not a directory",
                    field_path=field,
                )

    def _finish(self, start_time: float, **fields: object) -> RunResult:
        self.state = RunState.SUCCEEDED
        duration_ms = int((time.monotonic() - start_time) * 1000)
        result = RunResult(
            state=self.state,
            output_directory=self.config.output_directory,
            duration_ms=duration_ms,
            **fields,  # type: ignore[arg-type]
        )
        self._log.info(
            "protoc_run_completed",
            skipped=result.skipped,
            proto_files=len(result.proto_files),
            duration_ms=duration_ms,
        )
        return result
