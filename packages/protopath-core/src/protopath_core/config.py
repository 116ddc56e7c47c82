"""Configuration model for a protoc run.

ProtocConfig describes one compilation: where the proto sources live, where
protoc writes, where dependency archives are staged and which extra
directories join the protopath. It can be built in code with
``ProtocConfig.for_scope`` or loaded from YAML with ``ProtocConfig.from_yaml``.

Example protopath.yaml:
    scope: main
    protoc_executable: /usr/local/bin/protoc
    additional_protopath_elements:
      - third_party/googleapis
    excludes:
      - "**/internal/*.proto"
    dependencies:
      - lib/common-protos-1.0.jar
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from protopath_core.errors import ConfigurationError
from protopath_core.locator import DEFAULT_INCLUDES
from protopath_core.protoc import DEFAULT_LANGUAGE, DEFAULT_PROTOC_EXECUTABLE

DEFAULT_LOCAL_REPOSITORY = Path.home() / ".m2" / "repository"

_PATH_FIELDS = (
    "proto_source_root",
    "output_directory",
    "temporary_proto_file_directory",
)
_PATH_LIST_FIELDS = ("additional_protopath_elements", "dependencies")


class Scope(str, Enum):
    """Which sources a run compiles.

    Values:
        MAIN: Production proto sources
        TEST: Test-only proto sources
    """

    MAIN = "main"
    TEST = "test"


SCOPE_DEFAULTS: dict[Scope, dict[str, Path]] = {
    Scope.MAIN: {
        "proto_source_root": Path("src/main/proto"),
        "output_directory": Path("target/generated-sources/protoc"),
        "temporary_proto_file_directory": Path("target/protoc-dependencies"),
    },
    Scope.TEST: {
        "proto_source_root": Path("src/test/proto"),
        "output_directory": Path("target/generated-test-sources/protoc"),
        "temporary_proto_file_directory": Path("target/protoc-test-dependencies"),
    },
}


class ProtocConfig(BaseModel):
    """Configuration for one protoc run.

    Attributes:
        scope: Whether main or test sources are compiled.
        proto_source_root: Directory scanned for proto files.
        output_directory: Directory protoc generates into.
        temporary_proto_file_directory: Staging directory for proto files
            extracted from dependency archives. Cleaned on every run.
        protoc_executable: protoc path, or a name resolved through PATH.
        additional_protopath_elements: Extra directories appended to the
            protopath after the source root and dependency directories.
        includes: Patterns selecting proto files under the source root.
        excludes: Patterns removing proto files from the selection.
        local_repository: Local artifact cache root; archive staging
            directories are named relative to it.
        language: Generator name for the ``--<language>_out`` flag.
        dependencies: Dependency archives or directories used when no
            dependency resolver is supplied.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scope: Scope = Field(default=Scope.MAIN, description="Compilation scope")
    proto_source_root: Path = Field(..., description="Proto source root directory")
    output_directory: Path = Field(..., description="Generated sources directory")
    temporary_proto_file_directory: Path = Field(
        ...,
        description="Staging directory for extracted dependency protos",
    )
    protoc_executable: str = Field(
        default=DEFAULT_PROTOC_EXECUTABLE,
        min_length=1,
        description="protoc executable",
    )
    additional_protopath_elements: tuple[Path, ...] = Field(
        default=(),
        description="Extra protopath directories",
    )
    includes: tuple[str, ...] = Field(
        default=DEFAULT_INCLUDES,
        min_length=1,
        description="Include patterns",
    )
    excludes: tuple[str, ...] = Field(default=(), description="Exclude patterns")
    local_repository: Path = Field(
        default=DEFAULT_LOCAL_REPOSITORY,
        description="Local artifact cache root",
    )
    language: str = Field(
        default=DEFAULT_LANGUAGE,
        pattern=r"^[a-z][a-z0-9_]*$",
        description="protoc output generator",
    )
    dependencies: tuple[Path, ...] = Field(
        default=(),
        description="Dependency archives or directories",
    )

    @classmethod
    def for_scope(
        cls,
        scope: Scope | str = Scope.MAIN,
        base_dir: Path | str = ".",
        **overrides: Any,
    ) -> ProtocConfig:
        """Build a config with the scope's default directories.

        Relative paths, defaults and overrides alike, are resolved against
        ``base_dir``. ``None`` overrides are ignored.

        Args:
            scope: Compilation scope.
            base_dir: Project directory.
            **overrides: Field values replacing the defaults.

        Returns:
            Validated ProtocConfig.

        Example:
            >>> config = ProtocConfig.for_scope("test", base_dir="my-service")
            >>> config.proto_source_root
            PosixPath('my-service/src/test/proto')
        """
        scope = Scope(scope)
        base_dir = Path(base_dir)

        data: dict[str, Any] = {**SCOPE_DEFAULTS[scope]}
        data.update({key: value for key, value in overrides.items() if value is not None})
        data["scope"] = scope

        for key in _PATH_FIELDS:
            data[key] = base_dir / Path(data[key])
        if "local_repository" in data:
            data["local_repository"] = base_dir / Path(data["local_repository"]).expanduser()
        for key in _PATH_LIST_FIELDS:
            if key in data:
                values = data[key]
                if isinstance(values, (str, Path)):
                    values = (values,)
                data[key] = tuple(base_dir / Path(value) for value in values)

        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> ProtocConfig:
        """Load a config from YAML, resolving paths against the file's directory.

        Non-None ``overrides`` replace values from the file, including
        ``scope``, before scope defaults are applied.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError("Configuration file not found", file_path=str(path))

        try:
            with path.open("r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Invalid YAML",
                file_path=str(path),
                internal_details=str(e),
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Expected a mapping at the top level", file_path=str(path))

        data.update({key: value for key, value in overrides.items() if value is not None})
        scope = data.pop("scope", Scope.MAIN)
        try:
            return cls.for_scope(scope, base_dir=path.parent, **data)
        except (PydanticValidationError, ValueError, TypeError) as e:
            raise ConfigurationError(
                "Invalid configuration",
                file_path=str(path),
                internal_details=str(e),
            ) from e
