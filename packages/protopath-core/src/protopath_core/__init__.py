"""protopath-core: protoc orchestration with dependency archive staging.

This package provides:
- find_proto_files_in_directory: Locate proto files under include/exclude patterns
- ArchiveExtractor: Stage proto files from dependency archives
- ProtocBuilder / run_protoc: Build and run protoc command lines
- ProtocRunner: Drive a whole compilation from a ProtocConfig
"""

from __future__ import annotations

__version__ = "0.1.0"

from protopath_core.config import ProtocConfig, Scope
from protopath_core.dependencies import (
    ChainedDependencies,
    DependencyResolver,
    DirectoryDependencies,
    StaticDependencies,
)
from protopath_core.errors import (
    CompilationError,
    ConfigurationError,
    InvalidInputError,
    ProtopathError,
    ProtopathIOError,
)
from protopath_core.extractor import ArchiveExtractor
from protopath_core.locator import (
    DEFAULT_INCLUDES,
    PROTO_FILE_SUFFIX,
    find_proto_files_in_directories,
    find_proto_files_in_directory,
)
from protopath_core.observability import configure_logging
from protopath_core.outputs import GeneratedSourcesRegistry, OutputRegistrar, Registration
from protopath_core.paths import truncate_path
from protopath_core.protoc import (
    CompileRequest,
    CompileResult,
    ProtocBuilder,
    build_request,
    run_protoc,
)
from protopath_core.runner import ProtocRunner, RunResult, RunState

__all__ = [
    "__version__",
    # Configuration
    "ProtocConfig",
    "Scope",
    # Dependencies
    "DependencyResolver",
    "StaticDependencies",
    "DirectoryDependencies",
    "ChainedDependencies",
    # Errors
    "ProtopathError",
    "ConfigurationError",
    "InvalidInputError",
    "ProtopathIOError",
    "CompilationError",
    # Locating and staging
    "PROTO_FILE_SUFFIX",
    "DEFAULT_INCLUDES",
    "find_proto_files_in_directory",
    "find_proto_files_in_directories",
    "truncate_path",
    "ArchiveExtractor",
    # protoc
    "CompileRequest",
    "CompileResult",
    "ProtocBuilder",
    "build_request",
    "run_protoc",
    # Orchestration
    "ProtocRunner",
    "RunResult",
    "RunState",
    "OutputRegistrar",
    "GeneratedSourcesRegistry",
    "Registration",
    "configure_logging",
]
