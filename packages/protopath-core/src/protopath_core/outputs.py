"""Registration of generated output directories.

After a successful compile the runner hands the output directory to an
OutputRegistrar so the surrounding build can pick the generated sources up,
together with the proto source root, which is published as a resource.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from protopath_core.config import Scope


@runtime_checkable
class OutputRegistrar(Protocol):
    """Receives the output of every successful compilation."""

    def register(self, scope: Scope, output_directory: Path, proto_source_root: Path) -> None:
        """Attach ``output_directory`` as generated sources for ``scope``."""
        ...


class Registration(BaseModel):
    """One registered compilation output."""

    model_config = ConfigDict(frozen=True)

    scope: Scope
    output_directory: Path
    proto_source_root: Path


class GeneratedSourcesRegistry:
    """In-memory OutputRegistrar keeping every registration, per scope."""

    def __init__(self) -> None:
        self.registrations: list[Registration] = []

    def register(self, scope: Scope, output_directory: Path, proto_source_root: Path) -> None:
        self.registrations.append(
            Registration(
                scope=scope,
                output_directory=output_directory,
                proto_source_root=proto_source_root,
            )
        )

    def source_roots(self, scope: Scope) -> list[Path]:
        """Generated source directories registered for ``scope``."""
        return [r.output_directory for r in self.registrations if r.scope == scope]

    def resource_roots(self, scope: Scope) -> list[Path]:
        """Proto source roots registered as resources for ``scope``."""
        return [r.proto_source_root for r in self.registrations if r.scope == scope]
