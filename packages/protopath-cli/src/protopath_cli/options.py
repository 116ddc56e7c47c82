"""Options shared by protopath commands and their translation into a ProtocConfig."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import click

if TYPE_CHECKING:
    from protopath_core.config import ProtocConfig

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_CONFIG_FILE = "protopath.yaml"


def config_options(func: F) -> F:
    """Add the options that select and locate proto sources."""
    options = [
        click.option(
            "-c",
            "--config",
            "config_file",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help=f"YAML configuration [default: ./{DEFAULT_CONFIG_FILE} if present]",
        ),
        click.option(
            "--scope",
            type=click.Choice(["main", "test"]),
            default=None,
            help="Compile main or test protos [default: main]",
        ),
        click.option(
            "-s",
            "--source-root",
            type=click.Path(path_type=Path),
            default=None,
            help="Proto source root [default: src/<scope>/proto]",
        ),
        click.option(
            "--include",
            "includes",
            multiple=True,
            help="Include pattern, repeatable [default: **/*.proto]",
        ),
        click.option(
            "--exclude",
            "excludes",
            multiple=True,
            help="Exclude pattern, repeatable",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _absolute(path: Path | None) -> Path | None:
    return None if path is None else Path.cwd() / path


def build_config(
    config_file: Path | None,
    scope: str | None,
    source_root: Path | None,
    includes: tuple[str, ...] = (),
    excludes: tuple[str, ...] = (),
    **overrides: Any,
) -> ProtocConfig:
    """Build a ProtocConfig from a YAML file and command-line overrides.

    Without ``--config``, ``./protopath.yaml`` is used when it exists;
    otherwise scope defaults relative to the working directory apply.
    Command-line paths are relative to the working directory.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    from protopath_core.config import ProtocConfig

    values: dict[str, Any] = {
        "scope": scope,
        "proto_source_root": _absolute(source_root),
        "includes": includes or None,
        "excludes": excludes or None,
    }
    for key, value in overrides.items():
        if isinstance(value, Path):
            value = _absolute(value)
        elif isinstance(value, tuple):
            value = tuple(_absolute(v) if isinstance(v, Path) else v for v in value) or None
        values[key] = value

    if config_file is None and Path(DEFAULT_CONFIG_FILE).is_file():
        config_file = Path(DEFAULT_CONFIG_FILE)

    if config_file is not None:
        return ProtocConfig.from_yaml(Path.cwd() / config_file, **values)

    try:
        return ProtocConfig.for_scope(values.pop("scope") or "main", base_dir=Path.cwd(), **values)
    except ValueError as e:
        from protopath_core.errors import ConfigurationError

        raise ConfigurationError("Invalid options", internal_details=str(e)) from e
