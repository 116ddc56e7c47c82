"""protopath compile command - stage dependency protos and run protoc."""

from __future__ import annotations

from pathlib import Path

import click

from protopath_cli.options import build_config, config_options
from protopath_cli.output import info, print_json, print_protopath, success, warning


@click.command("compile")
@config_options
@click.option(
    "-o",
    "--output",
    "output_directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory [default: target/generated-sources/protoc]",
)
@click.option(
    "--staging-dir",
    "staging_directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Staging directory for dependency protos, cleaned on every run",
)
@click.option(
    "--protoc",
    "protoc_executable",
    default=None,
    help="protoc executable [default: protoc from PATH]",
)
@click.option(
    "-I",
    "--proto-path",
    "proto_paths",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Extra protopath directory, repeatable",
)
@click.option(
    "-d",
    "--dependency",
    "dependencies",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Dependency archive or directory, repeatable",
)
@click.option(
    "--dependency-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Folder whose archives and subdirectories are all dependencies",
)
@click.option(
    "--local-repository",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Local artifact cache root [default: ~/.m2/repository]",
)
@click.option(
    "--language",
    default=None,
    help="protoc generator, used as --<language>_out [default: python]",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
def compile_cmd(
    config_file: Path | None,
    scope: str | None,
    source_root: Path | None,
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    output_directory: Path | None,
    staging_directory: Path | None,
    protoc_executable: str | None,
    proto_paths: tuple[Path, ...],
    dependencies: tuple[Path, ...],
    dependency_dir: Path | None,
    local_repository: Path | None,
    language: str | None,
    as_json: bool,
) -> None:
    """Compile proto files with protoc.

    Proto files in dependency archives are extracted to the staging
    directory first, one subdirectory per archive, and put on the
    protopath after the source root.

    Examples:

        protopath compile

        protopath compile --scope test -d lib/common-protos.jar

        protopath compile -I third_party --language java -o build/gen
    """
    from protopath_cli.errors import handle_protopath_error
    from protopath_core.dependencies import (
        ChainedDependencies,
        DependencyResolver,
        DirectoryDependencies,
        StaticDependencies,
    )
    from protopath_core.errors import ProtopathError
    from protopath_core.outputs import GeneratedSourcesRegistry
    from protopath_core.runner import ProtocRunner

    try:
        config = build_config(
            config_file,
            scope,
            source_root,
            includes,
            excludes,
            output_directory=output_directory,
            temporary_proto_file_directory=staging_directory,
            protoc_executable=protoc_executable,
            additional_protopath_elements=proto_paths,
            local_repository=local_repository,
            language=language,
        )

        resolver: DependencyResolver = StaticDependencies(
            [*config.dependencies, *(Path.cwd() / d for d in dependencies)]
        )
        if dependency_dir is not None:
            resolver = ChainedDependencies(
                resolver, DirectoryDependencies(Path.cwd() / dependency_dir)
            )

        registry = GeneratedSourcesRegistry()
        result = ProtocRunner(config, resolver, registry).run()
    except ProtopathError as e:
        handle_protopath_error(e)

    if as_json:
        print_json(result.model_dump(mode="json"))
        return

    if result.skipped:
        warning(f"{result.skipped_reason}; nothing compiled")
        return

    print_protopath(result.protopath)
    if result.compile_result is not None and result.compile_result.stdout.strip():
        info(result.compile_result.stdout.rstrip(), markup=False, highlight=False)
    for output in registry.source_roots(config.scope):
        success(f"Compiled {len(result.proto_files)} proto file(s) to {output}")
