"""protopath locate command - list the proto files a compile would use."""

from __future__ import annotations

from pathlib import Path

import click

from protopath_cli.options import build_config, config_options
from protopath_cli.output import print_json, print_paths, warning


@click.command()
@config_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the files as JSON")
def locate(
    config_file: Path | None,
    scope: str | None,
    source_root: Path | None,
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    as_json: bool,
) -> None:
    """List proto files under the source root.

    Applies the same include and exclude patterns as `protopath compile`.
    Paths are printed relative to the source root, sorted.

    Examples:

        protopath locate

        protopath locate --exclude "**/internal/**"
    """
    from protopath_cli.errors import handle_protopath_error
    from protopath_core.errors import ProtopathError
    from protopath_core.locator import find_proto_files_in_directory

    try:
        config = build_config(config_file, scope, source_root, includes, excludes)
        root = config.proto_source_root
        files: list[Path] = []
        if root.exists():
            files = sorted(find_proto_files_in_directory(root, config.includes, config.excludes))
    except ProtopathError as e:
        handle_protopath_error(e)

    resolved = root.resolve()
    if as_json:
        print_json([path.relative_to(resolved).as_posix() for path in files])
        return

    if not root.exists():
        warning(f"{root} does not exist")
    elif not files:
        warning("No proto files to compile")
    print_paths(files, relative_to=resolved)
