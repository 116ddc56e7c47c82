"""CLI entry point for protopath.

Commands are registered lazily so ``protopath --help`` does not import the
core package and its dependencies.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from protopath_cli import __version__
from protopath_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LazyGroup(rclick.RichGroup):
    """Click group that imports a command only when it is looked up.

    Attributes:
        lazy_subcommands: Mapping of command name to ``module.attribute``.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "compile": "protopath_cli.commands.compile.compile_cmd",
    "locate": "protopath_cli.commands.locate.locate",
}


def _configure_logging(ctx: click.Context, param: click.Parameter, value: str) -> str:
    from protopath_core.observability import configure_logging

    configure_logging(log_level=value, json_format=ctx.params.get("log_json", False))
    return value


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="protopath")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    is_eager=True,
    help="Emit log events as JSON.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Minimum level of log events written to stderr.",
    callback=_configure_logging,
)
def cli(log_json: bool, log_level: str) -> None:
    """protopath - compile proto files with dependency protos on the protopath.

    Proto files bundled in dependency archives are extracted to a staging
    directory and added to protoc's search path next to your own sources.

    **Getting Started:**

    - `protopath locate` - List the proto files that would be compiled
    - `protopath compile` - Stage dependencies and run protoc
    - `protopath compile --scope test` - Compile test protos
    """


if __name__ == "__main__":
    cli()
