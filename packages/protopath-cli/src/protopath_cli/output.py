"""Rich console output utilities for protopath-cli.

Colored success/error/warning lines, JSON output and the protopath
listing printed by ``protopath compile``. Respects the NO_COLOR
environment variable and the ``--no-color`` flag.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console with the requested color settings.

    Args:
        no_color: If True, disable colored output. NO_COLOR is honored too.

    Returns:
        Configured Console instance.
    """
    disabled = no_color or _force_no_color
    return Console(force_terminal=False if disabled else None, no_color=disabled)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with a green checkmark."""
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with a red X."""
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with a yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def print_json(data: dict[str, Any] | list[Any], **kwargs: Any) -> None:
    """Print JSON data with syntax highlighting."""
    console.print_json(json.dumps(data), **kwargs)


def print_paths(paths: Iterable[Path], relative_to: Path | None = None) -> None:
    """Print one path per line, relative to ``relative_to`` where possible.

    Markup and highlighting are disabled so paths are printed verbatim.
    """
    for path in paths:
        shown = path
        if relative_to is not None and path.is_relative_to(relative_to):
            shown = path.relative_to(relative_to)
        console.print(str(shown), markup=False, highlight=False, soft_wrap=True)


def print_protopath(protopath: Iterable[Path]) -> None:
    """Print the protopath in search order as a numbered table."""
    table = Table(title="protopath", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Directory", overflow="fold")
    for position, element in enumerate(protopath, start=1):
        table.add_row(str(position), str(element))
    console.print(table)


def set_no_color(no_color: bool) -> None:
    """Replace the module-level console to enable/disable colors."""
    global console
    console = create_console(no_color=no_color)
