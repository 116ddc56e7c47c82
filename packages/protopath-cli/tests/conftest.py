"""Shared test fixtures for protopath-cli tests.

Provides CliRunner fixtures, a project directory with proto sources,
dependency archive builders and a fake protoc executable.
"""

from __future__ import annotations

import stat
import sys
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

PROTO_CONTENT = 'syntax = "proto3";\n'


@pytest.fixture(autouse=True)
def quiet_structlog() -> Generator[None, None, None]:
    """Send log events to stderr and keep the CLI from reconfiguring logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    with patch("protopath_core.observability.configure_logging"):
        yield


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def project(cli_runner: CliRunner, tmp_path: Path) -> Generator[Path, None, None]:
    """Run inside an isolated project directory with main proto sources.

    Yields:
        The project directory, which is also the working directory.
    """
    with cli_runner.isolated_filesystem(temp_dir=tmp_path) as directory:
        root = Path(directory)
        for name in ("src/main/proto/acme/order.proto", "src/main/proto/acme/item.proto"):
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(PROTO_CONTENT)
        yield root


@pytest.fixture
def make_archive() -> Callable[[Path, dict[str, str]], Path]:
    """Factory fixture writing a zip archive with the given entries."""

    def _make(path: Path, entries: dict[str, str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return path

    return _make


@pytest.fixture
def fake_protoc(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing a shell script standing in for protoc.

    The script records its arguments in ``protoc-args.txt`` next to itself.
    """

    def _make(exit_code: int = 0, stdout: str = "", stderr: str = "") -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / "protoc"
        script.write_text(
            "#!/bin/sh\n"
            'printf \'%s\\n\' "$@" > "$(dirname "$0")/protoc-args.txt"\n'
            f"printf '%s' '{stdout}'\n"
            f"printf '%s' '{stderr}' >&2\n"
            f"exit {exit_code}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make
