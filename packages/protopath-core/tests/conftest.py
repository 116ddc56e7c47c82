"""Shared pytest fixtures for protopath-core tests.

Provides structlog capture, dependency archive builders and a fake protoc
executable for exercising the compiler invocation without a real protoc.
"""

from __future__ import annotations

import stat
import sys
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

FAKE_PROTOC_ARGS = "protoc-args.txt"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout so capsys can capture it."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    """Return an empty local artifact repository directory."""
    repo = tmp_path / "repository"
    repo.mkdir()
    return repo


@pytest.fixture
def make_archive() -> Callable[[Path, dict[str, str]], Path]:
    """Factory fixture writing a zip archive with the given entries.

    Returns:
        Function taking the archive path and a mapping of entry name to text.
    """

    def _make(path: Path, entries: dict[str, str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return path

    return _make


@pytest.fixture
def make_proto_tree(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture creating a source tree of proto files.

    Returns:
        Function taking relative file names and returning the tree root.
    """

    def _make(*names: str, root: str = "src") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for name in names:
            file_path = base / name
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text('syntax = "proto3";\n')
        return base

    return _make


@pytest.fixture
def fake_protoc(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing a shell script that stands in for protoc.

    The script records its arguments, one per line, in ``protoc-args.txt``
    next to itself, prints ``stdout`` and ``stderr`` and exits with
    ``exit_code``.
    """

    def _make(exit_code: int = 0, stdout: str = "", stderr: str = "") -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / "protoc"
        script.write_text(
            "#!/bin/sh\n"
            f'printf \'%s\\n\' "$@" > "$(dirname "$0")/{FAKE_PROTOC_ARGS}"\n'
            f"printf '%s' '{stdout}'\n"
            f"printf '%s' '{stderr}' >&2\n"
            f"exit {exit_code}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def recorded_args() -> Callable[[Path], list[str]]:
    """Return a function reading the arguments the fake protoc was last called with."""

    def _read(protoc: Path) -> list[str]:
        return (protoc.parent / FAKE_PROTOC_ARGS).read_text().splitlines()

    return _read
