"""Shared pytest fixtures and configuration for the m7r-cm test suite.

Guidelines
----------
* Every content repository lives below ``tmp_path``.
* Tests never depend on the caller's working directory.
* CLI runs capture output in ``StringIO`` streams, not the real console.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from m7r_cm.cli.app import build_registry, main
from m7r_cm.cli.commands import CommandRegistry


def write_file(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Two programs; ``docA`` has two orphaned media files, ``docB`` none."""
    root = tmp_path / "content"
    write_file(root / "docA" / "mdp" / "intro.mdp", "Welcome\n@image logo.png\n")
    write_file(root / "docA" / "mdp" / "outro.mdp", "Goodbye\n")
    write_file(root / "docA" / "media" / "logo.png", "png")
    write_file(root / "docA" / "media" / "unused.png", "png")
    write_file(root / "docA" / "media" / "video" / "old.mp4", "mp4")
    write_file(root / "docB" / "mdp" / "start.mdp", "@video clip.mp4\n")
    write_file(root / "docB" / "media" / "clip.mp4", "mp4")
    (root / "notes").mkdir()
    return root


@pytest.fixture
def registry() -> CommandRegistry:
    return build_registry()


@dataclass(frozen=True)
class CliRun:
    code: int
    out: str
    err: str


RunCli = Callable[..., CliRun]


@pytest.fixture
def run_cli(content_root: Path) -> RunCli:
    """Run ``main`` with *content_root* as working directory and captured streams."""

    def _run(
        *args: str,
        registry: CommandRegistry | None = None,
        cwd: Path | None = None,
    ) -> CliRun:
        out, err = io.StringIO(), io.StringIO()
        code = main(
            list(args),
            registry=registry,
            out=out,
            err=err,
            cwd=cwd if cwd is not None else content_root,
        )
        return CliRun(code=code, out=out.getvalue(), err=err.getvalue())

    return _run
