"""Protocols (interfaces) consumed by the core layer.

These define the contracts that command executors and infrastructure
adapters must satisfy.  Core code depends ONLY on these protocols —
never on concrete implementations — preserving the dependency inversion
principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from m7r_cm.core.models import (
    ContentUnit,
    ExecutionContext,
    ExecutionResult,
    MediaResource,
    ParsedCall,
    Program,
)


class CommandExecutor(Protocol):
    """Contract for the handler bound to a command path."""

    def execute(self, call: ParsedCall, context: ExecutionContext) -> ExecutionResult:
        """Run the command and return its human-readable result.

        Executors must not write to the console.  Failures are reported
        by raising :class:`~m7r_cm.exceptions.CommandExecutorError`,
        chained from the underlying cause where there is one.
        """
        ...  # pragma: no cover


class BuildHandler(Protocol):
    """Contract for compiling a single content unit."""

    def compile(self, unit: ContentUnit) -> list[str]:
        """Return the compiled output lines of *unit*.

        Raises
        ------
        BuildError
            When the unit cannot be compiled.
        """
        ...  # pragma: no cover


class ContentRepository(Protocol):
    """Contract for the content repository below a content root."""

    def programs(self, names: Sequence[str] = ()) -> list[Program]:
        """Return the named programs, or all programs when *names* is empty.

        Raises
        ------
        UnknownProgramError
            When a named program does not exist.
        """
        ...  # pragma: no cover

    def content_units(self, program: Program) -> list[ContentUnit]:
        ...  # pragma: no cover

    def resolve_content_id(self, content_id: str) -> ContentUnit:
        """Raises :class:`~m7r_cm.exceptions.UnknownContentIdError`."""
        ...  # pragma: no cover

    def media_resources(self, program: Program) -> list[MediaResource]:
        ...  # pragma: no cover

    def orphaned_media(self, program: Program) -> list[MediaResource]:
        ...  # pragma: no cover

    def build(self, program: Program, handler: BuildHandler) -> list[Path]:
        """Compile every unit of *program*; return the written files."""
        ...  # pragma: no cover

    def clean(self, program: Program) -> bool:
        """Remove build output; return whether anything was removed."""
        ...  # pragma: no cover

    def prune_media(self, program: Program) -> list[Path]:
        """Move orphaned media aside; return their new locations."""
        ...  # pragma: no cover
