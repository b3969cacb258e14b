"""Domain models for m7r-cm.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  A :class:`ParsedCall` and an
:class:`ExecutionContext` are produced once per invocation and handed
read-only to exactly one executor.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from m7r_cm.utils.constants import CONTENT_ID_SEPARATOR


# ---------------------------------------------------------------------------
# Parsed call
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionParserResult:
    """Options found in one scope, keyed by option identifier.

    Flags map to ``None``; argument-bearing options map to their value.
    """

    values: Mapping[str, str | None] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def has_option(self, identifier: str) -> bool:
        return identifier in self.values

    def get_value(self, identifier: str) -> str | None:
        """Return the option's argument, or ``None`` if absent or a flag."""
        return self.values.get(identifier)


@dataclass(frozen=True, slots=True)
class ParsedCall:
    """A validated invocation: command path, options and positionals."""

    command: tuple[str, ...]
    """Matched command path; empty for the default command."""

    global_options: OptionParserResult
    specific_options: OptionParserResult
    parameters: tuple[str, ...]
    executable_name: str

    @property
    def is_default_command(self) -> bool:
        return not self.command


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """Working context derived once from a :class:`ParsedCall`."""

    content_root: Path
    """Absolute path of the content repository."""

    verbose: bool
    stacktrace: bool


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Human-readable payload returned by a successful executor."""

    lines: tuple[str, ...] = ()
    summary: str | None = None


# ---------------------------------------------------------------------------
# Content repository
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Program:
    """A program directory directly below the content root."""

    name: str
    path: Path


@dataclass(frozen=True, slots=True)
class ContentUnit:
    """A single ``.mdp`` content file of a program."""

    program: str
    name: str
    """File stem, e.g. ``intro`` for ``intro.mdp``."""

    path: Path

    @property
    def content_id(self) -> str:
        return f"{self.program}{CONTENT_ID_SEPARATOR}{self.name}"


@dataclass(frozen=True, slots=True)
class MediaResource:
    """A file below a program's media directory."""

    program: str
    path: Path
    """Absolute path of the media file."""

    @property
    def file_name(self) -> str:
        return self.path.name
