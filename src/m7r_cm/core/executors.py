"""Command executors — one per command path.

Each executor obtains a :class:`~m7r_cm.core.protocols.ContentRepository`
for the context's content root, performs its operation and returns an
:class:`~m7r_cm.core.models.ExecutionResult`.

Guarantees
----------
* No console output — results are returned, the CLI layer renders them.
* Only :class:`~m7r_cm.exceptions.CommandExecutorError` escapes.  Its
  ``__cause__`` is a :class:`~m7r_cm.exceptions.ConsistencyError` when the
  user can fix the problem.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from m7r_cm.core.models import (
    ExecutionContext,
    ExecutionResult,
    MediaResource,
    ParsedCall,
    Program,
)
from m7r_cm.core.protocols import BuildHandler, ContentRepository
from m7r_cm.exceptions import (
    CommandExecutorError,
    ConsistencyError,
    ContentManagerCliError,
)
from m7r_cm.utils.constants import OPTION_MEDIA_ABSOLUTE, OPTION_MEDIA_ORPHANED

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[Path], ContentRepository]


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise anything an operation provokes as :class:`CommandExecutorError`."""
    try:
        yield
    except CommandExecutorError:
        raise
    except ConsistencyError as exc:
        raise CommandExecutorError(str(exc), hint=exc.hint) from exc
    except (ContentManagerCliError, OSError) as exc:
        raise CommandExecutorError(
            f"{operation} failed: {exc}",
            hint=getattr(exc, "hint", None),
        ) from exc


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


class _RepositoryExecutor:
    """Shared plumbing for executors operating on named programs."""

    operation: str = "Operation"

    def __init__(self, repository_factory: RepositoryFactory) -> None:
        self._repository_factory: RepositoryFactory = repository_factory

    def execute(self, call: ParsedCall, context: ExecutionContext) -> ExecutionResult:
        with _translate_errors(self.operation):
            repository = self._repository_factory(context.content_root)
            programs = repository.programs(call.parameters)
            logger.debug(
                "%s on %s",
                self.operation,
                ", ".join(program.name for program in programs) or "no programs",
            )
            return self._run(repository, programs, call, context)

    def _run(
        self,
        repository: ContentRepository,
        programs: list[Program],
        call: ParsedCall,
        context: ExecutionContext,
    ) -> ExecutionResult:
        raise NotImplementedError  # pragma: no cover


# ---------------------------------------------------------------------------
# build / clean
# ---------------------------------------------------------------------------

class BuildExecutor(_RepositoryExecutor):
    """``build [program...]`` — compile named or all programs."""

    operation = "Build"

    def __init__(
        self,
        repository_factory: RepositoryFactory,
        build_handler: BuildHandler,
    ) -> None:
        super().__init__(repository_factory)
        self._build_handler: BuildHandler = build_handler

    def _run(
        self,
        repository: ContentRepository,
        programs: list[Program],
        call: ParsedCall,
        context: ExecutionContext,
    ) -> ExecutionResult:
        lines: list[str] = []
        unit_count = 0
        for program in programs:
            written = repository.build(program, self._build_handler)
            unit_count += len(written)
            lines.append(f"Built {program.name}: {_plural(len(written), 'content unit')}")
            if context.verbose:
                lines.extend(f"  {path}" for path in written)
        return ExecutionResult(
            lines=tuple(lines),
            summary=(
                f"Build finished: {_plural(len(programs), 'program')}, "
                f"{_plural(unit_count, 'content unit')}."
            ),
        )


class CleanExecutor(_RepositoryExecutor):
    """``clean [program...]`` — remove build output."""

    operation = "Clean"

    def _run(
        self,
        repository: ContentRepository,
        programs: list[Program],
        call: ParsedCall,
        context: ExecutionContext,
    ) -> ExecutionResult:
        lines = [
            f"Cleaned {program.name}"
            if repository.clean(program)
            else f"Nothing to clean in {program.name}"
            for program in programs
        ]
        return ExecutionResult(
            lines=tuple(lines),
            summary=f"Clean finished: {_plural(len(programs), 'program')}.",
        )


# ---------------------------------------------------------------------------
# show structure
# ---------------------------------------------------------------------------

def _tree(label: str, children: list[str]) -> list[str]:
    lines = [label]
    for index, child in enumerate(children):
        branch = "└── " if index == len(children) - 1 else "├── "
        lines.append(f"{branch}{child}")
    return lines


class ShowStructureExecutor(_RepositoryExecutor):
    """``show structure [program...]`` — list content units and media."""

    operation = "Show structure"

    def _run(
        self,
        repository: ContentRepository,
        programs: list[Program],
        call: ParsedCall,
        context: ExecutionContext,
    ) -> ExecutionResult:
        lines: list[str] = []
        for program in programs:
            units = [
                f"{unit.path.relative_to(program.path).as_posix()}  [{unit.content_id}]"
                for unit in repository.content_units(program)
            ]
            media = [
                resource.path.relative_to(program.path).as_posix()
                for resource in repository.media_resources(program)
            ]
            lines.extend(_tree(program.name, units + media))
        return ExecutionResult(
            lines=tuple(lines),
            summary=f"{_plural(len(programs), 'program')} shown.",
        )


# ---------------------------------------------------------------------------
# media ls / media prune
# ---------------------------------------------------------------------------

def _display_path(path: Path, context: ExecutionContext, absolute: bool) -> str:
    if absolute:
        return str(path)
    return path.relative_to(context.content_root).as_posix()


class MediaListExecutor(_RepositoryExecutor):
    """``media ls [program...]`` — list referenced or orphaned media."""

    operation = "Media listing"

    def _run(
        self,
        repository: ContentRepository,
        programs: list[Program],
        call: ParsedCall,
        context: ExecutionContext,
    ) -> ExecutionResult:
        absolute = call.specific_options.has_option(OPTION_MEDIA_ABSOLUTE)
        orphaned_only = call.specific_options.has_option(OPTION_MEDIA_ORPHANED)

        selected: list[MediaResource] = []
        for program in programs:
            orphaned = repository.orphaned_media(program)
            if orphaned_only:
                selected.extend(orphaned)
            else:
                orphaned_paths = {resource.path for resource in orphaned}
                selected.extend(
                    resource
                    for resource in repository.media_resources(program)
                    if resource.path not in orphaned_paths
                )

        lines = sorted(_display_path(resource.path, context, absolute) for resource in selected)
        kind = "orphaned" if orphaned_only else "referenced"
        return ExecutionResult(
            lines=tuple(lines),
            summary=f"{_plural(len(lines), f'{kind} media resource')}.",
        )


class MediaPruneExecutor(_RepositoryExecutor):
    """``media prune [program...]`` — move orphaned media aside."""

    operation = "Media pruning"

    def _run(
        self,
        repository: ContentRepository,
        programs: list[Program],
        call: ParsedCall,
        context: ExecutionContext,
    ) -> ExecutionResult:
        moved: list[Path] = []
        for program in programs:
            moved.extend(repository.prune_media(program))
        lines = [f"Moved to {_display_path(path, context, False)}" for path in moved]
        return ExecutionResult(
            lines=tuple(lines),
            summary=f"Pruned {_plural(len(moved), 'media resource')}.",
        )


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

class CheckExecutor:
    """``check <content-id>`` — compile one unit without touching the repo."""

    def __init__(
        self,
        repository_factory: RepositoryFactory,
        build_handler: BuildHandler,
    ) -> None:
        self._repository_factory: RepositoryFactory = repository_factory
        self._build_handler: BuildHandler = build_handler

    def execute(self, call: ParsedCall, context: ExecutionContext) -> ExecutionResult:
        content_id = call.parameters[0]
        with _translate_errors("Check"):
            repository = self._repository_factory(context.content_root)
            unit = repository.resolve_content_id(content_id)
            compiled = self._build_handler.compile(unit)

        lines: list[str] = []
        if context.verbose:
            lines.append(f"Processing: {unit.path}")
            lines.extend(compiled)
        return ExecutionResult(
            lines=tuple(lines),
            summary=f"Check passed: {unit.content_id}",
        )
