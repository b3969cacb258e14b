"""Tests for the command executors (core/executors.py).

The content repository is a ``MagicMock`` so every test controls exactly
what the executor sees.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from m7r_cm.core.executors import (
    BuildExecutor,
    CheckExecutor,
    CleanExecutor,
    MediaListExecutor,
    MediaPruneExecutor,
    ShowStructureExecutor,
)
from m7r_cm.core.models import (
    ContentUnit,
    ExecutionContext,
    MediaResource,
    OptionParserResult,
    ParsedCall,
    Program,
)
from m7r_cm.exceptions import (
    BuildError,
    CommandExecutorError,
    ConsistencyError,
    ContentRepositoryError,
    UnknownContentIdError,
    UnknownProgramError,
)

ROOT = Path("/content")


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _call(
    *command: str,
    parameters: tuple[str, ...] = (),
    specific: dict[str, str | None] | None = None,
) -> ParsedCall:
    return ParsedCall(
        command=command,
        global_options=OptionParserResult({}),
        specific_options=OptionParserResult(specific or {}),
        parameters=parameters,
        executable_name="m7r-cm",
    )


def _context(*, verbose: bool = False) -> ExecutionContext:
    return ExecutionContext(content_root=ROOT, verbose=verbose, stacktrace=False)


def _program(name: str) -> Program:
    return Program(name=name, path=ROOT / name)


def _media(program: str, relative: str) -> MediaResource:
    return MediaResource(program=program, path=ROOT / program / "media" / relative)


@pytest.fixture
def repository() -> MagicMock:
    repo = MagicMock()
    repo.programs.return_value = [_program("docA"), _program("docB")]
    return repo


@pytest.fixture
def factory(repository: MagicMock) -> MagicMock:
    return MagicMock(return_value=repository)


# ---------------------------------------------------------------------------
# Shared behaviour
# ---------------------------------------------------------------------------

class TestRepositoryExecutors:
    def test_repository_opened_at_content_root(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.clean.return_value = False
        CleanExecutor(factory).execute(_call("clean", parameters=("docA",)), _context())
        factory.assert_called_once_with(ROOT)
        repository.programs.assert_called_once_with(("docA",))

    def test_unknown_program_is_a_consistency_failure(
        self, factory: MagicMock, repository: MagicMock
    ) -> None:
        repository.programs.side_effect = UnknownProgramError("Program not found: docX", hint="check name")
        with pytest.raises(CommandExecutorError) as exc_info:
            BuildExecutor(factory, MagicMock()).execute(_call("build", parameters=("docX",)), _context())
        assert str(exc_info.value) == "Program not found: docX"
        assert exc_info.value.hint == "check name"
        assert isinstance(exc_info.value.__cause__, ConsistencyError)

    def test_repository_error_is_tagged_with_operation(
        self, factory: MagicMock, repository: MagicMock
    ) -> None:
        repository.clean.side_effect = ContentRepositoryError("Cannot remove build")
        with pytest.raises(CommandExecutorError, match="^Clean failed: Cannot remove build$") as exc_info:
            CleanExecutor(factory).execute(_call("clean"), _context())
        assert not isinstance(exc_info.value.__cause__, ConsistencyError)

    def test_os_error_is_translated(self, factory: MagicMock) -> None:
        factory.side_effect = PermissionError("denied")
        with pytest.raises(CommandExecutorError, match="Media listing failed") as exc_info:
            MediaListExecutor(factory).execute(_call("media", "ls"), _context())
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_unexpected_errors_are_not_translated(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.clean.side_effect = KeyError("bug")
        with pytest.raises(KeyError):
            CleanExecutor(factory).execute(_call("clean"), _context())


# ---------------------------------------------------------------------------
# build / clean
# ---------------------------------------------------------------------------

class TestBuildExecutor:
    def test_builds_each_program_once(self, factory: MagicMock, repository: MagicMock) -> None:
        handler = MagicMock()
        repository.build.side_effect = [
            [ROOT / "docA" / "build" / "intro.html", ROOT / "docA" / "build" / "outro.html"],
            [ROOT / "docB" / "build" / "start.html"],
        ]
        result = BuildExecutor(factory, handler).execute(_call("build"), _context())

        assert repository.build.call_count == 2
        assert repository.build.call_args_list[0].args == (_program("docA"), handler)
        assert result.lines == ("Built docA: 2 content units", "Built docB: 1 content unit")
        assert result.summary == "Build finished: 2 programs, 3 content units."

    def test_verbose_lists_written_files(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.programs.return_value = [_program("docB")]
        written = ROOT / "docB" / "build" / "start.html"
        repository.build.return_value = [written]
        result = BuildExecutor(factory, MagicMock()).execute(_call("build"), _context(verbose=True))
        assert result.lines == ("Built docB: 1 content unit", f"  {written}")

    def test_build_error_is_tagged(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.build.side_effect = BuildError("docA_intro", ValueError("bad"))
        with pytest.raises(CommandExecutorError, match="Build failed: Build failed for docA_intro: bad"):
            BuildExecutor(factory, MagicMock()).execute(_call("build"), _context())


class TestCleanExecutor:
    def test_reports_per_program(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.clean.side_effect = [True, False]
        result = CleanExecutor(factory).execute(_call("clean"), _context())
        assert result.lines == ("Cleaned docA", "Nothing to clean in docB")
        assert result.summary == "Clean finished: 2 programs."


# ---------------------------------------------------------------------------
# show structure
# ---------------------------------------------------------------------------

class TestShowStructureExecutor:
    def test_renders_tree(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.programs.return_value = [_program("docA")]
        repository.content_units.return_value = [
            ContentUnit(program="docA", name="intro", path=ROOT / "docA" / "mdp" / "intro.mdp"),
        ]
        repository.media_resources.return_value = [_media("docA", "logo.png")]

        result = ShowStructureExecutor(factory).execute(_call("show", "structure"), _context())

        assert result.lines == (
            "docA",
            "├── mdp/intro.mdp  [docA_intro]",
            "└── media/logo.png",
        )
        assert result.summary == "1 program shown."

    def test_empty_program(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.programs.return_value = [_program("empty")]
        repository.content_units.return_value = []
        repository.media_resources.return_value = []
        result = ShowStructureExecutor(factory).execute(_call("show", "structure"), _context())
        assert result.lines == ("empty",)


# ---------------------------------------------------------------------------
# media ls / media prune
# ---------------------------------------------------------------------------

class TestMediaListExecutor:
    @pytest.fixture
    def media_repository(self, repository: MagicMock) -> MagicMock:
        repository.programs.return_value = [_program("docA")]
        repository.media_resources.return_value = [
            _media("docA", "logo.png"),
            _media("docA", "unused.png"),
            _media("docA", "video/old.mp4"),
        ]
        repository.orphaned_media.return_value = [
            _media("docA", "unused.png"),
            _media("docA", "video/old.mp4"),
        ]
        return repository

    def test_referenced_by_default(self, factory: MagicMock, media_repository: MagicMock) -> None:
        result = MediaListExecutor(factory).execute(_call("media", "ls"), _context())
        assert result.lines == ("docA/media/logo.png",)
        assert result.summary == "1 referenced media resource."

    def test_orphaned(self, factory: MagicMock, media_repository: MagicMock) -> None:
        call = _call("media", "ls", specific={"orphaned": None})
        result = MediaListExecutor(factory).execute(call, _context())
        assert result.lines == ("docA/media/unused.png", "docA/media/video/old.mp4")
        assert result.summary == "2 orphaned media resources."

    def test_absolute_paths(self, factory: MagicMock, media_repository: MagicMock) -> None:
        call = _call("media", "ls", specific={"absolute": None})
        result = MediaListExecutor(factory).execute(call, _context())
        assert result.lines == (str(ROOT / "docA" / "media" / "logo.png"),)


class TestMediaPruneExecutor:
    def test_lists_moved_files(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.prune_media.side_effect = [
            [ROOT / "docA" / "media-pruned" / "unused.png"],
            [],
        ]
        result = MediaPruneExecutor(factory).execute(_call("media", "prune"), _context())
        assert result.lines == ("Moved to docA/media-pruned/unused.png",)
        assert result.summary == "Pruned 1 media resource."

    def test_nothing_to_prune(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.prune_media.return_value = []
        result = MediaPruneExecutor(factory).execute(_call("media", "prune"), _context())
        assert result.lines == ()
        assert result.summary == "Pruned 0 media resources."


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

class TestCheckExecutor:
    @pytest.fixture
    def unit(self) -> ContentUnit:
        return ContentUnit(program="docA", name="intro", path=ROOT / "docA" / "mdp" / "intro.mdp")

    def test_passes_quietly(self, factory: MagicMock, repository: MagicMock, unit: ContentUnit) -> None:
        repository.resolve_content_id.return_value = unit
        handler = MagicMock()
        handler.compile.return_value = ["<--", "x", "-->"]

        result = CheckExecutor(factory, handler).execute(_call("check", parameters=("docA_intro",)), _context())

        repository.resolve_content_id.assert_called_once_with("docA_intro")
        handler.compile.assert_called_once_with(unit)
        repository.build.assert_not_called()
        assert result.lines == ()
        assert result.summary == "Check passed: docA_intro"

    def test_verbose_shows_compiled_lines(
        self, factory: MagicMock, repository: MagicMock, unit: ContentUnit
    ) -> None:
        repository.resolve_content_id.return_value = unit
        handler = MagicMock()
        handler.compile.return_value = ["<--", "x", "-->"]
        result = CheckExecutor(factory, handler).execute(
            _call("check", parameters=("docA_intro",)), _context(verbose=True),
        )
        assert result.lines == (f"Processing: {unit.path}", "<--", "x", "-->")

    def test_unknown_content_id(self, factory: MagicMock, repository: MagicMock) -> None:
        repository.resolve_content_id.side_effect = UnknownContentIdError("Unknown content id: abc123")
        with pytest.raises(CommandExecutorError) as exc_info:
            CheckExecutor(factory, MagicMock()).execute(_call("check", parameters=("abc123",)), _context())
        assert str(exc_info.value) == "Check failed: Unknown content id: abc123"
        assert not isinstance(exc_info.value.__cause__, ConsistencyError)
