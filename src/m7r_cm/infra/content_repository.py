"""File-system implementation of :class:`~m7r_cm.core.protocols.ContentRepository`.

Layout below the content root::

    <content-root>/
    └── <program>/
        ├── mdp/            content units (``*.mdp``)
        ├── media/          media resources (any file, nested allowed)
        ├── media-pruned/   orphaned media moved aside by ``media prune``
        └── build/          output written by ``build``

A directory counts as a program only when it contains ``mdp/``.  A media
resource is referenced when its file name occurs in the text of any
content unit of the same program.

Every ``OSError`` is caught here and re-raised as
:class:`~m7r_cm.exceptions.ContentRepositoryError`.
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Sequence
from pathlib import Path

from m7r_cm.core.models import ContentUnit, MediaResource, Program
from m7r_cm.core.protocols import BuildHandler
from m7r_cm.exceptions import (
    BuildError,
    ContentRepositoryError,
    UnknownContentIdError,
    UnknownProgramError,
)
from m7r_cm.utils.constants import (
    BUILD_DIR,
    BUILD_SUFFIX,
    CONTENT_ID_SEPARATOR,
    MDP_DIR,
    MDP_SUFFIX,
    MEDIA_DIR,
    MEDIA_PRUNED_DIR,
)

logger = logging.getLogger(__name__)


def _is_plain_name(name: str) -> bool:
    """True for a single path component below the content root."""
    return name not in ("", ".", "..") and Path(name).name == name


def _mentions(text: str, file_name: str) -> bool:
    pattern = rf"(?<![\w.\-]){re.escape(file_name)}(?![\w\-])"
    return re.search(pattern, text) is not None


class FileSystemContentRepository:
    """Content repository rooted at *content_root*.

    This class satisfies the :class:`~m7r_cm.core.protocols.ContentRepository`
    protocol structurally — no explicit inheritance required.
    """

    def __init__(self, content_root: Path) -> None:
        self._root: Path = content_root

    @property
    def content_root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def programs(self, names: Sequence[str] = ()) -> list[Program]:
        """Return the named programs, or every program when *names* is empty.

        Raises
        ------
        UnknownProgramError
            When a named program does not exist below the content root.
        """
        if not names:
            try:
                candidates = sorted(self._root.iterdir())
            except OSError as exc:
                raise ContentRepositoryError(
                    f"Cannot read content root {self._root}: {exc}",
                ) from exc
            return [
                Program(name=path.name, path=path)
                for path in candidates
                if self._is_program_dir(path)
            ]

        programs: list[Program] = []
        for name in dict.fromkeys(names):
            path = self._root / name
            if not _is_plain_name(name) or not self._is_program_dir(path):
                raise UnknownProgramError(
                    f"Program not found: {name}",
                    hint=f"Expected a directory with '{MDP_DIR}/' below {self._root}.",
                )
            programs.append(Program(name=name, path=path))
        return programs

    @staticmethod
    def _is_program_dir(path: Path) -> bool:
        return not path.name.startswith(".") and (path / MDP_DIR).is_dir()

    def content_units(self, program: Program) -> list[ContentUnit]:
        mdp_dir = program.path / MDP_DIR
        return [
            ContentUnit(program=program.name, name=path.stem, path=path)
            for path in sorted(mdp_dir.glob(f"*{MDP_SUFFIX}"))
            if path.is_file()
        ]

    def resolve_content_id(self, content_id: str) -> ContentUnit:
        """Resolve ``<program>_<unit>`` to its content unit.

        Raises
        ------
        UnknownContentIdError
            When the id is malformed or names no existing unit.
        """
        program_name, separator, unit_name = content_id.partition(CONTENT_ID_SEPARATOR)
        if not separator or not program_name or not unit_name:
            raise UnknownContentIdError(
                f"Unknown content id: {content_id}",
                hint=f"Content ids have the form <program>{CONTENT_ID_SEPARATOR}<unit>.",
            )
        program_path = self._root / program_name
        unit_path = program_path / MDP_DIR / f"{unit_name}{MDP_SUFFIX}"
        if (
            not _is_plain_name(program_name)
            or not _is_plain_name(unit_name)
            or not self._is_program_dir(program_path)
            or not unit_path.is_file()
        ):
            raise UnknownContentIdError(f"Unknown content id: {content_id}")
        return ContentUnit(program=program_name, name=unit_name, path=unit_path)

    def media_resources(self, program: Program) -> list[MediaResource]:
        media_dir = program.path / MEDIA_DIR
        if not media_dir.is_dir():
            return []
        return [
            MediaResource(program=program.name, path=path)
            for path in sorted(media_dir.rglob("*"))
            if path.is_file()
        ]

    def orphaned_media(self, program: Program) -> list[MediaResource]:
        """Return media resources whose file name no content unit mentions.

        The file name must stand on its own: ``go.png`` is not referenced by
        a text that only mentions ``logo.png``.
        """
        texts = [self._read_text(unit.path) for unit in self.content_units(program)]
        return [
            resource
            for resource in self.media_resources(program)
            if not any(_mentions(text, resource.file_name) for text in texts)
        ]

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ContentRepositoryError(f"Cannot read {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def build(self, program: Program, handler: BuildHandler) -> list[Path]:
        """Recreate the build directory and compile every content unit.

        Raises
        ------
        BuildError
            When the handler fails on a unit.
        """
        build_dir = program.path / BUILD_DIR
        written: list[Path] = []
        try:
            if build_dir.exists():
                shutil.rmtree(build_dir)
            build_dir.mkdir()
            for unit in self.content_units(program):
                logger.debug("Compiling %s", unit.path)
                try:
                    lines = handler.compile(unit)
                except BuildError:
                    raise
                except Exception as exc:
                    raise BuildError(unit.content_id, exc) from exc
                target = build_dir / f"{unit.name}{BUILD_SUFFIX}"
                target.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
                written.append(target)
        except OSError as exc:
            raise ContentRepositoryError(
                f"Cannot write build output of {program.name}: {exc}",
            ) from exc
        return written

    def clean(self, program: Program) -> bool:
        build_dir = program.path / BUILD_DIR
        if not build_dir.exists():
            return False
        try:
            shutil.rmtree(build_dir)
        except OSError as exc:
            raise ContentRepositoryError(f"Cannot remove {build_dir}: {exc}") from exc
        return True

    def prune_media(self, program: Program) -> list[Path]:
        """Move orphaned media below ``media-pruned/``, keeping relative paths.

        Raises
        ------
        ContentRepositoryError
            When a target already exists or a move fails.
        """
        media_dir = program.path / MEDIA_DIR
        pruned_dir = program.path / MEDIA_PRUNED_DIR
        moved: list[Path] = []
        for resource in self.orphaned_media(program):
            target = pruned_dir / resource.path.relative_to(media_dir)
            if target.exists():
                raise ContentRepositoryError(
                    f"Cannot prune {resource.path}: {target} already exists.",
                )
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(resource.path), str(target))
            except OSError as exc:
                raise ContentRepositoryError(
                    f"Cannot move {resource.path} to {target}: {exc}",
                ) from exc
            logger.debug("Pruned %s", resource.path)
            moved.append(target)
        return moved
