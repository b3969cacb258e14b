"""Build handler for ``.mdp`` content units.

The real mdp compiler is not wired in yet: :meth:`MdpBuildHandler.compile`
emits a marker block naming the source file so the build pipeline can be
exercised end to end.
"""

from __future__ import annotations

from m7r_cm.core.models import ContentUnit
from m7r_cm.exceptions import BuildError


class MdpBuildHandler:
    """Concrete :class:`~m7r_cm.core.protocols.BuildHandler` for mdp files."""

    def compile(self, unit: ContentUnit) -> list[str]:
        """Return the output lines for *unit*.

        Raises
        ------
        BuildError
            When the unit file is missing.
        """
        if not unit.path.is_file():
            raise BuildError(unit.path.absolute().as_posix())
        # TODO: delegate to the mdp compiler once it is available as a package.
        return ["<--", str(unit.path.absolute()), "-->"]
