"""Infrastructure layer — file-system content repository and build handler.

Every ``OSError`` must be caught here and re-raised as a
:class:`~m7r_cm.exceptions.ContentManagerCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output.
* Must expose clean, typed interfaces consumed by the core layer.
"""

from m7r_cm.infra.content_repository import FileSystemContentRepository
from m7r_cm.infra.mdp_build_handler import MdpBuildHandler

__all__: list[str] = [
    "FileSystemContentRepository",
    "MdpBuildHandler",
]
