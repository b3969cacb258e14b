"""m7r-cm — mentalizr content manager command-line interface.

Routes ``build``, ``clean``, ``check``, ``show`` and ``media`` commands
to executors operating on a content repository.
"""

from m7r_cm.version import __version__

__all__: list[str] = ["__version__"]
