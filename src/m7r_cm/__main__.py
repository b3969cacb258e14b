"""Allow ``python -m m7r_cm`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m m7r_cm`` behaves identically to the ``m7r-cm``
console script.
"""

from __future__ import annotations

from m7r_cm.cli.app import cli

if __name__ == "__main__":
    cli()
