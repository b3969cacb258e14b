"""Execution-context derivation from a parsed call.

The only place that validates the ``--content-root`` option against the
file system.
"""

from __future__ import annotations

from pathlib import Path

from m7r_cm.core.models import ExecutionContext, ParsedCall
from m7r_cm.exceptions import PathConsistencyError
from m7r_cm.utils.constants import OPTION_CONTENT_ROOT, OPTION_STACKTRACE, OPTION_VERBOSE


def _user_defined_content_root(value: str) -> Path:
    """Resolve *value* to an absolute path and require an existing directory."""
    path = Path(value).absolute()
    if not path.exists():
        raise PathConsistencyError(
            f"Content root not found: {path}",
            hint="Pass an existing directory with -p/--content-root.",
        )
    if not path.is_dir():
        raise PathConsistencyError(f"Content root is not a directory: {path}")
    return path


def build_execution_context(call: ParsedCall, cwd: Path | None = None) -> ExecutionContext:
    """Build the immutable context for *call*.

    Without ``--content-root`` the content root is *cwd* (default: the
    process working directory), taken as is.

    Raises
    ------
    PathConsistencyError
        When the user-supplied content root is missing or not a directory.
    """
    options = call.global_options
    content_root_value = options.get_value(OPTION_CONTENT_ROOT)
    if options.has_option(OPTION_CONTENT_ROOT) and content_root_value is not None:
        content_root = _user_defined_content_root(content_root_value)
    else:
        content_root = (cwd if cwd is not None else Path.cwd()).absolute()

    return ExecutionContext(
        content_root=content_root,
        verbose=options.has_option(OPTION_VERBOSE),
        stacktrace=options.has_option(OPTION_STACKTRACE),
    )
