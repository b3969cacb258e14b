"""Core / service layer — call models, protocols and command executors.

Rules
-----
* No console output.
* No direct filesystem access — repositories are injected.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

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
    ExecutionResult,
    MediaResource,
    OptionParserResult,
    ParsedCall,
    Program,
)
from m7r_cm.core.protocols import BuildHandler, CommandExecutor, ContentRepository

__all__: list[str] = [
    "BuildExecutor",
    "BuildHandler",
    "CheckExecutor",
    "CleanExecutor",
    "CommandExecutor",
    "ContentRepository",
    "ContentUnit",
    "ExecutionContext",
    "ExecutionResult",
    "MediaListExecutor",
    "MediaPruneExecutor",
    "MediaResource",
    "OptionParserResult",
    "ParsedCall",
    "Program",
    "ShowStructureExecutor",
]
