"""Command dispatcher — resolves the executor and runs it once."""

from __future__ import annotations

import logging
from pathlib import Path

from m7r_cm.cli.commands import CommandRegistry
from m7r_cm.cli.context import build_execution_context
from m7r_cm.core.models import ExecutionResult, ParsedCall
from m7r_cm.exceptions import CommandExecutorError, ConsistencyError

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Runs the executor bound to a parsed call's command path.

    No retries and no parallelism: one call, one executor invocation.
    Executor failures propagate unchanged.
    """

    def __init__(self, registry: CommandRegistry, *, cwd: Path | None = None) -> None:
        self._registry: CommandRegistry = registry
        self._cwd: Path | None = cwd

    def dispatch(self, call: ParsedCall) -> ExecutionResult:
        """Build the execution context and invoke the bound executor.

        Raises
        ------
        CommandExecutorError
            From the executor, or chained from a
            :class:`~m7r_cm.exceptions.ConsistencyError` when the context
            cannot be built (the executor is then not invoked).
        """
        command = self._registry.lookup(call.command)
        try:
            context = build_execution_context(call, self._cwd)
        except ConsistencyError as exc:
            raise CommandExecutorError(str(exc), hint=exc.hint) from exc

        logger.debug(
            "Dispatching '%s' with content root %s",
            command.name or "<default>",
            context.content_root,
        )
        return command.executor.execute(call, context)
