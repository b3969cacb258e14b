"""CLI application entry point and command routing for m7r-cm.

This module is the **sole error boundary** for the entire application.
It classifies everything raised while parsing and executing a call,
renders it through the console pipeline and returns the exit code.

Error classes and their rendering
---------------------------------
* :class:`UnrecognizedArgumentError` — three diagnostic lines on stdout.
* :class:`CommandExecutorError` caused by a :class:`ConsistencyError` —
  the plain message.
* Other :class:`CommandExecutorError` — the message tagged with the
  exception name.
* Anything else — reported as an internal error.
* :class:`KeyboardInterrupt` during execution — "Aborted by user." on the
  error stream, exit 130.

With ``--stacktrace`` every failure additionally writes its trace to
the error stream.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from m7r_cm.cli import exit_codes
from m7r_cm.cli.commands import (
    CliDescription,
    CommandDefinition,
    CommandRegistry,
    ParameterArity,
)
from m7r_cm.cli.console import Console, ConsoleConfig, configure_logging
from m7r_cm.cli.dispatcher import CommandDispatcher
from m7r_cm.cli.help import (
    InfoExecutor,
    command_help_lines,
    help_lines,
    man_lines,
    version_lines,
)
from m7r_cm.cli.options import OptionDefinition, Options
from m7r_cm.cli.parser import parse_arguments
from m7r_cm.core.executors import (
    BuildExecutor,
    CheckExecutor,
    CleanExecutor,
    MediaListExecutor,
    MediaPruneExecutor,
    RepositoryFactory,
    ShowStructureExecutor,
)
from m7r_cm.core.models import ParsedCall
from m7r_cm.core.protocols import BuildHandler
from m7r_cm.exceptions import (
    CommandExecutorError,
    ConsistencyError,
    UnrecognizedArgumentError,
)
from m7r_cm.infra.content_repository import FileSystemContentRepository
from m7r_cm.infra.mdp_build_handler import MdpBuildHandler
from m7r_cm.utils.constants import (
    DEFAULT_LOGGER_NAME,
    DESCRIPTION,
    EXECUTABLE_NAME,
    OPTION_CONTENT_ROOT,
    OPTION_HELP,
    OPTION_LOGGER,
    OPTION_LOGGER_NAME,
    OPTION_MAN,
    OPTION_MEDIA_ABSOLUTE,
    OPTION_MEDIA_ORPHANED,
    OPTION_NO_COLOR,
    OPTION_NO_SUMMARY,
    OPTION_SILENT,
    OPTION_STACKTRACE,
    OPTION_VERBOSE,
    OPTION_VERSION,
)
from m7r_cm.version import VERSION_DATE, __version__

ABORTED_MESSAGE: str = "Aborted by user."


# ---------------------------------------------------------------------------
# Command catalog
# ---------------------------------------------------------------------------

def _global_options() -> Options:
    return (
        Options()
        .add(OptionDefinition(OPTION_VERSION, long_name="version", description="Show version and exit."))
        .add(OptionDefinition(OPTION_HELP, short_name="h", long_name="help", description="Show help and exit."))
        .add(OptionDefinition(OPTION_MAN, long_name="man", description="Show the full manual and exit."))
        .add(OptionDefinition(OPTION_VERBOSE, long_name="verbose", description="Verbose output."))
        .add(OptionDefinition(
            OPTION_CONTENT_ROOT,
            short_name="p",
            long_name="content-root",
            argument_name="path",
            description="Path to content root directory.",
        ))
        .add(OptionDefinition(
            OPTION_STACKTRACE,
            short_name="s",
            long_name="stacktrace",
            description="Show stacktrace when running on error.",
        ))
        .add(OptionDefinition(OPTION_SILENT, long_name="silent", description="Make no output to console."))
        .add(OptionDefinition(OPTION_NO_COLOR, long_name="no-color", description="Omit colorization on console output."))
        .add(OptionDefinition(OPTION_NO_SUMMARY, long_name="no-summary", description="Omit summary on output."))
        .add(OptionDefinition(OPTION_LOGGER, short_name="l", long_name="logger", description="Print output to logger."))
        .add(OptionDefinition(
            OPTION_LOGGER_NAME,
            long_name="logger-name",
            argument_name="name",
            description=f"Name of logger. Default is '{DEFAULT_LOGGER_NAME}'.",
        ))
    )


def build_registry(
    repository_factory: RepositoryFactory = FileSystemContentRepository,
    build_handler: BuildHandler | None = None,
) -> CommandRegistry:
    """Construct the complete option/command catalog.

    The collaborators are injectable so tests can replace the file-system
    repository and the build handler.
    """
    handler: BuildHandler = build_handler if build_handler is not None else MdpBuildHandler()
    description = CliDescription(
        executable_name=EXECUTABLE_NAME,
        description=DESCRIPTION,
        version=__version__,
        version_date=VERSION_DATE,
    )
    registry = CommandRegistry(description, _global_options())
    registry.set_default_command(
        CommandDefinition(path=(), executor=InfoExecutor(description), description="Show program info."),
    )

    media_options = (
        Options()
        .add(OptionDefinition(OPTION_MEDIA_ABSOLUTE, short_name="a", long_name="absolute", description="as absolute path"))
        .add(OptionDefinition(
            OPTION_MEDIA_ORPHANED,
            short_name="o",
            long_name="orphaned",
            description="show unreferenced (orphaned) media resources only",
        ))
    )

    (
        registry
        .add_command(CommandDefinition(
            path=("build",),
            executor=BuildExecutor(repository_factory, handler),
            parameters=ParameterArity.at_least(0, "program", "programs to be built"),
            description="Executes a build on specified programs or on all programs if none is specified.",
        ))
        .add_command(CommandDefinition(
            path=("clean",),
            executor=CleanExecutor(repository_factory),
            parameters=ParameterArity.at_least(0, "program", "programs to be cleaned"),
            description="Cleans specified programs or all programs if none is specified.",
        ))
        .add_command(CommandDefinition(
            path=("show", "structure"),
            executor=ShowStructureExecutor(repository_factory),
            parameters=ParameterArity.at_least(0, "program", "programs to be shown"),
            description="Shows program structure for specified programs or for all programs if none is specified.",
        ))
        .add_command(CommandDefinition(
            path=("media", "ls"),
            executor=MediaListExecutor(repository_factory),
            parameters=ParameterArity.at_least(0, "program", "programs to list media resources for"),
            specific_options=media_options,
            description="Lists all media resources of specified programs. By default referenced ones.",
        ))
        .add_command(CommandDefinition(
            path=("media", "prune"),
            executor=MediaPruneExecutor(repository_factory),
            parameters=ParameterArity.at_least(0, "program", "programs to prune media resources for"),
            description="Moves all orphaned media resources of specified programs to directory media-pruned.",
        ))
        .add_command(CommandDefinition(
            path=("check",),
            executor=CheckExecutor(repository_factory, handler),
            parameters=ParameterArity.exactly_one("content-id", "content id of mdp file to be checked"),
            description="Checks a single mdp file for syntactical correctness. Does not change the repository.",
        ))
    )
    return registry


# ---------------------------------------------------------------------------
# Built-in short-circuits
# ---------------------------------------------------------------------------

def _built_in_lines(registry: CommandRegistry, call: ParsedCall) -> list[str] | None:
    """Lines for ``--version`` / ``--man`` / ``--help``, or ``None``."""
    options = call.global_options
    if options.has_option(OPTION_VERSION):
        return version_lines(registry.description)
    if options.has_option(OPTION_MAN):
        return man_lines(registry)
    if options.has_option(OPTION_HELP):
        if call.command:
            return command_help_lines(registry, registry.lookup(call.command))
        return help_lines(registry)
    return None


# ---------------------------------------------------------------------------
# Error reporting
# ---------------------------------------------------------------------------

def _report_syntax_error(console: Console, exc: UnrecognizedArgumentError) -> None:
    console.out(f"{exc.executable_name} call syntax error. {exc}")
    console.out(exc.call_string)
    console.out(exc.call_pointer_string)


def _report_executor_error(
    console: Console,
    exc: CommandExecutorError,
    *,
    verbose: bool,
) -> None:
    if isinstance(exc.__cause__, ConsistencyError):
        console.error_out(str(exc))
        return
    if str(exc):
        console.error_out(f"{type(exc).__name__}: {exc}")
    if verbose and exc.hint:
        console.error_out(f"Hint: {exc.hint}")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    *,
    registry: CommandRegistry | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
    cwd: Path | None = None,
) -> int:
    """Run the m7r-cm CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    registry:
        Alternative command catalog; defaults to :func:`build_registry`.
    out, err:
        Output streams; default to ``sys.stdout`` / ``sys.stderr``.
    cwd:
        Content root used when ``--content-root`` is absent.

    Returns
    -------
    int
        OS process exit code.
    """
    arguments = list(sys.argv[1:] if argv is None else argv)
    registry = registry if registry is not None else build_registry()

    try:
        call = parse_arguments(registry, arguments)
    except UnrecognizedArgumentError as exc:
        _report_syntax_error(Console(ConsoleConfig.bootstrap(arguments, out=out, err=err)), exc)
        return exit_codes.GENERAL_ERROR

    config = ConsoleConfig.from_call(call, out=out, err=err)
    verbose = call.global_options.has_option(OPTION_VERBOSE)
    show_stacktrace = call.global_options.has_option(OPTION_STACKTRACE)
    configure_logging(config, verbose=verbose)
    console = Console(config)

    built_in = _built_in_lines(registry, call)
    if built_in is not None:
        for line in built_in:
            console.out(line)
        return exit_codes.SUCCESS

    if verbose:
        description = registry.description
        console.out(f"{description.description_first_line} - Version {description.version_text}\n")

    try:
        result = CommandDispatcher(registry, cwd=cwd).dispatch(call)
    except KeyboardInterrupt:
        console.error_out(ABORTED_MESSAGE)
        return exit_codes.KEYBOARD_INTERRUPT
    except CommandExecutorError as exc:
        _report_executor_error(console, exc, verbose=verbose)
        if show_stacktrace:
            console.stacktrace(exc)
        return exit_codes.GENERAL_ERROR
    except Exception as exc:  # noqa: BLE001
        console.internal_error_out(f"{type(exc).__name__}: {exc}")
        if show_stacktrace:
            console.stacktrace(exc)
        return exit_codes.INTERNAL_ERROR

    for line in result.lines:
        console.out(line)
    if result.summary and not call.global_options.has_option(OPTION_NO_SUMMARY):
        console.out(result.summary)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level boundary invoked by the console-script entry point."""
    try:
        code = main()
    except KeyboardInterrupt:
        Console(ConsoleConfig.bootstrap(sys.argv[1:])).error_out(ABORTED_MESSAGE)
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    sys.exit(code)
