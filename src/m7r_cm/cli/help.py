"""Built-in help, manual, version and info output.

Everything here returns plain lines; the caller writes them through the
console pipeline so ``--silent`` and ``--logger`` apply.
"""

from __future__ import annotations

from m7r_cm.cli.commands import CliDescription, CommandDefinition, CommandRegistry
from m7r_cm.cli.options import Options
from m7r_cm.core.models import ExecutionContext, ExecutionResult, ParsedCall

_USAGE_COLUMN_WIDTH = 32


def version_lines(description: CliDescription) -> list[str]:
    return [f"{description.executable_name} version {description.version_text}"]


def _option_rows(options: Options) -> list[str]:
    return [
        f"  {option.usage:<{_USAGE_COLUMN_WIDTH}} {option.description}".rstrip()
        for option in options
    ]


def _command_usage(registry: CommandRegistry, command: CommandDefinition) -> str:
    parts = [registry.description.executable_name, "[global options]", command.name]
    if len(command.specific_options):
        parts.append("[options]")
    if command.parameters.usage:
        parts.append(command.parameters.usage)
    return " ".join(part for part in parts if part)


def command_help_lines(registry: CommandRegistry, command: CommandDefinition) -> list[str]:
    lines = [f"Usage: {_command_usage(registry, command)}"]
    if command.description:
        lines += ["", command.description]
    if command.parameters.label and command.parameters.description:
        lines += [
            "",
            "Parameters:",
            f"  {command.parameters.usage:<{_USAGE_COLUMN_WIDTH}} "
            f"{command.parameters.description}",
        ]
    if len(command.specific_options):
        lines += ["", "Options:", *_option_rows(command.specific_options)]
    return lines


def help_lines(registry: CommandRegistry) -> list[str]:
    """General help: description, usage, global options and the command list."""
    description = registry.description
    lines = [
        *description.description.splitlines(),
        "",
        f"Usage: {description.executable_name} [global options] <command> [options] [parameters]",
        "",
        "Global options:",
        *_option_rows(registry.global_options),
        "",
        "Commands:",
    ]
    for command in registry.commands:
        lines.append(f"  {command.name:<{_USAGE_COLUMN_WIDTH}} {command.description}".rstrip())
    lines += [
        "",
        f"Run '{description.executable_name} <command> --help' for command details.",
    ]
    return lines


def man_lines(registry: CommandRegistry) -> list[str]:
    """Full manual: general help followed by every command's help."""
    lines = help_lines(registry)
    for command in registry.commands:
        lines += ["", "-" * 60, *command_help_lines(registry, command)]
    return lines


class InfoExecutor:
    """Default command: program description, version and a help hint."""

    def __init__(self, description: CliDescription) -> None:
        self._description: CliDescription = description

    def execute(self, call: ParsedCall, context: ExecutionContext) -> ExecutionResult:
        description = self._description
        return ExecutionResult(
            lines=(
                *description.description.splitlines(),
                f"Version {description.version_text}",
                "",
                f"Run '{description.executable_name} --help' for usage.",
            ),
        )
