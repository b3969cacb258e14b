"""Command catalog: arity rules, command definitions and the registry.

Command paths are stored in a prefix tree so that the parser can find
the longest complete command at the head of the arguments, and so that
ambiguous registrations (identical paths, or one command's path being a
prefix of another's) are rejected in :meth:`CommandRegistry.add_command`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from m7r_cm.cli.options import Options
from m7r_cm.core.protocols import CommandExecutor
from m7r_cm.exceptions import AmbiguousCommandError, CliDefinitionError


# ---------------------------------------------------------------------------
# Positional parameter arity
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParameterArity:
    """How many positional parameters a command accepts."""

    minimum: int
    maximum: int | None
    """Upper bound; ``None`` means unbounded."""

    label: str = ""
    description: str = ""

    def accepts(self, count: int) -> bool:
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    @property
    def usage(self) -> str:
        if self.maximum == 0:
            return ""
        if self.minimum == 1 and self.maximum == 1:
            return f"<{self.label}>"
        return f"[{self.label}...]"

    @property
    def expectation(self) -> str:
        """Readable arity, used in syntax error messages."""
        if self.maximum == 0:
            return "no parameters"
        if self.maximum is None:
            return f"at least {self.minimum} parameter(s)"
        if self.minimum == self.maximum:
            return f"exactly {self.minimum} parameter(s)"
        return f"{self.minimum} to {self.maximum} parameters"

    @classmethod
    def at_least(cls, minimum: int, label: str, description: str = "") -> ParameterArity:
        """Accept *minimum* or more positionals."""
        return cls(minimum=minimum, maximum=None, label=label, description=description)

    @classmethod
    def exactly_one(cls, label: str, description: str = "") -> ParameterArity:
        return cls(minimum=1, maximum=1, label=label, description=description)


NO_PARAMETERS = ParameterArity(minimum=0, maximum=0)


# ---------------------------------------------------------------------------
# Command definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CommandDefinition:
    """A command path bound to its executor."""

    path: tuple[str, ...]
    executor: CommandExecutor
    parameters: ParameterArity = NO_PARAMETERS
    specific_options: Options = field(default_factory=Options)
    description: str = ""

    @property
    def name(self) -> str:
        return " ".join(self.path)


@dataclass(frozen=True, slots=True)
class CliDescription:
    """Program identity shown by ``--version``, ``--help`` and the info command."""

    executable_name: str
    description: str
    version: str
    version_date: str

    @property
    def description_first_line(self) -> str:
        return self.description.splitlines()[0] if self.description else ""

    @property
    def version_text(self) -> str:
        return f"{self.version} from {self.version_date}"


class _Node:
    __slots__ = ("children", "command")

    def __init__(self) -> None:
        self.children: dict[str, _Node] = {}
        self.command: CommandDefinition | None = None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class CommandRegistry:
    """Global options, registered commands and the default command."""

    def __init__(self, description: CliDescription, global_options: Options) -> None:
        self.description: CliDescription = description
        self.global_options: Options = global_options
        self._root: _Node = _Node()
        self._table: dict[tuple[str, ...], CommandDefinition] = {}
        self._default: CommandDefinition | None = None

    @property
    def default_command(self) -> CommandDefinition:
        if self._default is None:
            raise CliDefinitionError("No default command registered.")
        return self._default

    @property
    def commands(self) -> tuple[CommandDefinition, ...]:
        """Registered commands in registration order."""
        return tuple(self._table.values())

    def set_default_command(self, command: CommandDefinition) -> CommandRegistry:
        if command.path:
            raise CliDefinitionError("The default command must have an empty path.")
        self._check_specific_options(command)
        self._default = command
        return self

    def add_command(self, command: CommandDefinition) -> CommandRegistry:
        """Register *command*; returns ``self`` for chaining.

        Raises
        ------
        AmbiguousCommandError
            When the path equals, prefixes or extends a registered path.
        DuplicateOptionError
            When a specific option clashes with a global option.
        """
        if not command.path:
            raise CliDefinitionError("Commands need a non-empty path.")
        self._check_specific_options(command)

        node = self._root
        for depth, token in enumerate(command.path):
            if node.command is not None:
                raise AmbiguousCommandError(
                    f"Command '{command.name}' is ambiguous: "
                    f"'{' '.join(command.path[:depth])}' is already a command.",
                )
            node = node.children.setdefault(token, _Node())
        if node.command is not None:
            raise AmbiguousCommandError(f"Command '{command.name}' is already registered.")
        if node.children:
            raise AmbiguousCommandError(
                f"Command '{command.name}' is ambiguous: it prefixes registered commands.",
            )
        node.command = command
        self._table[command.path] = command
        return self

    def _check_specific_options(self, command: CommandDefinition) -> None:
        for option in command.specific_options:
            self.global_options.assert_no_collision(option, check_identifier=False)

    def longest_match(self, tokens: Sequence[str]) -> CommandDefinition | None:
        """Return the longest complete command path at the head of *tokens*."""
        node = self._root
        match: CommandDefinition | None = None
        for token in tokens:
            next_node = node.children.get(token)
            if next_node is None:
                break
            node = next_node
            if node.command is not None:
                match = node.command
        return match

    def lookup(self, path: Sequence[str]) -> CommandDefinition:
        """Return the command registered for *path* (empty → default command)."""
        if not path:
            return self.default_command
        try:
            return self._table[tuple(path)]
        except KeyError:
            raise CliDefinitionError(f"No command registered for '{' '.join(path)}'.") from None
