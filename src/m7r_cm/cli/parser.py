"""Argument parser: raw tokens → :class:`~m7r_cm.core.models.ParsedCall`.

Parsing steps
-------------
1. Leading global options (``m7r-cm -p root build``) are consumed.
2. The longest complete command path is matched through the registry's
   prefix tree; without a match the default command is selected.
3. The remaining tokens are options of the active scope (global plus the
   command's specific options) or positional parameters.  ``--`` ends
   option scanning.
4. The positional count is checked against the command's arity rule,
   unless ``--help``, ``--man`` or ``--version`` short-circuit the call.

Every syntax problem raises :class:`~m7r_cm.exceptions.UnrecognizedArgumentError`
with a pointer string marking the offending token.  Parsing has no side
effects: the same arguments always give the same result or error.
"""

from __future__ import annotations

from collections.abc import Sequence

from m7r_cm.cli.commands import CommandDefinition, CommandRegistry
from m7r_cm.cli.options import OptionDefinition, Options
from m7r_cm.core.models import OptionParserResult, ParsedCall
from m7r_cm.exceptions import ParameterArityError, UnrecognizedArgumentError
from m7r_cm.utils.constants import OPTION_HELP, OPTION_MAN, OPTION_VERSION

_SHORT_CIRCUIT_OPTIONS: frozenset[str] = frozenset({OPTION_HELP, OPTION_MAN, OPTION_VERSION})


class CallParser:
    """Parses one argument list against a :class:`CommandRegistry`."""

    def __init__(self, registry: CommandRegistry, arguments: Sequence[str]) -> None:
        self._registry: CommandRegistry = registry
        self._tokens: tuple[str, ...] = tuple(arguments)
        self._executable: str = registry.description.executable_name
        self._call_string: str = " ".join((self._executable, *self._tokens))

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def column(self, index: int) -> int:
        """Offset of token *index* in the call string.

        ``index == len(tokens)`` points one separator past the end.
        """
        return len(self._executable) + 1 + sum(len(token) + 1 for token in self._tokens[:index])

    def _error(
        self,
        message: str,
        index: int,
        error_class: type[UnrecognizedArgumentError] = UnrecognizedArgumentError,
    ) -> UnrecognizedArgumentError:
        return error_class(
            self._executable,
            message,
            self._call_string,
            " " * self.column(index) + "^",
        )

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self) -> ParsedCall:
        tokens = self._tokens
        global_options = self._registry.global_options
        global_values: dict[str, str | None] = {}
        specific_values: dict[str, str | None] = {}

        index = 0
        while index < len(tokens) and _looks_like_option(tokens[index]):
            option, _, value, index = self._consume_option(index, global_options)
            global_values[option.identifier] = value

        command = self._registry.longest_match(tokens[index:])
        if command is None:
            command = self._registry.default_command
        else:
            index += len(command.path)

        positionals: list[tuple[int, str]] = []
        options_ended = False
        while index < len(tokens):
            token = tokens[index]
            if not options_ended and token == "--":
                options_ended = True
                index += 1
            elif not options_ended and _looks_like_option(token):
                option, scope, value, index = self._consume_option(
                    index, global_options, command.specific_options,
                )
                if scope is command.specific_options:
                    specific_values[option.identifier] = value
                else:
                    global_values[option.identifier] = value
            else:
                positionals.append((index, token))
                index += 1

        if not _SHORT_CIRCUIT_OPTIONS.intersection(global_values):
            self._check_arity(command, positionals)

        return ParsedCall(
            command=command.path,
            global_options=OptionParserResult(global_values),
            specific_options=OptionParserResult(specific_values),
            parameters=tuple(token for _, token in positionals),
            executable_name=self._executable,
        )

    def _consume_option(
        self,
        index: int,
        *scopes: Options,
    ) -> tuple[OptionDefinition, Options, str | None, int]:
        """Match the option at *index*.

        Returns the option, the scope it was found in, its value and the
        index of the next unconsumed token.
        """
        token = self._tokens[index]
        inline: str | None = None
        found: tuple[OptionDefinition, Options] | None = None

        if token.startswith("--"):
            name, separator, rest = token[2:].partition("=")
            if separator:
                inline = rest
            found = _find(scopes, long_name=name)
        elif len(token) == 2:
            found = _find(scopes, short_name=token[1])

        if found is None:
            raise self._error(f"Unknown option '{token}'.", index)
        option, scope = found

        if not option.takes_argument:
            if inline is not None:
                raise self._error(f"Option '{token.partition('=')[0]}' takes no argument.", index)
            return option, scope, None, index + 1
        if inline is not None:
            return option, scope, inline, index + 1
        if index + 1 >= len(self._tokens):
            raise self._error(
                f"Option '{token}' requires an argument <{option.argument_name}>.",
                index,
            )
        return option, scope, self._tokens[index + 1], index + 2

    def _check_arity(
        self,
        command: CommandDefinition,
        positionals: list[tuple[int, str]],
    ) -> None:
        arity = command.parameters
        count = len(positionals)
        if arity.accepts(count):
            return
        if not command.path:
            first_index, first_token = positionals[0]
            raise self._error(f"Unrecognized command '{first_token}'.", first_index)

        if arity.maximum is not None and count > arity.maximum:
            pointer_index = positionals[arity.maximum][0]
        else:
            pointer_index = len(self._tokens)
        label = f" <{arity.label}>" if arity.label else ""
        raise self._error(
            f"Command '{command.name}' expects {arity.expectation}{label}, got {count}.",
            pointer_index,
            ParameterArityError,
        )


def _looks_like_option(token: str) -> bool:
    return token.startswith("-") and token not in ("-", "--")


def _find(
    scopes: Sequence[Options],
    *,
    short_name: str | None = None,
    long_name: str | None = None,
) -> tuple[OptionDefinition, Options] | None:
    for scope in scopes:
        found = (
            scope.find_short(short_name) if short_name is not None
            else scope.find_long(long_name or "")
        )
        if found is not None:
            return found, scope
    return None


def parse_arguments(registry: CommandRegistry, arguments: Sequence[str]) -> ParsedCall:
    """Parse *arguments* (without the executable name) against *registry*.

    Raises
    ------
    UnrecognizedArgumentError
        On any syntax error, including arity violations
        (:class:`~m7r_cm.exceptions.ParameterArityError`).
    """
    return CallParser(registry, arguments).parse()
