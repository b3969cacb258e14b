"""Custom exception hierarchy for m7r-cm.

All exceptions that cross layer boundaries must inherit from
:class:`ContentManagerCliError`.  Foreign exceptions (``OSError`` from the
file system and the like) must be caught at the layer that provoked them
and re-raised as a typed subclass defined here.

Hierarchy
---------
ContentManagerCliError
├── CliDefinitionError
│   ├── DuplicateOptionError
│   └── AmbiguousCommandError
├── UnrecognizedArgumentError
│   └── ParameterArityError
├── MissingDependencyError
├── ConsistencyError
│   ├── PathConsistencyError
│   └── UnknownProgramError
├── ContentRepositoryError
│   ├── UnknownProgramError
│   └── UnknownContentIdError
├── BuildError
└── CommandExecutorError
"""

from __future__ import annotations


class ContentManagerCliError(Exception):
    """Base exception for all m7r-cm errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""

    @property
    def message(self) -> str:
        return str(self)


# --- CLI definition (programming errors) -----------------------------------

class CliDefinitionError(ContentManagerCliError):
    """Raised when the option/command catalog is defined inconsistently."""


class DuplicateOptionError(CliDefinitionError):
    """Raised when an option identifier, short name or long name collides."""


class AmbiguousCommandError(CliDefinitionError):
    """Raised when a command path equals or prefixes a registered one."""


# --- Call syntax -----------------------------------------------------------

class UnrecognizedArgumentError(ContentManagerCliError):
    """Raised when the raw arguments cannot be parsed into a call.

    Carries everything needed to reproduce the diagnostic verbatim: the
    executable name, the reconstructed call string and a pointer string
    whose ``^`` marks the column of the offending token.
    """

    def __init__(
        self,
        executable_name: str,
        message: str,
        call_string: str,
        call_pointer_string: str,
    ) -> None:
        super().__init__(message)
        self.executable_name: str = executable_name
        self.call_string: str = call_string
        self.call_pointer_string: str = call_pointer_string


class ParameterArityError(UnrecognizedArgumentError):
    """Raised when the positional count violates the command's arity rule."""


# --- Environment -----------------------------------------------------------

class MissingDependencyError(ContentManagerCliError):
    """Raised when an optional runtime dependency is not installed."""


# --- Domain consistency ----------------------------------------------------

class ConsistencyError(ContentManagerCliError):
    """A user-correctable problem with the content repository or environment."""


class PathConsistencyError(ConsistencyError):
    """Raised when a path is missing or of the wrong kind."""


# --- Content repository ----------------------------------------------------

class ContentRepositoryError(ContentManagerCliError):
    """Raised when the content repository cannot satisfy a request."""


class UnknownProgramError(ContentRepositoryError, ConsistencyError):
    """Raised when a named program does not exist under the content root."""


class UnknownContentIdError(ContentRepositoryError):
    """Raised when a content id does not resolve to a content unit."""


class BuildError(ContentManagerCliError):
    """Raised when a single content unit fails to compile."""

    def __init__(self, unit_identifier: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Build failed for {unit_identifier}{detail}")
        self.unit_identifier: str = unit_identifier
        if cause is not None:
            self.__cause__ = cause


# --- Executors -------------------------------------------------------------

class CommandExecutorError(ContentManagerCliError):
    """Raised by a command executor when its operation fails.

    The underlying cause, if any, is attached through exception chaining
    (``raise CommandExecutorError(...) from exc``) and inspected by the
    error boundary only to detect a :class:`ConsistencyError`.
    """

    def __init__(self, message: str = "", *, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
