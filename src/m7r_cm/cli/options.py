"""Declarative option catalog.

An :class:`Options` collection is built by chaining :meth:`Options.add`
calls before any parsing happens::

    Options().add(OptionDefinition("verbose", long_name="verbose"))

Uniqueness of identifiers, short names and long names is enforced at
registration time with :class:`~m7r_cm.exceptions.DuplicateOptionError`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from m7r_cm.exceptions import CliDefinitionError, DuplicateOptionError


@dataclass(frozen=True, slots=True)
class OptionDefinition:
    """A single ``-x`` / ``--name`` option."""

    identifier: str
    short_name: str | None = None
    long_name: str | None = None
    argument_name: str | None = None
    """Label of the option's argument; ``None`` for presence flags."""

    description: str = ""

    def __post_init__(self) -> None:
        if self.short_name is None and self.long_name is None:
            raise CliDefinitionError(
                f"Option '{self.identifier}' needs a short or a long name.",
            )
        if self.short_name is not None and (
            len(self.short_name) != 1 or self.short_name == "-"
        ):
            raise CliDefinitionError(
                f"Short name of option '{self.identifier}' must be one character.",
            )

    @property
    def takes_argument(self) -> bool:
        return self.argument_name is not None

    @property
    def flags(self) -> tuple[str, ...]:
        """Spellings on the command line, short first."""
        spellings: list[str] = []
        if self.short_name is not None:
            spellings.append(f"-{self.short_name}")
        if self.long_name is not None:
            spellings.append(f"--{self.long_name}")
        return tuple(spellings)

    @property
    def usage(self) -> str:
        """Help-column rendering, e.g. ``-p, --content-root <path>``."""
        text = ", ".join(self.flags)
        if self.argument_name is not None:
            text += f" <{self.argument_name}>"
        return text


class Options:
    """Ordered collection of :class:`OptionDefinition` entries."""

    def __init__(self) -> None:
        self._by_identifier: dict[str, OptionDefinition] = {}
        self._by_short: dict[str, OptionDefinition] = {}
        self._by_long: dict[str, OptionDefinition] = {}

    def add(self, option: OptionDefinition) -> Options:
        """Register *option*; returns ``self`` for chaining.

        Raises
        ------
        DuplicateOptionError
            When the identifier, short name or long name is taken.
        """
        self.assert_no_collision(option)
        self._by_identifier[option.identifier] = option
        if option.short_name is not None:
            self._by_short[option.short_name] = option
        if option.long_name is not None:
            self._by_long[option.long_name] = option
        return self

    def assert_no_collision(
        self,
        option: OptionDefinition,
        *,
        check_identifier: bool = True,
    ) -> None:
        """Raise :class:`DuplicateOptionError` if *option* clashes with this scope."""
        if check_identifier and option.identifier in self._by_identifier:
            raise DuplicateOptionError(f"Duplicate option identifier: {option.identifier}")
        if option.short_name is not None and option.short_name in self._by_short:
            raise DuplicateOptionError(f"Duplicate short option name: -{option.short_name}")
        if option.long_name is not None and option.long_name in self._by_long:
            raise DuplicateOptionError(f"Duplicate long option name: --{option.long_name}")

    def find_short(self, name: str) -> OptionDefinition | None:
        return self._by_short.get(name)

    def find_long(self, name: str) -> OptionDefinition | None:
        return self._by_long.get(name)

    def __iter__(self) -> Iterator[OptionDefinition]:
        return iter(self._by_identifier.values())

    def __len__(self) -> int:
        return len(self._by_identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_identifier
