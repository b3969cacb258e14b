"""Console output pipeline with optional Rich support.

Every user-visible line passes through one of :meth:`Console.out`,
:meth:`Console.error_out` or :meth:`Console.internal_error_out`.  The
rendering strategy is chosen once from a :class:`ConsoleConfig`:

* silent             — nothing is written, ever.
* logger-redirected  — lines go to a named :mod:`logging` logger.
* colorized          — Rich styles per destination.
* plain              — lines are written unmodified.

Rich is imported lazily so the bootstrap paths (``--help``,
``--version``, syntax errors) keep working when it is not installed;
the colorized strategy then degrades to plain.  Output never raises:
a failing write falls back to plain or drops the line.
"""

from __future__ import annotations

import logging
import sys
import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TextIO

from m7r_cm.core.models import ParsedCall
from m7r_cm.exceptions import MissingDependencyError
from m7r_cm.utils.constants import (
    DEFAULT_LOGGER_NAME,
    OPTION_LOGGER,
    OPTION_LOGGER_NAME,
    OPTION_NO_COLOR,
    OPTION_SILENT,
)

INTERNAL_ERROR_PREFIX: str = "Internal error: "


class Destination(Enum):
    STANDARD = "standard"
    ERROR = "error"


class MessageKind(Enum):
    NORMAL = "normal"
    ERROR = "error"
    INTERNAL_ERROR = "internal_error"


_STYLES: dict[MessageKind, str] = {
    MessageKind.NORMAL: "",
    MessageKind.ERROR: "bold red",
    MessageKind.INTERNAL_ERROR: "bold magenta",
}


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConsoleConfig:
    """Process-wide output settings, built once from the global options."""

    out: TextIO
    err: TextIO
    colorized: bool = True
    silent: bool = False
    logger: bool = False
    logger_name: str = DEFAULT_LOGGER_NAME

    @classmethod
    def from_call(
        cls,
        call: ParsedCall,
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> ConsoleConfig:
        options = call.global_options
        return cls(
            out=out if out is not None else sys.stdout,
            err=err if err is not None else sys.stderr,
            colorized=not options.has_option(OPTION_NO_COLOR),
            silent=options.has_option(OPTION_SILENT),
            logger=options.has_option(OPTION_LOGGER),
            logger_name=options.get_value(OPTION_LOGGER_NAME) or DEFAULT_LOGGER_NAME,
        )

    @classmethod
    def bootstrap(
        cls,
        arguments: Sequence[str],
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> ConsoleConfig:
        """Plain config for output produced before the global options are known.

        Only a literal ``--silent`` token is honoured.
        """
        return cls(
            out=out if out is not None else sys.stdout,
            err=err if err is not None else sys.stderr,
            colorized=False,
            silent="--silent" in arguments,
        )

    def stream(self, destination: Destination) -> TextIO:
        return self.out if destination is Destination.STANDARD else self.err


def configure_logging(config: ConsoleConfig, *, verbose: bool = False) -> None:
    """Give the redirection logger a handler when the host configured none."""
    if not config.logger or config.silent:
        return
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=config.err,
    )


# ---------------------------------------------------------------------------
# Rich loading
# ---------------------------------------------------------------------------

def _load_rich() -> tuple[type[Any], type[Any]]:
    """Return ``(rich.console.Console, rich.text.Text)`` or raise ``MissingDependencyError``."""
    try:
        from rich.console import Console as RichConsole
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return RichConsole, Text


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def _write_plain(stream: TextIO, message: str) -> None:
    try:
        stream.write(f"{message}\n")
        stream.flush()
    except (OSError, ValueError):
        pass


class _SilentStrategy:
    def emit(self, kind: MessageKind, destination: Destination, message: str) -> None:
        return None

    def stacktrace(self, exc: BaseException) -> None:
        return None


class _PlainStrategy:
    def __init__(self, config: ConsoleConfig) -> None:
        self._config: ConsoleConfig = config

    def emit(self, kind: MessageKind, destination: Destination, message: str) -> None:
        _write_plain(self._config.stream(destination), message)

    def stacktrace(self, exc: BaseException) -> None:
        trace = "".join(traceback.format_exception(exc)).rstrip("\n")
        _write_plain(self._config.err, trace)


class _ColorizedStrategy(_PlainStrategy):
    """Rich rendering; user text is wrapped in ``Text`` so it is never markup."""

    def __init__(self, config: ConsoleConfig) -> None:
        super().__init__(config)
        self._consoles: dict[Destination, Any] = {}

    def _rich_console(self, destination: Destination) -> Any:
        if destination not in self._consoles:
            console_class, _ = _load_rich()
            self._consoles[destination] = console_class(
                file=self._config.stream(destination),
                highlight=False,
                soft_wrap=True,
            )
        return self._consoles[destination]

    def emit(self, kind: MessageKind, destination: Destination, message: str) -> None:
        try:
            _, text_class = _load_rich()
            rich_console = self._rich_console(destination)
            rich_console.print(text_class(message, style=_STYLES[kind]))
        except (MissingDependencyError, OSError, ValueError):
            super().emit(kind, destination, message)


class _LoggerStrategy:
    def __init__(self, config: ConsoleConfig) -> None:
        self._logger: logging.Logger = logging.getLogger(config.logger_name)

    def emit(self, kind: MessageKind, destination: Destination, message: str) -> None:
        if kind is MessageKind.NORMAL:
            self._logger.info(message)
        else:
            self._logger.error(message)

    def stacktrace(self, exc: BaseException) -> None:
        self._logger.error("%s: %s", type(exc).__name__, exc, exc_info=exc)


def _select_strategy(
    config: ConsoleConfig,
) -> _SilentStrategy | _LoggerStrategy | _ColorizedStrategy | _PlainStrategy:
    if config.silent:
        return _SilentStrategy()
    if config.logger:
        return _LoggerStrategy(config)
    if config.colorized:
        return _ColorizedStrategy(config)
    return _PlainStrategy(config)


# ---------------------------------------------------------------------------
# Public facade
# ---------------------------------------------------------------------------

class Console:
    """Destination- and mode-aware writer bound to one :class:`ConsoleConfig`."""

    def __init__(self, config: ConsoleConfig) -> None:
        self.config: ConsoleConfig = config
        self._strategy = _select_strategy(config)

    def out(self, message: str) -> None:
        """Normal informational output (standard stream)."""
        self._strategy.emit(MessageKind.NORMAL, Destination.STANDARD, message)

    def error_out(self, message: str) -> None:
        """Error-classified output (error stream)."""
        self._strategy.emit(MessageKind.ERROR, Destination.ERROR, message)

    def internal_error_out(self, message: str) -> None:
        """Output for unexpected faults (error stream), tagged as internal."""
        self._strategy.emit(
            MessageKind.INTERNAL_ERROR,
            Destination.ERROR,
            f"{INTERNAL_ERROR_PREFIX}{message}",
        )

    def stacktrace(self, exc: BaseException) -> None:
        """Write the full trace of *exc* to the error stream (or the logger)."""
        self._strategy.stacktrace(exc)
