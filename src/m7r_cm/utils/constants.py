"""Shared constants: option identifiers, directory names and defaults."""

from __future__ import annotations

EXECUTABLE_NAME: str = "m7r-cm"

DESCRIPTION: str = (
    "mentalizr content manager CLI\n"
    "https://github.com/mentalizr/m7r-content-manager-cli"
)

DEFAULT_LOGGER_NAME: str = "m7r_cm"
"""Logger used for output redirection when ``--logger-name`` is absent."""

# ---------------------------------------------------------------------------
# Global option identifiers
# ---------------------------------------------------------------------------

OPTION_VERSION: str = "version"
OPTION_HELP: str = "help"
OPTION_MAN: str = "man"
OPTION_VERBOSE: str = "verbose"
OPTION_STACKTRACE: str = "stacktrace"
OPTION_CONTENT_ROOT: str = "content_root"
OPTION_SILENT: str = "silent"
OPTION_LOGGER: str = "logger"
OPTION_LOGGER_NAME: str = "logger_name"
OPTION_NO_COLOR: str = "no_color"
OPTION_NO_SUMMARY: str = "no_summary"

# ---------------------------------------------------------------------------
# Command-specific option identifiers
# ---------------------------------------------------------------------------

OPTION_MEDIA_ABSOLUTE: str = "absolute"
OPTION_MEDIA_ORPHANED: str = "orphaned"

# ---------------------------------------------------------------------------
# Content repository layout
# ---------------------------------------------------------------------------

MDP_DIR: str = "mdp"
MDP_SUFFIX: str = ".mdp"
MEDIA_DIR: str = "media"
MEDIA_PRUNED_DIR: str = "media-pruned"
BUILD_DIR: str = "build"
BUILD_SUFFIX: str = ".html"
CONTENT_ID_SEPARATOR: str = "_"
