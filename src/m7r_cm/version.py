"""Version metadata for m7r-cm."""

from __future__ import annotations

__version__: str = "0.1.0"
"""Semantic version of the content manager CLI."""

VERSION_DATE: str = "2021-12-21"
"""Release date shown alongside the version."""
