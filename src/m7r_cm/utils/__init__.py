"""Shared utilities — constants and cross-cutting definitions.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""
