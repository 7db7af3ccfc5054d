"""Exceptions raised by the generation service and the project store.

The scaffolding core (normalizer and renderer) never raises; everything here
belongs to the layer that validates requests, packages archives and talks to
the database.
"""

from __future__ import annotations

from typing import Any


class ScaffoldError(Exception):
    """Base class for every cpp-scaffold failure surfaced to callers."""


class ProjectValidationError(ScaffoldError):
    """Raised when a generation request has a missing or invalid field."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class DuplicateProjectError(ScaffoldError):
    """Raised when a project with the same name is already stored."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Project already exists: {name}")


class ProjectNotFoundError(ScaffoldError):
    """Raised when a lookup, download or delete names an unknown project."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Project not found: {name}")


class PackagingError(ScaffoldError):
    """Raised when writing the project tree or creating the archive fails."""
