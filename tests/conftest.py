"""Shared pytest fixtures for the cpp-scaffold test suite.

Provides reusable fixtures for:
- Library / application project descriptors
- A fixed license year for reproducible rendering
- Temporary configuration, project store and service instances
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cpp_scaffold.config import Config
from cpp_scaffold.scaffolder.generator import ProjectDescriptor, ProjectKind
from cpp_scaffold.service import ProjectService
from cpp_scaffold.store import ProjectStore


FIXED_YEAR = 2024


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@pytest.fixture
def fixed_year() -> int:
    """Copyright year used wherever output must be reproducible."""
    return FIXED_YEAR


@pytest.fixture
def library_descriptor() -> ProjectDescriptor:
    """A library with two dependencies, tests on and examples off."""
    return ProjectDescriptor(
        name="mathlib",
        kind=ProjectKind.LIBRARY,
        dependencies=("spdlog@1.14.1", "nlohmann/json@v3.11.3"),
        language_standard="20",
        build_tool_version="3.24",
        include_tests=True,
        include_examples=False,
    )


@pytest.fixture
def application_descriptor() -> ProjectDescriptor:
    """An application without dependencies, tests off and examples on."""
    return ProjectDescriptor(
        name="server_app",
        kind=ProjectKind.APPLICATION,
        dependencies=(),
        language_standard="17",
        build_tool_version="3.20",
        include_tests=False,
        include_examples=True,
    )


# ---------------------------------------------------------------------------
# Config / store / service
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_config(tmp_path: Path) -> Config:
    """Config pointing the database and temp areas into ``tmp_path``."""
    return Config(
        database_path=tmp_path / "db" / "projects.db",
        work_dir=tmp_path / "work",
    )


@pytest.fixture
def store(tmp_config: Config) -> ProjectStore:
    """A fresh SQLite-backed project store (disposed after the test)."""
    project_store = ProjectStore.from_config(tmp_config)
    yield project_store
    project_store.dispose()


@pytest.fixture
def service(tmp_config: Config, store: ProjectStore) -> ProjectService:
    """A ProjectService wired to the temporary store."""
    return ProjectService(tmp_config, store)
