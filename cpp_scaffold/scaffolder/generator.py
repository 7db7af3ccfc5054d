"""Project descriptor and file-set rendering.

Takes a ``ProjectDescriptor`` and produces the complete set of files for a
CMake + CPM C++ project: build manifests, the CPM bootstrap and cache
configuration, source/header stubs, optional GoogleTest suite and example
program, README, LICENSE and ``.gitignore``.  Rendering happens entirely in
memory; ``ProjectGenerator.generate`` is the only part that touches disk.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import DefaultsConfig
from .dependencies import normalize, render_dependency_section, split_dependency_list
from .templates import TemplateRenderer, write_file_set


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEST_FRAMEWORK = "google/googletest@1.14.0"

# Valid as a directory name, a C++ namespace and a CMake target.
PROJECT_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


# ---------------------------------------------------------------------------
# Descriptor model
# ---------------------------------------------------------------------------


class ProjectKind(str, Enum):
    """What the top-level CMake target builds."""

    LIBRARY = "library"
    APPLICATION = "application"


class ProjectDescriptor(BaseModel):
    """Pydantic model describing the C++ project to scaffold."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        pattern=PROJECT_NAME_PATTERN,
        description="Project name (directory, namespace and target name)",
    )
    kind: ProjectKind = Field(..., description="library or application")
    dependencies: tuple[str, ...] = Field(
        default=(),
        description="Raw dependency tokens in the order the user entered them",
    )
    language_standard: str = Field(default="23", description="C++ standard year, e.g. 20")
    build_tool_version: str = Field(default="3.20", description="Minimum CMake version")
    include_tests: bool = Field(default=True)
    include_examples: bool = Field(default=False)

    @field_validator("dependencies", mode="before")
    @classmethod
    def split_dependencies(cls, value: Any) -> Any:
        """Accept a comma-separated string or a list of string tokens."""
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(split_dependency_list(value))
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            return tuple(split_dependency_list(value))
        # Anything else is left for pydantic to reject.
        return value

    @property
    def is_library(self) -> bool:
        return self.kind is ProjectKind.LIBRARY

    @classmethod
    def from_form(
        cls,
        data: Mapping[str, Any],
        defaults: DefaultsConfig | None = None,
    ) -> "ProjectDescriptor":
        """Build a descriptor from a loosely-typed form submission.

        Accepts snake_case keys as well as the camelCase keys the web form
        posts (``type``, ``cppStandard``, ``cmakeVersion``, ``includeTests``,
        ``includeExamples``).  ``dependencies`` may be a comma-separated
        string or a list.  Missing optional fields fall back to *defaults*.

        Raises:
            pydantic.ValidationError: If ``name`` or ``kind`` is missing or
                invalid, or ``dependencies`` is not a string or a list of
                strings.
        """
        defaults = defaults or DefaultsConfig()

        include_tests = _pick(data, "include_tests", "includeTests")
        include_examples = _pick(data, "include_examples", "includeExamples")

        return cls(
            name=_pick(data, "name"),
            kind=_pick(data, "kind", "type"),
            dependencies=_pick(data, "dependencies"),
            language_standard=str(
                _pick(data, "language_standard", "cppStandard") or defaults.language_standard
            ),
            build_tool_version=str(
                _pick(data, "build_tool_version", "cmakeVersion") or defaults.build_tool_version
            ),
            include_tests=defaults.include_tests if include_tests is None else include_tests,
            include_examples=(
                defaults.include_examples if include_examples is None else include_examples
            ),
        )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def build_context(
    descriptor: ProjectDescriptor,
    directives: Sequence[str],
    *,
    year: int | None = None,
) -> dict[str, Any]:
    """Build the Jinja2 template context for *descriptor*."""
    return {
        "project_name": descriptor.name,
        "kind": descriptor.kind.value,
        "is_library": descriptor.is_library,
        "language_standard": descriptor.language_standard,
        "build_tool_version": descriptor.build_tool_version,
        "include_tests": descriptor.include_tests,
        "include_examples": descriptor.include_examples,
        "directives": list(directives),
        "dependency_section": render_dependency_section(directives),
        "test_framework": TEST_FRAMEWORK,
        "year": year if year is not None else datetime.now(timezone.utc).year,
    }


def file_plan(descriptor: ProjectDescriptor) -> list[tuple[str, str]]:
    """Return ``(template, output path)`` pairs in materialization order."""
    name = descriptor.name
    plan = [
        ("CMakeLists.txt.j2", "CMakeLists.txt"),
        ("cmake/CPM.cmake.j2", "cmake/CPM.cmake"),
        ("cmake/CPMConfig.cmake.j2", "cmake/CPMConfig.cmake"),
    ]
    if descriptor.include_tests:
        plan.append(("tests/CMakeLists.txt.j2", "tests/CMakeLists.txt"))
    plan += [
        ("src/example.cpp.j2", f"src/{name}/example.cpp"),
        ("src/factory.cpp.j2", f"src/{name}/factory.cpp"),
        ("include/example.h.j2", f"include/{name}/example.h"),
        ("include/factory.h.j2", f"include/{name}/factory.h"),
        ("gitignore.j2", ".gitignore"),
        ("README.md.j2", "README.md"),
        ("LICENSE.j2", "LICENSE"),
    ]
    if descriptor.include_tests:
        plan.append(("tests/project_test.cpp.j2", f"tests/{name}_test.cpp"))
    if descriptor.include_examples:
        plan.append(("examples/main.cpp.j2", "examples/main.cpp"))
    return plan


def render(
    descriptor: ProjectDescriptor,
    directives: Sequence[str],
    *,
    year: int | None = None,
    renderer: TemplateRenderer | None = None,
) -> dict[str, str]:
    """Render every project file for *descriptor*.

    Args:
        descriptor: The validated project descriptor.
        directives: ``CPMAddPackage`` lines, usually from
            :func:`~cpp_scaffold.scaffolder.dependencies.normalize`.
        year: Copyright year for the LICENSE.  Defaults to the current UTC
            year; pass it explicitly for reproducible output.
        renderer: Template renderer to use (a default one is created if
            omitted).

    Returns:
        Ordered mapping of relative POSIX path to file content.
    """
    renderer = renderer or TemplateRenderer()
    context = build_context(descriptor, directives, year=year)
    return {
        output_path: renderer.render(template, context)
        for template, output_path in file_plan(descriptor)
    }


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Scaffolds one C++ project from a ``ProjectDescriptor``.

    ``files()`` returns the in-memory file set; ``generate()`` writes it to
    ``<output_dir>/<project name>``.
    """

    def __init__(
        self,
        descriptor: ProjectDescriptor,
        *,
        year: int | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.year = year
        self.renderer = renderer or TemplateRenderer()

    @property
    def directives(self) -> list[str]:
        return normalize(self.descriptor.dependencies)

    def files(self) -> dict[str, str]:
        """Render the complete file set."""
        return render(
            self.descriptor,
            self.directives,
            year=self.year,
            renderer=self.renderer,
        )

    async def generate(self, output_dir: str | Path) -> Path:
        """Write the project below *output_dir* and return the project root."""
        project_root = Path(output_dir) / self.descriptor.name
        await write_file_set(self.files(), project_root)
        return project_root


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present, non-empty value among *keys*."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None
