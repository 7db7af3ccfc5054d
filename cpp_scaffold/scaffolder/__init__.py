"""cpp-scaffold scaffolder -- renders CMake + CPM C++ project trees.

This package takes a ``ProjectDescriptor`` as input, normalizes its
dependency tokens into ``CPMAddPackage`` directives and renders the project
files from the bundled Jinja2 templates.

Quick usage::

    from cpp_scaffold.scaffolder import ProjectDescriptor, ProjectGenerator

    descriptor = ProjectDescriptor(
        name="mylib",
        kind="library",
        dependencies=("spdlog@1.14.1", "nlohmann/json@v3.11.3"),
    )
    files = ProjectGenerator(descriptor).files()
    project_path = await ProjectGenerator(descriptor).generate("/tmp/output")
"""

from cpp_scaffold.scaffolder.dependencies import (
    KNOWN_PACKAGES,
    Dependency,
    DependencySource,
    normalize,
    parse_dependency,
)
from cpp_scaffold.scaffolder.generator import (
    ProjectDescriptor,
    ProjectGenerator,
    ProjectKind,
    render,
)
from cpp_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "KNOWN_PACKAGES",
    "Dependency",
    "DependencySource",
    "ProjectDescriptor",
    "ProjectGenerator",
    "ProjectKind",
    "TemplateRenderer",
    "normalize",
    "parse_dependency",
    "render",
]
