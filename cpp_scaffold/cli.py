"""Command-line front end for cpp-scaffold.

Usage::

    python -m cpp_scaffold generate mylib --kind library --deps "spdlog@1.14.1,curl"
    python -m cpp_scaffold list
    python -m cpp_scaffold download mylib -o ./downloads
    python -m cpp_scaffold delete mylib
    python -m cpp_scaffold preview myapp --kind application --show CMakeLists.txt
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from rich.syntax import Syntax
from rich.table import Table

from .config import Config
from .errors import ScaffoldError
from .service import ProjectService
from .utils import console, format_size, print_error, print_success, print_summary_table


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _add_project_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Project name (directory, namespace and target name)")
    parser.add_argument(
        "--kind", "-k",
        choices=["library", "application"],
        default="library",
        help="Type of project (default: library)",
    )
    parser.add_argument(
        "--deps", "-d",
        default="",
        help='Comma-separated dependencies, e.g. "spdlog@1.14.1,google/googletest@v1.14.0"',
    )
    parser.add_argument("--std", default=None, help="C++ standard (default: 23)")
    parser.add_argument("--cmake", default=None, help="Minimum CMake version (default: 3.20)")
    parser.add_argument(
        "--no-tests",
        dest="include_tests",
        action="store_false",
        default=None,
        help="Do not generate a GoogleTest suite",
    )
    parser.add_argument(
        "--examples",
        dest="include_examples",
        action="store_true",
        default=None,
        help="Generate an example program",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpp-scaffold",
        description="cpp-scaffold -- CMake + CPM C++ project generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  cpp-scaffold generate mylib --deps spdlog@1.14.1,curl\n"
            "  cpp-scaffold preview myapp --kind application --examples\n"
            "  cpp-scaffold download mylib -o ./downloads\n"
        ),
    )
    parser.add_argument(
        "--db",
        default=None,
        help="Path to the project database (default: $CPP_SCAFFOLD_DB or ./projects.db)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate and store a project archive")
    _add_project_options(generate)

    preview = sub.add_parser("preview", help="Render a project without storing it")
    _add_project_options(preview)
    preview.add_argument("--show", default=None, help="Print the content of one generated file")

    sub.add_parser("list", help="List stored projects")

    download = sub.add_parser("download", help="Write a stored archive to disk")
    download.add_argument("name")
    download.add_argument(
        "--output", "-o",
        default=".",
        help="Directory to write <name>.zip into (default: current directory)",
    )

    delete = sub.add_parser("delete", help="Delete a stored project")
    delete.add_argument("name")

    return parser


def _form_from_args(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "name": args.name,
        "kind": args.kind,
        "dependencies": args.deps,
        "language_standard": args.std,
        "build_tool_version": args.cmake,
        "include_tests": args.include_tests,
        "include_examples": args.include_examples,
    }


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_generate(service: ProjectService, args: argparse.Namespace) -> None:
    record = asyncio.run(service.generate_from_form(_form_from_args(args)))
    print_summary_table(
        {
            "Name": record.name,
            "Kind": record.kind.value,
            "C++ standard": record.language_standard,
            "CMake": record.build_tool_version,
            "Tests": "yes" if record.include_tests else "no",
            "Examples": "yes" if record.include_examples else "no",
            "Dependencies": ", ".join(record.dependencies) or "-",
            "Archive": format_size(record.archive_size),
        },
        title=f"Project {record.name}",
    )
    print_success(f"Project {record.name} generated successfully")


def _cmd_preview(service: ProjectService, args: argparse.Namespace) -> None:
    descriptor = service.build_descriptor(_form_from_args(args))
    files = service.preview(descriptor)

    if args.show:
        if args.show not in files:
            raise ScaffoldError(f"{args.show} is not part of the generated project")
        lexer = "cmake" if args.show.endswith(("CMakeLists.txt", ".cmake")) else "cpp"
        if args.show.endswith(".md"):
            lexer = "markdown"
        console.print(Syntax(files[args.show], lexer, line_numbers=True))
        return

    table = Table(title=f"{descriptor.name} ({len(files)} files)", header_style="bold cyan")
    table.add_column("Path")
    table.add_column("Lines", justify="right")
    for path, content in files.items():
        table.add_row(path, str(content.count("\n")))
    console.print(table)


def _cmd_list(service: ProjectService, args: argparse.Namespace) -> None:
    projects = service.list_projects()
    if not projects:
        console.print("[dim]No projects stored yet.[/dim]")
        return

    table = Table(title="Projects", header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Kind")
    table.add_column("C++")
    table.add_column("CMake")
    table.add_column("Dependencies")
    table.add_column("Size", justify="right")
    table.add_column("Created")
    for record in projects:
        table.add_row(
            record.name,
            record.kind.value,
            record.language_standard,
            record.build_tool_version,
            ", ".join(record.dependencies) or "-",
            format_size(record.archive_size),
            record.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def _cmd_download(service: ProjectService, args: argparse.Namespace) -> None:
    filename, data = service.download(args.name)
    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / filename
    target.write_bytes(data)
    print_success(f"Wrote {target} ({format_size(len(data))})")


def _cmd_delete(service: ProjectService, args: argparse.Namespace) -> None:
    service.delete(args.name)
    print_success(f"Project {args.name} deleted successfully")


_COMMANDS = {
    "generate": _cmd_generate,
    "preview": _cmd_preview,
    "list": _cmd_list,
    "download": _cmd_download,
    "delete": _cmd_delete,
}


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``python -m cpp_scaffold``."""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        return 1
    if args.db:
        config.database_path = Path(args.db)

    service = ProjectService(config)
    try:
        _COMMANDS[args.command](service, args)
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return 1
    finally:
        service.store.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
