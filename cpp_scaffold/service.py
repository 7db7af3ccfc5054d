"""Project generation service.

Ties the scaffolder to packaging and persistence:

1. VALIDATE -- build a ``ProjectDescriptor`` from request data.
2. RENDER   -- normalize dependencies and render the file set.
3. PACKAGE  -- write the files to an isolated temporary directory and zip it.
4. STORE    -- persist the archive and its options under the project name.

Listing, downloading and deleting go straight to the ``ProjectStore``.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
import zipfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .archive import create_archive
from .config import Config
from .errors import DuplicateProjectError, PackagingError, ProjectValidationError
from .scaffolder.generator import ProjectDescriptor, ProjectGenerator
from .store import ProjectRecord, ProjectStore
from .utils import ensure_dir


class ProjectService:
    """Generates, stores and serves C++ project archives.

    Attributes:
        config: Service configuration.
        store: Persistence backend for archives and their metadata.
    """

    def __init__(self, config: Config | None = None, store: ProjectStore | None = None) -> None:
        self.config = config or Config()
        self.store = store or ProjectStore.from_config(self.config)

    # -- Validation --------------------------------------------------------

    def build_descriptor(self, data: Mapping[str, Any]) -> ProjectDescriptor:
        """Validate form-style request data into a descriptor.

        Raises:
            ProjectValidationError: If ``name`` or ``kind`` is missing or
                invalid, or ``dependencies`` is badly typed.
        """
        try:
            return ProjectDescriptor.from_form(data, self.config.defaults)
        except ValidationError as exc:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
            raise ProjectValidationError(
                f"Invalid project request: {', '.join(fields) or 'unknown field'}",
                errors=[dict(err) for err in exc.errors()],
            ) from exc

    # -- Generation --------------------------------------------------------

    def preview(self, descriptor: ProjectDescriptor, *, year: int | None = None) -> dict[str, str]:
        """Render the file set without packaging or storing anything."""
        return ProjectGenerator(descriptor, year=year).files()

    async def generate(
        self, descriptor: ProjectDescriptor, *, year: int | None = None
    ) -> ProjectRecord:
        """Render, package and store *descriptor*.

        Raises:
            DuplicateProjectError: If a project with this name is stored.
            PackagingError: If writing or zipping the project fails.
        """
        if await asyncio.to_thread(self.store.exists, descriptor.name):
            raise DuplicateProjectError(descriptor.name)

        archive = await self.package(descriptor, year=year)
        return await asyncio.to_thread(self.store.save, descriptor, archive)

    async def generate_from_form(
        self, data: Mapping[str, Any], *, year: int | None = None
    ) -> ProjectRecord:
        """Validate *data* and generate the project it describes."""
        return await self.generate(self.build_descriptor(data), year=year)

    async def package(
        self, descriptor: ProjectDescriptor, *, year: int | None = None
    ) -> bytes:
        """Materialize *descriptor* in a temporary directory and return the zip bytes.

        The temporary directory is always removed, whether packaging succeeds
        or not.
        """
        parent = ensure_dir(self.config.work_dir) if self.config.work_dir else None
        work_dir = Path(
            await asyncio.to_thread(tempfile.mkdtemp, prefix="cpp-project-", dir=parent)
        )
        try:
            project_root = await ProjectGenerator(descriptor, year=year).generate(work_dir)
            zip_path = await asyncio.to_thread(
                create_archive,
                project_root,
                work_dir / f"{descriptor.name}.zip",
                self.config.compression_level,
            )
            return await asyncio.to_thread(zip_path.read_bytes)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise PackagingError(f"Failed to package project {descriptor.name}: {exc}") from exc
        finally:
            await asyncio.to_thread(shutil.rmtree, work_dir, True)

    # -- Stored projects ---------------------------------------------------

    def list_projects(self) -> list[ProjectRecord]:
        return self.store.list_all()

    def get_project(self, name: str) -> ProjectRecord:
        return self.store.get(name)

    def download(self, name: str) -> tuple[str, bytes]:
        """Return ``(filename, archive bytes)`` for the stored project *name*."""
        return f"{name}.zip", self.store.get_archive(name)

    def delete(self, name: str) -> None:
        self.store.delete(name)
