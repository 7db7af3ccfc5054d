"""Zip packaging of a materialized project tree."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path


def create_archive(project_root: Path, destination: Path, compression_level: int = 6) -> Path:
    """Zip every file below *project_root* into *destination*.

    Entry names are rooted at the project directory name, so extracting the
    archive recreates ``<project>/...``.  Files are added in sorted order.
    """
    base = project_root.parent
    destination.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(
        destination,
        "w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=compression_level,
    ) as zf:
        for path in sorted(project_root.rglob("*")):
            if path.is_file():
                zf.write(path, path.relative_to(base).as_posix())
    return destination


def list_archive(data: bytes) -> list[str]:
    """Return the entry names of an in-memory zip archive."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return zf.namelist()
