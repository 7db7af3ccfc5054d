"""cpp-scaffold configuration.

Centralised, typed configuration for the generator service.  All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class DefaultsConfig(BaseModel):
    """Values used when a generation request leaves a field out."""

    language_standard: str = Field(default="23", min_length=1)
    build_tool_version: str = Field(default="3.20", min_length=1)
    include_tests: bool = Field(default=True)
    include_examples: bool = Field(default=False)


class Config(BaseModel):
    """Global cpp-scaffold configuration.

    Instances are typically created once by the CLI entry point and passed to
    ``ProjectService``.
    """

    database_path: Path = Field(default=Path("./projects.db"))
    work_dir: Path | None = Field(
        default=None,
        description="Parent directory for temporary build areas (system temp dir if unset)",
    )
    compression_level: int = Field(default=6, ge=0, le=9)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the project store."""
        return f"sqlite:///{self.database_path.as_posix()}"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CPP_SCAFFOLD_DB, CPP_SCAFFOLD_WORK_DIR,
            CPP_SCAFFOLD_CPP_STANDARD, CPP_SCAFFOLD_CMAKE_VERSION,
            CPP_SCAFFOLD_COMPRESSION_LEVEL.
        """
        defaults_kwargs: dict[str, Any] = {}
        if os.environ.get("CPP_SCAFFOLD_CPP_STANDARD"):
            defaults_kwargs["language_standard"] = os.environ["CPP_SCAFFOLD_CPP_STANDARD"]
        if os.environ.get("CPP_SCAFFOLD_CMAKE_VERSION"):
            defaults_kwargs["build_tool_version"] = os.environ["CPP_SCAFFOLD_CMAKE_VERSION"]

        kwargs: dict[str, Any] = {}
        if os.environ.get("CPP_SCAFFOLD_DB"):
            kwargs["database_path"] = Path(os.environ["CPP_SCAFFOLD_DB"])
        if os.environ.get("CPP_SCAFFOLD_WORK_DIR"):
            kwargs["work_dir"] = Path(os.environ["CPP_SCAFFOLD_WORK_DIR"])
        if os.environ.get("CPP_SCAFFOLD_COMPRESSION_LEVEL"):
            kwargs["compression_level"] = int(os.environ["CPP_SCAFFOLD_COMPRESSION_LEVEL"])

        return cls(defaults=DefaultsConfig(**defaults_kwargs), **kwargs)
