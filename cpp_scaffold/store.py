"""
Project Store
=============

SQLAlchemy models and a small repository class for persisting generated
project archives together with the options they were generated from.
Projects are keyed by their unique name.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from pydantic import BaseModel
from sqlalchemy import Boolean, Column, DateTime, Integer, LargeBinary, String, Text, create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .config import Config
from .errors import DuplicateProjectError, ProjectNotFoundError
from .scaffolder.generator import ProjectDescriptor, ProjectKind

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 style declarative base."""
    pass


def _utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


class StoredProject(Base):
    """A generated project archive and its generation options."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    kind = Column(String(20), nullable=False)
    dependencies = Column(Text, nullable=False, default="[]")  # JSON list of raw tokens
    cpp_standard = Column(String(20), nullable=False)
    cmake_version = Column(String(20), nullable=False)
    include_tests = Column(Boolean, nullable=False)
    include_examples = Column(Boolean, nullable=False)
    zip_data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utc_now)


class ProjectRecord(BaseModel):
    """Metadata of one stored project (the archive is fetched separately)."""

    id: int
    name: str
    kind: ProjectKind
    dependencies: list[str]
    language_standard: str
    build_tool_version: str
    include_tests: bool
    include_examples: bool
    archive_size: int
    created_at: datetime

    @classmethod
    def from_row(cls, row: StoredProject) -> "ProjectRecord":
        created = row.created_at
        if created is not None and created.tzinfo is None:
            # SQLite drops the offset; values are always written in UTC.
            created = created.replace(tzinfo=timezone.utc)
        return cls(
            id=row.id,
            name=row.name,
            kind=row.kind,
            dependencies=json.loads(row.dependencies or "[]"),
            language_standard=row.cpp_standard,
            build_tool_version=row.cmake_version,
            include_tests=bool(row.include_tests),
            include_examples=bool(row.include_examples),
            archive_size=len(row.zip_data or b""),
            created_at=created,
        )

    def to_descriptor(self) -> ProjectDescriptor:
        """Rebuild the descriptor this project was generated from."""
        return ProjectDescriptor(
            name=self.name,
            kind=self.kind,
            dependencies=tuple(self.dependencies),
            language_standard=self.language_standard,
            build_tool_version=self.build_tool_version,
            include_tests=self.include_tests,
            include_examples=self.include_examples,
        )


class ProjectStore:
    """Create/read/list/delete access to stored projects."""

    def __init__(self, database_url: str) -> None:
        self.engine = create_engine(
            database_url,
            echo=False,
            connect_args={
                "check_same_thread": False,
                "timeout": 30,
            },
        )
        Base.metadata.create_all(self.engine)
        self._session_factory = sessionmaker(bind=self.engine)
        logger.debug("Opened project store at %s", database_url)

    @classmethod
    def from_config(cls, config: Config) -> "ProjectStore":
        config.database_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(config.database_url)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def save(self, descriptor: ProjectDescriptor, archive: bytes) -> ProjectRecord:
        """Store *archive* under ``descriptor.name``.

        Raises:
            DuplicateProjectError: If the name is already taken.
            sqlalchemy.exc.IntegrityError: For any other constraint violation.
        """
        db = self._session_factory()
        try:
            row = StoredProject(
                name=descriptor.name,
                kind=descriptor.kind.value,
                dependencies=json.dumps(list(descriptor.dependencies)),
                cpp_standard=descriptor.language_standard,
                cmake_version=descriptor.build_tool_version,
                include_tests=descriptor.include_tests,
                include_examples=descriptor.include_examples,
                zip_data=archive,
            )
            db.add(row)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if not self.exists(descriptor.name):
                    raise
                raise DuplicateProjectError(descriptor.name) from exc
            db.refresh(row)
            logger.info("Stored project %s (id %d, %d bytes)", row.name, row.id, len(archive))
            return ProjectRecord.from_row(row)
        finally:
            db.close()

    def exists(self, name: str) -> bool:
        db = self._session_factory()
        try:
            return db.query(StoredProject.id).filter(StoredProject.name == name).first() is not None
        finally:
            db.close()

    def get(self, name: str) -> ProjectRecord:
        """Return the record for *name* or raise ``ProjectNotFoundError``."""
        db = self._session_factory()
        try:
            return ProjectRecord.from_row(self._get_row(db, name))
        finally:
            db.close()

    def get_archive(self, name: str) -> bytes:
        """Return the stored zip archive bytes for *name*."""
        db = self._session_factory()
        try:
            return bytes(self._get_row(db, name).zip_data)
        finally:
            db.close()

    def list_all(self) -> list[ProjectRecord]:
        """Return every stored project, most recent first."""
        db = self._session_factory()
        try:
            rows = (
                db.query(StoredProject)
                .order_by(StoredProject.created_at.desc(), StoredProject.id.desc())
                .all()
            )
            return [ProjectRecord.from_row(row) for row in rows]
        finally:
            db.close()

    def delete(self, name: str) -> None:
        """Delete the project called *name*.

        Raises:
            ProjectNotFoundError: If no such project is stored.
        """
        db = self._session_factory()
        try:
            deleted = db.query(StoredProject).filter(StoredProject.name == name).delete()
            db.commit()
        finally:
            db.close()
        if not deleted:
            raise ProjectNotFoundError(name)
        logger.info("Deleted project %s", name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _get_row(db, name: str) -> StoredProject:
        row = db.query(StoredProject).filter(StoredProject.name == name).first()
        if row is None:
            raise ProjectNotFoundError(name)
        return row

