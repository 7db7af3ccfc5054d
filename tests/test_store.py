"""Unit tests for the SQLAlchemy-backed ProjectStore (cpp_scaffold.store)."""

from __future__ import annotations

from datetime import timezone

import pytest
from sqlalchemy.exc import IntegrityError

from cpp_scaffold.errors import DuplicateProjectError, ProjectNotFoundError
from cpp_scaffold.scaffolder.generator import ProjectDescriptor, ProjectKind
from cpp_scaffold.store import ProjectRecord, ProjectStore


pytestmark = pytest.mark.unit


class TestSave:
    def test_save_returns_record(self, store: ProjectStore, library_descriptor):
        record = store.save(library_descriptor, b"zip-bytes")
        assert isinstance(record, ProjectRecord)
        assert record.id >= 1
        assert record.name == "mathlib"
        assert record.kind is ProjectKind.LIBRARY
        assert record.dependencies == ["spdlog@1.14.1", "nlohmann/json@v3.11.3"]
        assert record.language_standard == "20"
        assert record.build_tool_version == "3.24"
        assert record.include_tests is True
        assert record.include_examples is False
        assert record.archive_size == len(b"zip-bytes")
        assert record.created_at.tzinfo is not None

    def test_ids_increase(self, store: ProjectStore, library_descriptor, application_descriptor):
        first = store.save(library_descriptor, b"a")
        second = store.save(application_descriptor, b"b")
        assert second.id > first.id

    def test_duplicate_name_rejected(self, store: ProjectStore, library_descriptor):
        store.save(library_descriptor, b"a")
        with pytest.raises(DuplicateProjectError) as excinfo:
            store.save(library_descriptor, b"b")
        assert excinfo.value.name == "mathlib"
        assert len(store.list_all()) == 1
        assert store.get_archive("mathlib") == b"a"

    def test_other_constraint_violation_is_not_duplicate(self, store: ProjectStore, library_descriptor):
        with pytest.raises(IntegrityError):
            store.save(library_descriptor, None)
        assert store.exists("mathlib") is False


class TestRead:
    def test_get(self, store: ProjectStore, application_descriptor):
        store.save(application_descriptor, b"abc")
        record = store.get("server_app")
        assert record.kind is ProjectKind.APPLICATION
        assert record.dependencies == []
        assert record.created_at.tzinfo == timezone.utc

    def test_get_missing(self, store: ProjectStore):
        with pytest.raises(ProjectNotFoundError):
            store.get("ghost")

    def test_get_archive(self, store: ProjectStore, library_descriptor):
        store.save(library_descriptor, b"\x50\x4b\x03\x04data")
        assert store.get_archive("mathlib") == b"\x50\x4b\x03\x04data"

    def test_get_archive_missing(self, store: ProjectStore):
        with pytest.raises(ProjectNotFoundError):
            store.get_archive("ghost")

    def test_exists(self, store: ProjectStore, library_descriptor):
        assert store.exists("mathlib") is False
        store.save(library_descriptor, b"a")
        assert store.exists("mathlib") is True

    def test_list_all_newest_first(self, store: ProjectStore):
        for name in ("alpha", "beta", "gamma"):
            store.save(ProjectDescriptor(name=name, kind="library"), b"x")
        assert [r.name for r in store.list_all()] == ["gamma", "beta", "alpha"]

    def test_list_all_empty(self, store: ProjectStore):
        assert store.list_all() == []

    def test_record_to_descriptor(self, store: ProjectStore, library_descriptor):
        record = store.save(library_descriptor, b"a")
        assert record.to_descriptor() == library_descriptor


class TestDelete:
    def test_delete(self, store: ProjectStore, library_descriptor):
        store.save(library_descriptor, b"a")
        store.delete("mathlib")
        assert store.exists("mathlib") is False

    def test_delete_missing(self, store: ProjectStore):
        with pytest.raises(ProjectNotFoundError):
            store.delete("ghost")

    def test_name_reusable_after_delete(self, store: ProjectStore, library_descriptor):
        store.save(library_descriptor, b"a")
        store.delete("mathlib")
        record = store.save(library_descriptor, b"b")
        assert store.get_archive(record.name) == b"b"
