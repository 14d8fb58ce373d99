"""Tests for project management."""

from uuid import uuid4

import pytest

from conftest import make_record
from ledgerbook.models.audit import AuditEventType
from ledgerbook.reconciliation import ProjectError, ProjectManager
from ledgerbook.services.storage import NotFoundError


@pytest.fixture
def manager(store, audit_logger, settings):
    return ProjectManager(store, audit_logger, settings)


class TestProjectManager:
    """Tests for project CRUD."""

    def test_add_and_list(self, manager):
        manager.add_project("  旅行 ")
        manager.add_project("装修")
        assert [p.name for p in manager.list_projects()] == ["旅行", "装修"]

    def test_add_rejects_blank_and_duplicate(self, manager):
        manager.add_project("旅行")
        with pytest.raises(ProjectError):
            manager.add_project("   ")
        with pytest.raises(ProjectError):
            manager.add_project("旅行")

    def test_add_as_default(self, manager, store):
        manager.add_project("A", is_default=True)
        b = manager.add_project("B", is_default=True)
        assert store.fetch_default_project().id == b.id
        assert sum(p.is_default for p in manager.list_projects()) == 1

    def test_set_default_clears_others(self, manager, store, audit_storage):
        a = manager.add_project("A", is_default=True)
        b = manager.add_project("B")
        manager.set_default(b.id)

        assert store.fetch_default_project().id == b.id
        assert manager.get_project(a.id).is_default is False
        types = [e.event_type for e in audit_storage.get_recent_events()]
        assert AuditEventType.DEFAULT_PROJECT_CHANGED in types

    def test_rename(self, manager):
        project = manager.add_project("旧名")
        manager.rename_project(project.id, " 新名 ")
        assert manager.find_by_name("新名").id == project.id
        assert manager.find_by_name("旧名") is None

    def test_rename_to_taken_name(self, manager):
        manager.add_project("A")
        b = manager.add_project("B")
        with pytest.raises(ProjectError):
            manager.rename_project(b.id, "A")

    def test_unknown_project(self, manager):
        with pytest.raises(NotFoundError):
            manager.set_default(uuid4())


class TestDeleteProject:
    """Deleting a project migrates its records first."""

    def test_moves_records_then_deletes(self, manager, store):
        home = manager.add_project("家", is_default=True)
        trip = manager.add_project("旅行")
        store.save_record(make_record(trip))
        store.save_record(make_record(trip))
        store.save_record(make_record(home))

        moved = manager.delete_project(trip.id, home.id)

        assert moved == 2
        assert [p.name for p in manager.list_projects()] == ["家"]
        assert all(r.project_id == home.id for r in store.fetch_records())

    def test_refuses_default(self, manager):
        home = manager.add_project("家", is_default=True)
        trip = manager.add_project("旅行")
        with pytest.raises(ProjectError):
            manager.delete_project(home.id, trip.id)

    def test_refuses_self_migration(self, manager):
        trip = manager.add_project("旅行")
        with pytest.raises(ProjectError):
            manager.delete_project(trip.id, trip.id)

    def test_missing_target(self, manager):
        trip = manager.add_project("旅行")
        with pytest.raises(NotFoundError):
            manager.delete_project(trip.id, uuid4())
        assert manager.find_by_name("旅行") is not None


class TestEnsureDefault:
    """Tests for guaranteeing a default project."""

    def test_creates_when_empty(self, manager):
        project = manager.ensure_default_project()
        assert project.name == "日常项目"
        assert project.is_default

    def test_promotes_oldest(self, manager):
        first = manager.add_project("A")
        manager.add_project("B")
        assert manager.ensure_default_project().id == first.id

    def test_keeps_existing_default(self, manager):
        manager.add_project("A")
        b = manager.add_project("B", is_default=True)
        assert manager.ensure_default_project().id == b.id
