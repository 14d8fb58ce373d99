"""
Project Management

User-facing project operations: listing, adding, renaming, choosing the
default project, and deleting a project after moving its records.

At most one project is flagged default, and the default project cannot
be deleted, so imports always have somewhere to put unassigned rows.
"""

from typing import Optional
from uuid import UUID

import structlog

from ledgerbook.audit.logger import AuditLogger
from ledgerbook.config import LedgerSettings, get_settings
from ledgerbook.models.record import Project
from ledgerbook.services.storage import LedgerStore, NotFoundError

logger = structlog.get_logger(__name__)


class ProjectError(ValueError):
    """An invalid project-management request."""
    pass


class ProjectManager:
    """Project CRUD on top of a ledger store."""

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings()

    def list_projects(self) -> list[Project]:
        return self._store.fetch_all_projects()

    def get_project(self, project_id: UUID) -> Project:
        for project in self._store.fetch_all_projects():
            if project.id == project_id:
                return project
        raise NotFoundError(f"Project not found: {project_id}")

    def find_by_name(self, name: str) -> Optional[Project]:
        """First project with exactly this (trimmed) name."""
        name = name.strip()
        for project in self._store.fetch_all_projects():
            if project.name == name:
                return project
        return None

    def add_project(self, name: str, is_default: bool = False) -> Project:
        """
        Create a project.

        Raises:
            ProjectError: If the name is blank or already taken
        """
        name = self._clean_name(name)
        if self.find_by_name(name) is not None:
            raise ProjectError(f"Project already exists: {name}")

        project = Project(name=name)
        self._store.save_project(project)
        if is_default:
            project = self._store.set_default_project(project.id)
        self._audit.log_project_created(project.id, project.name, project.is_default)
        return project

    def rename_project(self, project_id: UUID, name: str) -> Project:
        name = self._clean_name(name)
        project = self.get_project(project_id)
        if project.name == name:
            return project
        if self.find_by_name(name) is not None:
            raise ProjectError(f"Project already exists: {name}")

        old_name = project.name
        project.name = name
        self._store.update_project(project)
        self._audit.log_project_renamed(project.id, old_name, name)
        return project

    def set_default(self, project_id: UUID) -> Project:
        """Flag one project as default, clearing the flag on all others."""
        project = self._store.set_default_project(project_id)
        self._audit.log_default_changed(project.id, project.name)
        return project

    def delete_project(self, project_id: UUID, migrate_to_id: UUID) -> int:
        """
        Move a project's records to another project, then delete it.

        Returns:
            Number of records moved

        Raises:
            ProjectError: When deleting the default project or migrating
                a project into itself
            NotFoundError: When either project doesn't exist
        """
        if project_id == migrate_to_id:
            raise ProjectError("Cannot migrate a project's records into itself")

        project = self.get_project(project_id)
        target = self.get_project(migrate_to_id)
        if project.is_default:
            raise ProjectError(f"Cannot delete the default project: {project.name}")

        moved = self._store.reassign_records_project(project.id, target.id)
        self._store.commit()
        self._store.delete_project(project.id)
        self._audit.log_project_deleted(project.id, project.name, target.id, moved)
        return moved

    def ensure_default_project(self) -> Project:
        """
        Return the default project, creating one if the store has none.

        An existing project list without a default gets its oldest
        project promoted; an empty store gets a new default project.
        """
        default = self._store.fetch_default_project()
        if default is not None:
            return default

        projects = self._store.fetch_all_projects()
        if projects:
            return self.set_default(projects[0].id)

        logger.info("creating_default_project", name=self._settings.default_project_name)
        return self.add_project(self._settings.default_project_name, is_default=True)

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ProjectError("Project name cannot be empty")
        return name
