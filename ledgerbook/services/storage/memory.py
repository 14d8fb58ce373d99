"""
In-Memory Storage Implementation

Keeps records, projects and audit events in dictionaries and lists.
Used by the tests and as the base of the JSON file store, which adds
loading and durable commits on top.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from ledgerbook.models.audit import AuditEvent
from ledgerbook.models.record import LedgerRecord, Project, utcnow
from ledgerbook.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStore,
    NotFoundError,
)


class InMemoryLedgerStore(LedgerStore):
    """Dictionary-backed record and project store."""

    def __init__(self):
        self._records: dict[UUID, LedgerRecord] = {}
        self._projects: dict[UUID, Project] = {}
        self.commit_count = 0

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def save_record(self, record: LedgerRecord) -> None:
        if record.id in self._records:
            raise DuplicateError(f"Record already exists: {record.id}")
        self._records[record.id] = record

    def update_record(self, record: LedgerRecord) -> None:
        if record.id not in self._records:
            raise NotFoundError(f"Record not found: {record.id}")
        record.touch()
        self._records[record.id] = record

    def delete_record(self, record_id: UUID) -> None:
        if self._records.pop(record_id, None) is None:
            raise NotFoundError(f"Record not found: {record_id}")

    def fetch_records(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[LedgerRecord]:
        records = [
            record for record in self._records.values()
            if (date_from is None or record.occurred_at >= date_from)
            and (date_to is None or record.occurred_at <= date_to)
        ]
        records.sort(key=lambda r: r.occurred_at, reverse=True)
        return records

    def reassign_records_project(self, old_project_id: UUID, new_project_id: UUID) -> int:
        moved = 0
        for record in self._records.values():
            if record.project_id == old_project_id:
                record.project_id = new_project_id
                record.touch()
                moved += 1
        return moved

    def commit(self) -> None:
        self.commit_count += 1

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def save_project(self, project: Project) -> None:
        if project.id in self._projects:
            raise DuplicateError(f"Project already exists: {project.id}")
        self._projects[project.id] = project
        self.commit()

    def update_project(self, project: Project) -> None:
        if project.id not in self._projects:
            raise NotFoundError(f"Project not found: {project.id}")
        project.updated_at = utcnow()
        self._projects[project.id] = project
        self.commit()

    def fetch_all_projects(self) -> list[Project]:
        return sorted(self._projects.values(), key=lambda p: p.created_at)

    def fetch_default_project(self) -> Optional[Project]:
        for project in self.fetch_all_projects():
            if project.is_default:
                return project
        return None

    def set_default_project(self, project_id: UUID) -> Project:
        target = self._projects.get(project_id)
        if target is None:
            raise NotFoundError(f"Project not found: {project_id}")
        for project in self._projects.values():
            project.is_default = project.id == project_id
        target.updated_at = utcnow()
        self.commit()
        return target

    def delete_project(self, project_id: UUID) -> None:
        if self._projects.pop(project_id, None) is None:
            raise NotFoundError(f"Project not found: {project_id}")
        self.commit()


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
