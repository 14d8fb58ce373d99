"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the import/report core independent of the storage engine
2. Use in-memory storage for testing
3. Swap the JSON file store for a real database later

The store is assumed to serialize all writes through one context;
nothing in the core writes to it concurrently.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from ledgerbook.models.audit import AuditEvent
from ledgerbook.models.record import LedgerRecord, Project


class RecordStorageInterface(ABC):
    """
    Abstract interface for ledger record storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def save_record(self, record: LedgerRecord) -> None:
        """
        Insert a new record.

        Raises:
            DuplicateError: If a record with the same id exists
            StorageError: If the write fails
        """

    @abstractmethod
    def update_record(self, record: LedgerRecord) -> None:
        """
        Replace an existing record (matched by id).

        Raises:
            NotFoundError: If the record doesn't exist
        """

    @abstractmethod
    def delete_record(self, record_id: UUID) -> None:
        """
        Delete a record by id.

        Raises:
            NotFoundError: If the record doesn't exist
        """

    @abstractmethod
    def fetch_records(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[LedgerRecord]:
        """
        Fetch records whose timestamp lies within [date_from, date_to].

        Args:
            date_from: Inclusive lower bound, or None for no bound
            date_to: Inclusive upper bound, or None for no bound

        Returns:
            Matching records, newest first
        """

    @abstractmethod
    def reassign_records_project(self, old_project_id: UUID, new_project_id: UUID) -> int:
        """
        Move every record of one project to another.

        Returns:
            Number of records moved
        """

    @abstractmethod
    def commit(self) -> None:
        """
        Make all pending writes durable.

        In-memory stores treat this as a no-op.
        """


class ProjectStorageInterface(ABC):
    """Abstract interface for project storage."""

    @abstractmethod
    def save_project(self, project: Project) -> None:
        """
        Insert a new project and make it durable immediately.

        Raises:
            DuplicateError: If a project with the same id exists
        """

    @abstractmethod
    def update_project(self, project: Project) -> None:
        """
        Replace an existing project (matched by id).

        Raises:
            NotFoundError: If the project doesn't exist
        """

    @abstractmethod
    def fetch_all_projects(self) -> list[Project]:
        """All projects, oldest first."""

    @abstractmethod
    def fetch_default_project(self) -> Optional[Project]:
        """The project holding the default flag, if any."""

    @abstractmethod
    def set_default_project(self, project_id: UUID) -> Project:
        """
        Flag one project as default and clear the flag everywhere else.

        Raises:
            NotFoundError: If the project doesn't exist
        """

    @abstractmethod
    def delete_project(self, project_id: UUID) -> None:
        """
        Delete a project. Callers migrate its records first.

        Raises:
            NotFoundError: If the project doesn't exist
        """


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """

    @abstractmethod
    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        """All events of one flow, in chronological order."""

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """The most recent events, newest first."""


class LedgerStore(RecordStorageInterface, ProjectStorageInterface):
    """A store serving both records and projects from one write context."""


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
