"""
Reconciliation Engine

Merges normalized import rows into the store: resolves each row's
project name to an existing project (or creates one), persists a
record per row, commits once, then notifies the caller.

IMPORTANT: Reconciliation is only partially atomic. Projects are durable
as soon as they are created, and when a row fails mid-import the records
inserted so far are committed before the error propagates. The failure is
logged with the number of records and projects kept.
"""

from typing import Callable, Iterable, Optional
from uuid import UUID

import structlog

from ledgerbook.audit.logger import AuditLogger
from ledgerbook.config import LedgerSettings, get_settings
from ledgerbook.models.record import LedgerRecord, ParsedRow, Project
from ledgerbook.services.importer.errors import EmptyFile
from ledgerbook.services.storage import LedgerStore
from ledgerbook.validation.validator import RecordValidator

logger = structlog.get_logger(__name__)

ChangeCallback = Callable[[int], None]


class Reconciler:
    """
    Inserts parsed rows as ledger records.

    Usage:
        reconciler = Reconciler(store, audit_logger)
        inserted = reconciler.reconcile(rows, on_change=refresh_view)
    """

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[RecordValidator] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or RecordValidator(self._settings)
        self.inserted = 0
        self.created_projects: list[Project] = []

    def reconcile(
        self,
        rows: Iterable[ParsedRow],
        on_change: Optional[ChangeCallback] = None,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Persist every row and commit once.

        Args:
            rows: Parsed rows; may be a lazy iterable that raises mid-way
            on_change: Called once with the inserted count after commit
            correlation_id: Ties audit events to the surrounding import

        Returns:
            Number of records inserted

        Raises:
            EmptyFile: If there are no rows (nothing is mutated)
            LedgerImportError: From the row source; earlier rows stay committed
        """
        self.inserted = 0
        self.created_projects = []

        iterator = iter(rows)
        first = next(iterator, None)
        if first is None:
            raise EmptyFile()

        lookup = {project.name: project for project in self._store.fetch_all_projects()}
        fallback = self._resolve_fallback(lookup, correlation_id)

        try:
            row: Optional[ParsedRow] = first
            while row is not None:
                project = self._resolve_project(row.project_name, lookup, fallback, correlation_id)
                self._insert(row, project, correlation_id)
                row = next(iterator, None)
        except Exception:
            self._store.commit()
            logger.warning(
                "import_aborted_partial_data_kept",
                records_kept=self.inserted,
                projects_kept=[p.name for p in self.created_projects],
            )
            raise

        self._store.commit()
        logger.info(
            "reconcile_completed",
            inserted=self.inserted,
            created_projects=len(self.created_projects),
        )
        if on_change is not None:
            on_change(self.inserted)
        return self.inserted

    def _resolve_fallback(
        self,
        lookup: dict[str, Project],
        correlation_id: Optional[UUID],
    ) -> Project:
        """Current default, else the oldest project, else a new default."""
        default = self._store.fetch_default_project()
        if default is not None:
            return default

        projects = self._store.fetch_all_projects()
        if projects:
            return projects[0]

        project = Project(name=self._settings.default_project_name, is_default=True)
        self._create_project(project, lookup, correlation_id)
        return project

    def _resolve_project(
        self,
        name: str,
        lookup: dict[str, Project],
        fallback: Project,
        correlation_id: Optional[UUID],
    ) -> Project:
        name = name.strip()
        if not name or name == self._settings.unknown_project_label:
            return fallback
        project = lookup.get(name)
        if project is None:
            project = Project(name=name)
            self._create_project(project, lookup, correlation_id)
        return project

    def _create_project(
        self,
        project: Project,
        lookup: dict[str, Project],
        correlation_id: Optional[UUID],
    ) -> None:
        self._store.save_project(project)
        lookup[project.name] = project
        self.created_projects.append(project)
        self._audit.log_project_created(
            project_id=project.id,
            name=project.name,
            is_default=project.is_default,
            correlation_id=correlation_id,
        )

    def _insert(
        self,
        row: ParsedRow,
        project: Project,
        correlation_id: Optional[UUID],
    ) -> None:
        record = LedgerRecord(
            amount_minor=row.amount_minor,
            currency=row.currency,
            kind=row.kind,
            occurred_at=row.occurred_at,
            project_id=project.id,
            category_l1=row.category_l1,
            category_l2=row.category_l2,
            note=row.note,
        )
        self._store.save_record(record)
        self.inserted += 1

        issues = self._validator.validate(row)
        if issues:
            self._audit.log_validation_warning(
                line_number=row.line_number,
                issues=issues,
                correlation_id=correlation_id,
            )
