"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of where each record and project came from
2. Debugging capability when an import aborts half-way
3. A history the user can inspect

The audit logger:
- Gracefully handles failures (a broken audit store never breaks an import)
- Supports correlation IDs to trace all events of one import/export/report
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledgerbook.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from ledgerbook.models.record import ValidationIssue
from ledgerbook.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("ledgerbook.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_import_started(
        self,
        filename: str,
        file_type: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.import_started(
            filename=filename,
            file_type=file_type,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_import_completed(
        self,
        inserted: int,
        skipped_blank: int,
        skipped_short: int,
        created_projects: list[str],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.import_completed(
            inserted=inserted,
            skipped_blank=skipped_blank,
            skipped_short=skipped_short,
            created_projects=created_projects,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_import_failed(
        self,
        error_type: str,
        error_message: str,
        records_kept: int,
        projects_kept: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log an aborted import, including what stayed committed."""
        event = AuditEventBuilder.import_failed(
            error_type=error_type,
            error_message=error_message,
            records_kept=records_kept,
            projects_kept=projects_kept,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_validation_warning(
        self,
        line_number: Optional[int],
        issues: list[ValidationIssue],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.validation_warning(
            line_number=line_number,
            issues=[issue.model_dump() for issue in issues],
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_project_created(
        self,
        project_id: UUID,
        name: str,
        is_default: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.project_created(
            project_id=project_id,
            name=name,
            is_default=is_default,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_default_changed(
        self,
        project_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.default_project_changed(
            project_id=project_id,
            name=name,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_project_renamed(
        self,
        project_id: UUID,
        old_name: str,
        new_name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.project_renamed(
            project_id=project_id,
            old_name=old_name,
            new_name=new_name,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_project_deleted(
        self,
        project_id: UUID,
        name: str,
        migrated_to: UUID,
        moved_records: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.project_deleted(
            project_id=project_id,
            name=name,
            migrated_to=migrated_to,
            moved_records=moved_records,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_export_completed(
        self,
        file_format: str,
        record_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.export_completed(
            file_format=file_format,
            record_count=record_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_report_generated(
        self,
        mode: str,
        kind: str,
        currencies: list[str],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.report_generated(
            mode=mode,
            kind=kind,
            currencies=currencies,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (an import, an export, a report)
    and pass it through all subsequent operations.
    """
    return uuid4()
