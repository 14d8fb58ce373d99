"""
Audit Models for ledgerbook

Every import, export, report and project change is logged for audit purposes.
This provides:
1. Traceability of where each record and project came from
2. Debugging information when an import aborts half-way
3. A history the user can inspect

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledgerbook.models.record import utcnow


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the import/export pipeline has its own event type.
    """
    # Import
    IMPORT_STARTED = "import_started"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_FAILED = "import_failed"
    VALIDATION_WARNING = "validation_warning"

    # Projects
    PROJECT_CREATED = "project_created"
    DEFAULT_PROJECT_CHANGED = "default_project_changed"
    PROJECT_RENAMED = "project_renamed"
    PROJECT_DELETED = "project_deleted"

    # Output
    EXPORT_COMPLETED = "export_completed"
    REPORT_GENERATED = "report_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = Field(default=AuditSeverity.INFO)

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'import', 'project', 'export')"
    )
    entity_id: Optional[UUID] = None

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one import)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.import_started("old_phone.csv", "csv", correlation_id)
        event = AuditEventBuilder.project_created(project_id, "旅行", False, correlation_id)
    """

    @staticmethod
    def import_started(
        filename: str,
        file_type: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import started: {filename}",
            details={
                "filename": filename,
                "file_type": file_type,
            },
        )

    @staticmethod
    def import_completed(
        inserted: int,
        skipped_blank: int,
        skipped_short: int,
        created_projects: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import completed: {inserted} records inserted",
            details={
                "inserted": inserted,
                "skipped_blank": skipped_blank,
                "skipped_short": skipped_short,
                "created_projects": created_projects,
            },
        )

    @staticmethod
    def import_failed(
        error_type: str,
        error_message: str,
        records_kept: int,
        projects_kept: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        severity = AuditSeverity.ERROR if records_kept or projects_kept else AuditSeverity.WARNING
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=severity,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Import failed: {error_type}",
            error_code=error_type,
            error_message=error_message,
            details={
                "records_kept": records_kept,
                "projects_kept": projects_kept,
            },
        )

    @staticmethod
    def validation_warning(
        line_number: Optional[int],
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_WARNING,
            severity=AuditSeverity.WARNING,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"Row {line_number} imported with {len(issues)} warnings",
            details={
                "line_number": line_number,
                "issues": issues,
            },
        )

    @staticmethod
    def project_created(
        project_id: UUID,
        name: str,
        is_default: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        kind = "default project" if is_default else "project"
        return AuditEvent(
            event_type=AuditEventType.PROJECT_CREATED,
            entity_type="project",
            entity_id=project_id,
            correlation_id=correlation_id,
            description=f"Created {kind}: {name}",
            details={
                "name": name,
                "is_default": is_default,
            },
        )

    @staticmethod
    def default_project_changed(
        project_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEFAULT_PROJECT_CHANGED,
            entity_type="project",
            entity_id=project_id,
            correlation_id=correlation_id,
            description=f"Default project set to {name}",
            details={"name": name},
        )

    @staticmethod
    def project_renamed(
        project_id: UUID,
        old_name: str,
        new_name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECT_RENAMED,
            entity_type="project",
            entity_id=project_id,
            correlation_id=correlation_id,
            description=f"Project renamed: {old_name} -> {new_name}",
            details={"old_name": old_name, "new_name": new_name},
        )

    @staticmethod
    def project_deleted(
        project_id: UUID,
        name: str,
        migrated_to: UUID,
        moved_records: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECT_DELETED,
            entity_type="project",
            entity_id=project_id,
            correlation_id=correlation_id,
            description=f"Project deleted: {name} ({moved_records} records migrated)",
            details={
                "name": name,
                "migrated_to": str(migrated_to),
                "moved_records": moved_records,
            },
        )

    @staticmethod
    def export_completed(
        file_format: str,
        record_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            correlation_id=correlation_id,
            description=f"Exported {record_count} records as {file_format}",
            details={
                "format": file_format,
                "record_count": record_count,
            },
        )

    @staticmethod
    def report_generated(
        mode: str,
        kind: str,
        currencies: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Report generated: {kind} by {mode}",
            details={
                "mode": mode,
                "kind": kind,
                "currencies": currencies,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
