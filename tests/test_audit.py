"""Tests for the audit logger."""

from uuid import uuid4

from ledgerbook.audit import AuditLogger, create_correlation_id
from ledgerbook.models.audit import AuditEventBuilder, AuditEventType
from ledgerbook.services.storage import InMemoryAuditStorage


class FailingAuditStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise OSError("disk full")


class TestAuditLogger:
    """Tests for local logging plus persistence."""

    def test_persists_events(self, audit_logger, audit_storage):
        correlation_id = create_correlation_id()
        audit_logger.log_import_started("a.csv", "csv", correlation_id)
        audit_logger.log_import_completed(3, 1, 0, ["旅行"], correlation_id)

        events = audit_storage.get_events_by_correlation_id(correlation_id)
        assert [e.event_type for e in events] == [
            AuditEventType.IMPORT_STARTED,
            AuditEventType.IMPORT_COMPLETED,
        ]
        assert events[1].details["created_projects"] == ["旅行"]

    def test_without_storage(self):
        logger = AuditLogger()
        assert logger.log(AuditEventBuilder.export_completed("csv", 0, uuid4())) is True

    def test_storage_failure_is_not_raised(self):
        logger = AuditLogger(FailingAuditStorage())
        event = AuditEventBuilder.system_error("StorageError", "boom")
        assert logger.log(event) is False

    def test_project_events(self, audit_logger, audit_storage):
        project_id, target_id = uuid4(), uuid4()
        audit_logger.log_project_renamed(project_id, "旧", "新")
        audit_logger.log_project_deleted(project_id, "新", target_id, 4)

        deleted = audit_storage.get_recent_events(limit=1)[0]
        assert deleted.event_type == AuditEventType.PROJECT_DELETED
        assert deleted.details == {"name": "新", "migrated_to": str(target_id), "moved_records": 4}
