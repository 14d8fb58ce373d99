"""
Tests for ledgerbook models

Test strategy:
1. Unit tests for individual components (models, parsers, aggregation)
2. Integration tests for flows against the in-memory store
3. File I/O only under pytest's tmp_path
"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from ledgerbook.models import (
    AggregateGroup,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Currency,
    IncomeExpenseTotals,
    LedgerRecord,
    ParsedRow,
    Project,
    TransactionKind,
    expense_level1_labels,
    expense_level2_labels,
    format_amount,
    from_minor_units,
    is_known_category,
    to_minor_units,
)


class TestMoney:
    """Tests for minor-unit conversion."""

    def test_round_trip_is_exact(self):
        """25.50 survives conversion to minor units and back."""
        minor = to_minor_units(Decimal("25.50"), Currency.SGD)
        assert minor == 2550
        assert from_minor_units(minor, Currency.SGD) == Decimal("25.50")
        assert format_amount(minor, Currency.SGD) == "25.50"

    def test_rounds_half_up(self):
        assert to_minor_units(Decimal("0.005"), Currency.RMB) == 1
        assert to_minor_units(Decimal("1.234"), Currency.RMB) == 123
        assert to_minor_units(Decimal("2.675"), Currency.USD) == 268

    def test_format_has_no_grouping(self):
        assert format_amount(123456789, Currency.USD) == "1234567.89"
        assert format_amount(5, Currency.USD) == "0.05"


class TestLedgerModels:
    """Tests for record and project models."""

    def test_project_strips_whitespace(self):
        project = Project(name="  旅行  ")
        assert project.name == "旅行"
        assert project.is_default is False

    def test_project_rejects_blank_name(self):
        with pytest.raises(ValueError):
            Project(name="   ")

    def test_record_rejects_non_positive_amount(self):
        with pytest.raises(ValueError):
            LedgerRecord(
                amount_minor=0,
                currency=Currency.SGD,
                kind=TransactionKind.EXPENSE,
                occurred_at=datetime(2024, 1, 1),
                project_id=uuid4(),
                category_l1="日常",
                category_l2="吃饭",
            )

    def test_record_amount_property(self):
        record = LedgerRecord(
            amount_minor=2550,
            currency=Currency.RMB,
            kind=TransactionKind.EXPENSE,
            occurred_at=datetime(2024, 1, 1),
            project_id=uuid4(),
            category_l1="日常",
            category_l2="吃饭",
        )
        assert record.amount == Decimal("25.50")

    def test_parsed_row_is_frozen(self):
        row = ParsedRow(
            occurred_at=datetime(2024, 1, 1),
            kind=TransactionKind.INCOME,
            currency=Currency.USD,
            amount_minor=100,
            category_l1="收入",
            category_l2="工资收入",
        )
        with pytest.raises(ValueError):
            row.amount_minor = 200

    def test_parsed_row_rejects_blank_category(self):
        with pytest.raises(ValueError):
            ParsedRow(
                occurred_at=datetime(2024, 1, 1),
                kind=TransactionKind.EXPENSE,
                currency=Currency.USD,
                amount_minor=100,
                category_l1=" ",
                category_l2="吃饭",
            )

    def test_enum_labels(self):
        assert TransactionKind.EXPENSE.value == "支出"
        assert TransactionKind.INCOME.english_label == "Income"
        assert [c.value for c in Currency] == ["SGD", "RMB", "USD"]
        assert Currency.RMB.symbol == "¥"


class TestCategories:
    """Tests for the category dictionary."""

    def test_expense_groups(self):
        labels = expense_level1_labels()
        assert labels[0] == "娱乐"
        assert len(labels) == 8
        assert expense_level2_labels("出行") == ["地铁", "打车", "机票", "高铁"]
        assert expense_level2_labels("不存在") == []

    def test_known_category(self):
        assert is_known_category(TransactionKind.EXPENSE, "日常", "吃饭")
        assert not is_known_category(TransactionKind.EXPENSE, "日常", "地铁")
        assert is_known_category(TransactionKind.INCOME, "收入", "工资收入")
        assert not is_known_category(TransactionKind.INCOME, "日常", "工资收入")


class TestReportModels:
    """Tests for report output models."""

    def test_percentage(self):
        group = AggregateGroup(
            key="日常",
            label="日常",
            currency=Currency.SGD,
            total_minor=2000,
            currency_total_minor=6000,
            record_count=1,
        )
        assert group.percentage_display == "33.3%"
        assert group.total_display == "S$20.00"

    def test_percentage_of_empty_total(self):
        group = AggregateGroup(
            key="x", label="x", currency=Currency.SGD,
            total_minor=0, currency_total_minor=0, record_count=0,
        )
        assert group.percentage == Decimal(0)

    def test_net(self):
        totals = IncomeExpenseTotals(currency=Currency.USD, income_minor=1000, expense_minor=2500)
        assert totals.net_minor == -1500
        assert totals.net == Decimal("-15.00")


class TestAuditModels:
    """Tests for audit models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            severity=AuditSeverity.INFO,
            correlation_id=correlation_id,
            description="Test event",
        )
        assert event.event_type == AuditEventType.IMPORT_STARTED
        assert event.correlation_id == correlation_id

    def test_import_failed_severity(self):
        """Partial imports are errors, clean failures are warnings."""
        correlation_id = uuid4()
        partial = AuditEventBuilder.import_failed("InvalidFormat", "bad", 2, [], correlation_id)
        clean = AuditEventBuilder.import_failed("EmptyFile", "empty", 0, [], correlation_id)
        assert partial.severity == AuditSeverity.ERROR
        assert clean.severity == AuditSeverity.WARNING
        assert partial.details["records_kept"] == 2

    def test_audit_event_to_log_dict(self):
        """Test converting audit event to log dict."""
        correlation_id = uuid4()
        event = AuditEventBuilder.export_completed("csv", 3, correlation_id)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "export_completed"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["record_count"] == 3
