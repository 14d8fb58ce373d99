"""
Data Models Package

This package contains all Pydantic models used in ledgerbook.
All data flowing through the import, export and report pipelines
conforms to these schemas.
"""

from ledgerbook.models.record import (
    Currency,
    LedgerRecord,
    ParsedRow,
    Project,
    TransactionKind,
    ValidationIssue,
    format_amount,
    from_minor_units,
    to_minor_units,
)
from ledgerbook.models.categories import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    INCOME_LEVEL1,
    Category,
    expense_level1_labels,
    expense_level2_labels,
    is_known_category,
)
from ledgerbook.models.report import (
    AggregateGroup,
    CurrencyBreakdown,
    GroupingMode,
    IncomeExpenseTotals,
)
from ledgerbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Currency",
    "LedgerRecord",
    "ParsedRow",
    "Project",
    "TransactionKind",
    "ValidationIssue",
    "format_amount",
    "from_minor_units",
    "to_minor_units",
    # Category dictionary
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "INCOME_LEVEL1",
    "Category",
    "expense_level1_labels",
    "expense_level2_labels",
    "is_known_category",
    # Report models
    "AggregateGroup",
    "CurrencyBreakdown",
    "GroupingMode",
    "IncomeExpenseTotals",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
