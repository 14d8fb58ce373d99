"""
Semantic Row Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - FORMAT (normalizer.py):
- Date, amount, currency and type must parse
- Category labels must be present
- Failures raise InvalidFormat and abort the import

STAGE 2 - SEMANTIC (this module):
- Category pair not in the category dictionary
- Dates far in the future
- Absurdly large amounts
- Issues are warnings only; the row is still imported

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so they show up in the audit log.
"""

from datetime import datetime, timedelta
from typing import Optional

from ledgerbook.config import LedgerSettings, get_settings
from ledgerbook.models.categories import is_known_category
from ledgerbook.models.record import ParsedRow, ValidationIssue, from_minor_units


class RecordValidator:
    """
    Checks normalized rows for suspicious but importable values.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings()

    def validate(
        self,
        row: ParsedRow,
        now: Optional[datetime] = None,
    ) -> list[ValidationIssue]:
        """
        Run the semantic checks on one row.

        Args:
            row: A row that already passed normalization
            now: Reference time for the future-date check (defaults to now)

        Returns:
            Warning-level issues, empty when the row looks fine
        """
        issues = []
        now = now or datetime.now()

        if not is_known_category(row.kind, row.category_l1, row.category_l2):
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=(
                    f"Category {row.category_l1}/{row.category_l2} is not in the "
                    f"{row.kind.english_label.lower()} dictionary"
                ),
                severity="warning",
                suggested_fix="Rename the category after import if this was a typo",
            ))

        max_future = now + timedelta(days=self._settings.future_date_tolerance_days)
        if row.occurred_at > max_future:
            issues.append(ValidationIssue(
                field="datetime",
                issue_type="future_date",
                message=f"Date ({row.occurred_at:%Y-%m-%d}) is in the future",
                severity="warning",
                suggested_fix="Check for a day/month swap in the source file",
            ))

        amount = from_minor_units(row.amount_minor, row.currency)
        if amount > self._settings.max_reasonable_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({row.currency.symbol}{amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Check for a misplaced decimal separator",
            ))

        return issues
