"""
Report Aggregation Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and exact.
Totals are summed as integer minor units, never as floats or rounded
Decimals. Percentages are derived per group for display and are never
summed back.

Output order is stable:
- Currencies in their fixed order (SGD, RMB, USD); empty ones omitted
- Groups by total descending, ties by key ascending
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Union
from uuid import UUID

from ledgerbook.config import LedgerSettings, get_settings
from ledgerbook.models.record import Currency, LedgerRecord, TransactionKind
from ledgerbook.models.report import (
    AggregateGroup,
    CurrencyBreakdown,
    GroupingMode,
    IncomeExpenseTotals,
)

DateLike = Union[date, datetime]


def _as_day(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class ReportAggregator:
    """
    Groups and totals ledger records for reports.

    Stateless apart from settings; safe to reuse.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings()

    def filter_records(
        self,
        records: Iterable[LedgerRecord],
        date_from: Optional[DateLike] = None,
        date_to: Optional[DateLike] = None,
        kind: Optional[TransactionKind] = None,
        project_id: Optional[UUID] = None,
        currency: Optional[Currency] = None,
    ) -> list[LedgerRecord]:
        """
        Keep records inside the whole-day window [date_from, date_to]
        that match every given filter.
        """
        start = _as_day(date_from) if date_from is not None else None
        end = _as_day(date_to) if date_to is not None else None

        selected = []
        for record in records:
            day = record.occurred_at.date()
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                continue
            if kind is not None and record.kind != kind:
                continue
            if project_id is not None and record.project_id != project_id:
                continue
            if currency is not None and record.currency != currency:
                continue
            selected.append(record)
        return selected

    def breakdown(
        self,
        records: Iterable[LedgerRecord],
        mode: GroupingMode,
        kind: TransactionKind,
        project_names: Optional[dict[UUID, str]] = None,
    ) -> list[CurrencyBreakdown]:
        """
        Group records of one kind per currency.

        Args:
            records: Records to aggregate; other kinds are ignored
            mode: Grouping key
            kind: Income or expense
            project_names: Project id -> name, used for PROJECT labels

        Returns:
            One breakdown per currency that has records
        """
        project_names = project_names or {}
        totals: dict[Currency, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        counts: dict[Currency, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        labels: dict[str, str] = {}

        for record in records:
            if record.kind != kind:
                continue
            key, label = self._group_key(record, mode, project_names)
            labels[key] = label
            totals[record.currency][key] += record.amount_minor
            counts[record.currency][key] += 1

        result = []
        for currency in Currency:
            if currency not in totals:
                continue
            currency_totals = totals[currency]
            currency_total = sum(currency_totals.values())
            ordered = sorted(currency_totals.items(), key=lambda item: (-item[1], item[0]))
            groups = [
                AggregateGroup(
                    key=key,
                    label=labels[key],
                    currency=currency,
                    total_minor=total,
                    currency_total_minor=currency_total,
                    record_count=counts[currency][key],
                )
                for key, total in ordered
            ]
            result.append(CurrencyBreakdown(
                currency=currency,
                total_minor=currency_total,
                groups=groups,
            ))
        return result

    def income_expense_totals(
        self,
        records: Iterable[LedgerRecord],
    ) -> list[IncomeExpenseTotals]:
        """Per-currency income and expense totals, in currency order."""
        income: dict[Currency, int] = defaultdict(int)
        expense: dict[Currency, int] = defaultdict(int)
        for record in records:
            if record.kind is TransactionKind.INCOME:
                income[record.currency] += record.amount_minor
            else:
                expense[record.currency] += record.amount_minor

        return [
            IncomeExpenseTotals(
                currency=currency,
                income_minor=income.get(currency, 0),
                expense_minor=expense.get(currency, 0),
            )
            for currency in Currency
            if currency in income or currency in expense
        ]

    def _group_key(
        self,
        record: LedgerRecord,
        mode: GroupingMode,
        project_names: dict[UUID, str],
    ) -> tuple[str, str]:
        if mode is GroupingMode.CATEGORY_L1:
            return record.category_l1, record.category_l1
        if mode is GroupingMode.CATEGORY_L2:
            return record.category_l2, record.category_l2
        if mode is GroupingMode.PROJECT:
            name = project_names.get(record.project_id, self._settings.unknown_project_label)
            return str(record.project_id), name
        if mode is GroupingMode.DAY:
            key = record.occurred_at.strftime("%Y-%m-%d")
            return key, key
        if mode is GroupingMode.MONTH:
            key = record.occurred_at.strftime("%Y-%m")
            return key, key
        raise ValueError(f"Unsupported grouping mode: {mode}")
