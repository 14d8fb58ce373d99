"""
Report Models

Output shapes of the aggregation engine. Totals are integer minor units;
the Decimal and percentage views are derived for display only and are
never summed back into totals.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from ledgerbook.models.record import Currency, format_amount, from_minor_units


class GroupingMode(str, Enum):
    """What a breakdown groups records by."""
    CATEGORY_L1 = "category_l1"
    CATEGORY_L2 = "category_l2"
    PROJECT = "project"
    DAY = "day"
    MONTH = "month"


class AggregateGroup(BaseModel):
    """One group inside a currency breakdown."""

    key: str = Field(
        ...,
        description="Grouping key (label, project id, or ISO date/month)"
    )
    label: str = Field(
        ...,
        description="Display label for the key"
    )
    currency: Currency
    total_minor: int = Field(..., ge=0)
    currency_total_minor: int = Field(
        ...,
        ge=0,
        description="Total of the whole currency, used for the percentage"
    )
    record_count: int = Field(..., ge=0)

    @property
    def total(self) -> Decimal:
        return from_minor_units(self.total_minor, self.currency)

    @property
    def percentage(self) -> Decimal:
        """Share of the currency total, 0-100."""
        if self.currency_total_minor == 0:
            return Decimal(0)
        return Decimal(self.total_minor) * 100 / Decimal(self.currency_total_minor)

    @property
    def percentage_display(self) -> str:
        return f"{self.percentage:.1f}%"

    @property
    def total_display(self) -> str:
        return f"{self.currency.symbol}{format_amount(self.total_minor, self.currency)}"


class CurrencyBreakdown(BaseModel):
    """All groups of one currency, sorted by total descending."""

    currency: Currency
    total_minor: int = Field(..., ge=0)
    groups: list[AggregateGroup] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return from_minor_units(self.total_minor, self.currency)


class IncomeExpenseTotals(BaseModel):
    """Income and expense totals for one currency."""

    currency: Currency
    income_minor: int = Field(default=0, ge=0)
    expense_minor: int = Field(default=0, ge=0)

    @property
    def net_minor(self) -> int:
        return self.income_minor - self.expense_minor

    @property
    def income(self) -> Decimal:
        return from_minor_units(self.income_minor, self.currency)

    @property
    def expense(self) -> Decimal:
        return from_minor_units(self.expense_minor, self.currency)

    @property
    def net(self) -> Decimal:
        return from_minor_units(self.net_minor, self.currency)
