"""
Core Data Models for ledgerbook

These models define the strict schemas for ledger data.
They are designed to:
1. Keep money as integer minor units (no float drift)
2. Restrict currency and transaction kind to closed sets
3. Be serializable for storage and logging

DESIGN DECISION: We use Pydantic v2 with whitespace stripping on strings.
Labels are compared after trimming everywhere, so the models trim too.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Closed sets
# =============================================================================

class Currency(str, Enum):
    """
    Supported currencies.

    Iteration order (SGD, RMB, USD) is the stable order reports use.
    """
    SGD = "SGD"
    RMB = "RMB"
    USD = "USD"

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]

    @property
    def minor_digits(self) -> int:
        """Number of decimal digits held by one minor unit."""
        return _CURRENCY_MINOR_DIGITS[self]


_CURRENCY_SYMBOLS = {
    Currency.SGD: "S$",
    Currency.RMB: "¥",
    Currency.USD: "$",
}

_CURRENCY_MINOR_DIGITS = {
    Currency.SGD: 2,
    Currency.RMB: 2,
    Currency.USD: 2,
}


class TransactionKind(str, Enum):
    """
    Transaction kind.

    Values are the canonical labels written to exports.
    """
    EXPENSE = "支出"
    INCOME = "收入"

    @property
    def english_label(self) -> str:
        return "Expense" if self is TransactionKind.EXPENSE else "Income"


def to_minor_units(amount: Decimal, currency: Currency) -> int:
    """Convert a major-unit amount to integer minor units (half-up)."""
    quantum = Decimal(1).scaleb(-currency.minor_digits)
    scaled = amount.quantize(quantum, rounding=ROUND_HALF_UP).scaleb(currency.minor_digits)
    return int(scaled)


def from_minor_units(amount_minor: int, currency: Currency) -> Decimal:
    """Exact major-unit Decimal for an integer minor amount."""
    return Decimal(amount_minor).scaleb(-currency.minor_digits)


def format_amount(amount_minor: int, currency: Currency) -> str:
    """Fixed-point text with the currency's minor digits and no grouping."""
    value = from_minor_units(amount_minor, currency)
    return f"{value:.{currency.minor_digits}f}"


# =============================================================================
# PROJECT
# =============================================================================

class Project(BaseModel):
    """
    A project owning ledger records.

    Names are not unique in storage, but import treats them as lookup keys.
    At most one project carries the default flag.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique project ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name, used as the import lookup key"
    )
    is_default: bool = Field(
        default=False,
        description="Whether records without a resolvable project land here"
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# LEDGER RECORD
# =============================================================================

class LedgerRecord(BaseModel):
    """
    A single persisted income or expense.

    CRITICAL: amount_minor is an integer count of minor units (cents).
    The Decimal view is derived and never stored.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique record ID"
    )
    amount_minor: int = Field(
        ...,
        gt=0,
        description="Amount in minor currency units"
    )
    currency: Currency
    kind: TransactionKind
    occurred_at: datetime = Field(
        ...,
        description="When the transaction happened (wall-clock time)"
    )
    project_id: UUID = Field(
        ...,
        description="Owning project"
    )
    category_l1: str = Field(..., min_length=1)
    category_l2: str = Field(..., min_length=1)
    note: str = Field(
        default="",
        description="Free-text note"
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def amount(self) -> Decimal:
        """Exact major-unit amount."""
        return from_minor_units(self.amount_minor, self.currency)

    def touch(self) -> None:
        """Bump updated_at after a mutation."""
        self.updated_at = utcnow()


# =============================================================================
# PARSED ROW (transient, import only)
# =============================================================================

class ParsedRow(BaseModel):
    """
    One normalized import row.

    Exists only between normalization and reconciliation.
    """
    model_config = ConfigDict(frozen=True)

    occurred_at: datetime
    kind: TransactionKind
    currency: Currency
    amount_minor: int = Field(..., gt=0)
    category_l1: str = Field(..., min_length=1)
    category_l2: str = Field(..., min_length=1)
    project_name: str = ""
    note: str = ""
    line_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based line/row number in the source file"
    )

    @property
    def amount(self) -> Decimal:
        return from_minor_units(self.amount_minor, self.currency)

    @model_validator(mode='after')
    def validate_categories(self) -> 'ParsedRow':
        """Category labels must survive trimming."""
        if not self.category_l1.strip() or not self.category_l2.strip():
            raise ValueError("Category labels cannot be blank")
        return self


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'unknown_category', 'future_date', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )
