"""
Field Normalization

Turns loosely formatted text cells into typed values. Older exports and
hand-edited spreadsheets disagree on date layout, amount grouping and
type labels, so each field accepts several historical forms, tried in a
fixed order.

IMPORTANT: Normalization never guesses silently. A value that matches
none of the accepted forms raises InvalidFormat naming the text.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from dateutil import parser as date_parser

from ledgerbook.models.categories import INCOME_LEVEL1
from ledgerbook.models.record import Currency, ParsedRow, TransactionKind, to_minor_units
from ledgerbook.services.importer.errors import InvalidFormat
from ledgerbook.services.importer.headers import HeaderIndex

# Tried in order; the first that parses wins.
DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",             # yyyy-MM-dd
    "%Y/%m/%d",             # yyyy/M/d
    "%Y/%m/%d %H:%M",       # yyyy/M/d HH:mm
    "%m/%d/%Y",             # M/d/yyyy
    "%m/%d/%y",             # M/d/yy
    "%m/%d/%y, %I:%M %p",   # M/d/yy, h:mm a
    "%m/%d/%y %I:%M %p",    # M/d/yy h:mm a
    "%d/%m/%Y",             # dd/MM/yyyy
    "%d/%m/%Y %H:%M",       # dd/MM/yyyy HH:mm
)

# Fill values for the free-form fallback; they differ in year, month and day.
_FALLBACK_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# Digit-group separators dropped from amounts before parsing.
AMOUNT_GROUP_SEPARATORS = (",", "，", "_", "'", " ", "\u00a0", "\u2009", "\u202f")

_KIND_ALIASES: dict[str, TransactionKind] = {
    "支出": TransactionKind.EXPENSE,
    "expense": TransactionKind.EXPENSE,
    "expenses": TransactionKind.EXPENSE,
    "exp": TransactionKind.EXPENSE,
    "out": TransactionKind.EXPENSE,
    "收入": TransactionKind.INCOME,
    "income": TransactionKind.INCOME,
    "incomes": TransactionKind.INCOME,
    "inc": TransactionKind.INCOME,
    "in": TransactionKind.INCOME,
}


def parse_date(text: str, line_number: Optional[int] = None) -> datetime:
    """
    Parse a date or date-time cell.

    Explicit formats first, then dateutil's free-form parser.
    Timezone-aware results are converted to local wall-clock time.
    """
    value = text.strip().replace("\u202f", " ").replace("\u00a0", " ")
    if not value:
        raise InvalidFormat("datetime", text, line_number)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    # Parse against two unrelated defaults: a value missing its year, month
    # or day picks up different fills and is rejected.
    try:
        parsed = date_parser.parse(value, default=_FALLBACK_DEFAULTS[0])
        check = date_parser.parse(value, default=_FALLBACK_DEFAULTS[1])
    except (ValueError, OverflowError):
        raise InvalidFormat("datetime", text, line_number) from None
    if parsed.date() != check.date():
        raise InvalidFormat("datetime", text, line_number)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_currency(text: str, line_number: Optional[int] = None) -> Currency:
    """Exact, case-sensitive currency code."""
    token = text.strip()
    try:
        return Currency(token)
    except ValueError:
        raise InvalidFormat("currency", token, line_number) from None


def parse_amount(text: str, currency: Currency, line_number: Optional[int] = None) -> int:
    """
    Parse an amount cell into minor units.

    Rounds half-up to the currency's minor digits; the result must be > 0.
    """
    value = text.strip()
    for separator in AMOUNT_GROUP_SEPARATORS:
        value = value.replace(separator, "")
    try:
        amount = Decimal(value)
        if not amount.is_finite():
            raise InvalidOperation
        amount_minor = to_minor_units(amount, currency)
    except InvalidOperation:
        raise InvalidFormat("amount", text.strip(), line_number) from None
    if amount_minor <= 0:
        raise InvalidFormat("amount", text.strip(), line_number)
    return amount_minor


def parse_kind(text: str, line_number: Optional[int] = None) -> TransactionKind:
    """
    Parse a transaction type label.

    Accepts the canonical labels, English names in any case, and combined
    bilingual forms such as '支出/expense' when every part agrees.
    """
    token = text.strip()
    parts = [p.strip().lower() for p in token.replace("|", "/").split("/") if p.strip()]
    kinds = {_KIND_ALIASES.get(part) for part in parts}
    if len(kinds) != 1 or None in kinds:
        raise InvalidFormat("type", token, line_number)
    return kinds.pop()


class RowNormalizer:
    """
    Normalizes data rows against a resolved header.

    Also filters out rows that are skipped by rule (short rows and blank
    lines) and counts them.
    """

    def __init__(self, index: HeaderIndex):
        self._index = index
        self.skipped_short = 0
        self.skipped_blank = 0

    def candidate_rows(
        self,
        data_rows: Sequence[Sequence[str]],
        first_line_number: int = 2,
    ) -> list[tuple[int, Sequence[str]]]:
        """
        Drop short rows and blank lines, keeping source line numbers.

        Args:
            data_rows: Rows after the header
            first_line_number: Line number of the first data row

        Returns:
            (line_number, cells) pairs to normalize
        """
        candidates = []
        for offset, row in enumerate(data_rows):
            if len(row) < self._index.column_count:
                self.skipped_short += 1
                continue
            if not self._index.cell(row, "datetime") and not self._index.cell(row, "amount"):
                self.skipped_blank += 1
                continue
            candidates.append((first_line_number + offset, row))
        return candidates

    def normalize(self, row: Sequence[str], line_number: Optional[int] = None) -> ParsedRow:
        """
        Normalize one row.

        Raises:
            InvalidFormat: For the first field that cannot be parsed
        """
        cell = self._index.cell
        occurred_at = parse_date(cell(row, "datetime"), line_number)
        kind = parse_kind(cell(row, "type"), line_number)
        currency = parse_currency(cell(row, "currency"), line_number)
        amount_minor = parse_amount(cell(row, "amount"), currency, line_number)

        category_l1 = cell(row, "category_l1")
        if not category_l1 and kind is TransactionKind.INCOME:
            category_l1 = INCOME_LEVEL1
        if not category_l1:
            raise InvalidFormat("category_l1", category_l1, line_number)
        category_l2 = cell(row, "category_l2")
        if not category_l2:
            raise InvalidFormat("category_l2", category_l2, line_number)

        return ParsedRow(
            occurred_at=occurred_at,
            kind=kind,
            currency=currency,
            amount_minor=amount_minor,
            category_l1=category_l1,
            category_l2=category_l2,
            project_name=cell(row, "project"),
            note=cell(row, "note"),
            line_number=line_number,
        )
