"""
Header Index Resolution

Maps a header row to the column positions of the eight semantic
fields. Headers written by older app versions used Chinese labels,
hand-made spreadsheets tend to use English ones; both are accepted.
"""

from typing import Optional, Sequence

from pydantic import BaseModel

from ledgerbook.services.importer.errors import InvalidFormat

# Semantic field -> accepted labels. Order of fields is the export column order.
HEADER_SYNONYMS: dict[str, tuple[str, ...]] = {
    "datetime": ("时间", "Datetime", "Date"),
    "type": ("类型", "Type"),
    "currency": ("币种", "Currency"),
    "amount": ("金额", "Amount"),
    "category_l1": ("一级分类", "CategoryL1", "Category1"),
    "category_l2": ("二级分类", "CategoryL2", "Category2"),
    "project": ("项目", "Project"),
    "note": ("备注", "Note", "Memo"),
}

REQUIRED_FIELDS: tuple[str, ...] = ("datetime", "type", "currency", "amount")


class HeaderIndex(BaseModel):
    """
    Column position of each semantic field.

    None means the header has no matching column.
    """

    datetime: Optional[int] = None
    type: Optional[int] = None
    currency: Optional[int] = None
    amount: Optional[int] = None
    category_l1: Optional[int] = None
    category_l2: Optional[int] = None
    project: Optional[int] = None
    note: Optional[int] = None
    column_count: int = 0

    def missing(self, fields: Sequence[str] = REQUIRED_FIELDS) -> list[str]:
        return [name for name in fields if getattr(self, name) is None]

    def require(self, header: Sequence[str], fields: Sequence[str] = REQUIRED_FIELDS) -> None:
        """
        Raise InvalidFormat when any of the given fields has no column.
        """
        if self.missing(fields):
            raise InvalidFormat("header", ",".join(header), line_number=1)

    def cell(self, row: Sequence[str], field: str) -> str:
        """Trimmed cell text for a field, empty when absent."""
        index = getattr(self, field)
        if index is None or index >= len(row):
            return ""
        return row[index].strip()


def _matches(label: str, synonyms: tuple[str, ...]) -> bool:
    for synonym in synonyms:
        if label == synonym:
            return True
        if synonym.isascii() and label.lower() == synonym.lower():
            return True
    return False


def resolve_header(header: Sequence[str]) -> HeaderIndex:
    """
    Find, for every semantic field, the first column whose trimmed label
    matches one of its synonyms.
    """
    labels = [cell.lstrip("\ufeff").strip() for cell in header]
    positions: dict[str, Optional[int]] = {}
    for field, synonyms in HEADER_SYNONYMS.items():
        positions[field] = next(
            (i for i, label in enumerate(labels) if _matches(label, synonyms)),
            None,
        )
    return HeaderIndex(column_count=len(labels), **positions)
