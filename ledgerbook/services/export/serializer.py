"""
Export Serialization

Writes ledger records as CSV text or as an Excel 2003 XML Spreadsheet.
Both formats use the same fixed column order and cell rendering, and
both can be imported again by the readers in services.importer.

The CSV flavour has no quoting: commas inside free-text fields are
replaced with the full-width comma and line breaks with a space, so a
bare split on ',' reads every line back.
"""

from datetime import date, datetime
from typing import Iterable, Optional
from uuid import UUID
from xml.sax.saxutils import escape

from ledgerbook.models.record import LedgerRecord, format_amount
from ledgerbook.services.importer.readers import CSV_DELIMITER, FileType

EXPORT_HEADERS: tuple[str, ...] = (
    "时间", "类型", "币种", "金额", "一级分类", "二级分类", "项目", "备注",
)

DEFAULT_UNKNOWN_PROJECT = "未知项目"
DEFAULT_SHEET_NAME = "流水"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def format_timestamp(value: datetime) -> str:
    """yyyy/M/d HH:mm, without zero-padding on month and day."""
    return f"{value.year}/{value.month}/{value.day} {value:%H:%M}"


def _flatten(text: str) -> str:
    return text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def csv_safe(text: str) -> str:
    """Make a free-text field safe for the unquoted CSV flavour."""
    return _flatten(text).replace(CSV_DELIMITER, "，")


def xml_escape(text: str) -> str:
    """Entity-escape & < > \" ' and turn line breaks into spaces."""
    return escape(_flatten(text), _XML_ENTITIES)


def record_cells(
    record: LedgerRecord,
    project_names: dict[UUID, str],
    unknown_label: str = DEFAULT_UNKNOWN_PROJECT,
) -> list[str]:
    """Render one record as the eight export cells."""
    return [
        format_timestamp(record.occurred_at),
        record.kind.value,
        record.currency.value,
        format_amount(record.amount_minor, record.currency),
        record.category_l1,
        record.category_l2,
        project_names.get(record.project_id, unknown_label),
        record.note,
    ]


def _sorted(records: Iterable[LedgerRecord]) -> list[LedgerRecord]:
    return sorted(records, key=lambda r: r.occurred_at)


def to_csv(
    records: Iterable[LedgerRecord],
    project_names: dict[UUID, str],
    unknown_label: str = DEFAULT_UNKNOWN_PROJECT,
) -> str:
    """
    Serialize records as CSV, oldest first, header line included.
    """
    lines = [CSV_DELIMITER.join(EXPORT_HEADERS)]
    for record in _sorted(records):
        cells = record_cells(record, project_names, unknown_label)
        lines.append(CSV_DELIMITER.join(csv_safe(cell) for cell in cells))
    return "\n".join(lines) + "\n"


def to_excel_xml(
    records: Iterable[LedgerRecord],
    project_names: dict[UUID, str],
    sheet_name: str = DEFAULT_SHEET_NAME,
    unknown_label: str = DEFAULT_UNKNOWN_PROJECT,
) -> str:
    """
    Serialize records as a single-worksheet Excel 2003 XML Spreadsheet.

    Every cell is a String cell.
    """
    def row(cells: Iterable[str]) -> str:
        body = "".join(
            f'<Cell><Data ss:Type="String">{xml_escape(cell)}</Data></Cell>'
            for cell in cells
        )
        return f"<Row>{body}</Row>"

    rows = [row(EXPORT_HEADERS)]
    rows.extend(
        row(record_cells(record, project_names, unknown_label))
        for record in _sorted(records)
    )
    table = "\n      ".join(rows)

    return (
        '<?xml version="1.0"?>\n'
        '<?mso-application progid="Excel.Sheet"?>\n'
        '<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet"\n'
        ' xmlns:o="urn:schemas-microsoft-com:office:office"\n'
        ' xmlns:x="urn:schemas-microsoft-com:office:excel"\n'
        ' xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet"\n'
        ' xmlns:html="http://www.w3.org/TR/REC-html40">\n'
        f'  <Worksheet ss:Name="{xml_escape(sheet_name)}">\n'
        '    <Table>\n'
        f'      {table}\n'
        '    </Table>\n'
        '  </Worksheet>\n'
        '</Workbook>\n'
    )


def export_filename(
    date_from: date,
    date_to: date,
    fmt: FileType,
    prefix: Optional[str] = None,
) -> str:
    """账本导出_YYYY-MM-DD_YYYY-MM-DD.csv|xls"""
    prefix = prefix or "账本导出"
    return f"{prefix}_{date_from:%Y-%m-%d}_{date_to:%Y-%m-%d}.{FileType(fmt).value}"
