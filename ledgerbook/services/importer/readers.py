"""
Format Detection and Row Parsing

Turns an uploaded ledger file into an ordered list of rows (lists of
strings). The first row is the header.

Two formats are accepted:
- CSV written by our own exporter: one record per line, fields split on
  a bare comma. There is no quoting; the exporter replaces commas and
  newlines inside fields before writing.
- Excel 2003 XML Spreadsheet (.xls): parsed with a streaming SAX handler
  driven by a single-variable state machine.
"""

import xml.sax
from enum import Enum
from pathlib import Path
from typing import IO, Union
from xml.sax.handler import ContentHandler, feature_external_ges, feature_external_pes

from ledgerbook.services.importer.errors import (
    InvalidFormat,
    UnsupportedFileType,
    XmlParseFailure,
)

CSV_DELIMITER = ","


class FileType(str, Enum):
    """Importable file formats."""
    CSV = "csv"
    XLS = "xls"


def detect_file_type(extension: str) -> FileType:
    """
    Map a declared extension ('csv', '.XLS', ...) to a FileType.

    Raises:
        UnsupportedFileType: For anything other than csv/xls
    """
    normalized = extension.strip().lstrip(".").lower()
    try:
        return FileType(normalized)
    except ValueError:
        raise UnsupportedFileType(extension) from None


def read_rows(stream: IO, extension: str) -> list[list[str]]:
    """
    Read all rows from an open file.

    Args:
        stream: Binary or text file object
        extension: Declared file extension

    Returns:
        Rows in file order, header first
    """
    file_type = detect_file_type(extension)
    if file_type is FileType.CSV:
        return _read_csv(stream)
    return _read_excel_xml(stream)


def read_rows_from_path(path: Union[str, Path]) -> list[list[str]]:
    """Read rows from a file on disk, using its suffix as the extension."""
    path = Path(path)
    file_type = detect_file_type(path.suffix)
    with path.open("rb") as handle:
        return read_rows(handle, file_type.value)


# =============================================================================
# CSV
# =============================================================================

def _read_csv(stream: IO) -> list[list[str]]:
    content = stream.read()
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InvalidFormat("encoding", repr(content[exc.start:exc.end])) from None
    else:
        text = content.lstrip("\ufeff")

    rows = []
    # Only LF ends a record; U+2028 and other separators stay inside fields.
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if not line.strip():
            continue
        rows.append(line.split(CSV_DELIMITER))
    return rows


# =============================================================================
# EXCEL 2003 XML
# =============================================================================

class _XmlState(Enum):
    OUTSIDE_TABLE = "outside_table"
    IN_TABLE = "in_table"
    IN_ROW = "in_row"
    IN_CELL = "in_cell"
    IN_CELL_DATA = "in_cell_data"
    IN_COMMENT = "in_comment"


def _local_name(qname: str) -> str:
    return qname.rsplit(":", 1)[-1]


class ExcelXmlRowHandler(ContentHandler):
    """
    SAX handler collecting Workbook > Worksheet > Table > Row > Cell > Data.

    Character data is only accumulated in IN_CELL_DATA, which is entered
    for a Data element directly under Cell. Data inside a cell Comment is
    ignored. Every Cell opens an empty slot that its Data (if any) fills,
    so cells without Data still count as columns. Rows whose cells are
    all blank are dropped.
    """

    def __init__(self):
        super().__init__()
        self.rows: list[list[str]] = []
        self._state = _XmlState.OUTSIDE_TABLE
        self._row: list[str] = []
        self._text: list[str] = []

    def startElement(self, name, attrs):
        tag = _local_name(name)
        if self._state is _XmlState.OUTSIDE_TABLE and tag == "Table":
            self._state = _XmlState.IN_TABLE
        elif self._state is _XmlState.IN_TABLE and tag == "Row":
            self._state = _XmlState.IN_ROW
            self._row = []
        elif self._state is _XmlState.IN_ROW and tag == "Cell":
            self._pad_to_index(attrs)
            self._row.append("")
            self._state = _XmlState.IN_CELL
        elif self._state is _XmlState.IN_CELL and tag == "Data":
            self._state = _XmlState.IN_CELL_DATA
            self._text = []
        elif self._state is _XmlState.IN_CELL and tag == "Comment":
            self._state = _XmlState.IN_COMMENT

    def endElement(self, name):
        tag = _local_name(name)
        if self._state is _XmlState.IN_CELL_DATA and tag == "Data":
            self._row[-1] = "".join(self._text)
            self._state = _XmlState.IN_CELL
        elif self._state is _XmlState.IN_COMMENT and tag == "Comment":
            self._state = _XmlState.IN_CELL
        elif self._state is _XmlState.IN_CELL and tag == "Cell":
            self._state = _XmlState.IN_ROW
        elif self._state is _XmlState.IN_ROW and tag == "Row":
            if any(cell.strip() for cell in self._row):
                self.rows.append(self._row)
            self._row = []
            self._state = _XmlState.IN_TABLE
        elif self._state is _XmlState.IN_TABLE and tag == "Table":
            self._state = _XmlState.OUTSIDE_TABLE

    def characters(self, content):
        if self._state is _XmlState.IN_CELL_DATA:
            self._text.append(content)

    def _pad_to_index(self, attrs) -> None:
        # ss:Index is 1-based and skips over omitted empty cells
        for qname in attrs.getNames():
            if _local_name(qname) == "Index":
                try:
                    index = int(attrs.getValue(qname))
                except ValueError:
                    raise XmlParseFailure(f"invalid ss:Index '{attrs.getValue(qname)}'") from None
                while len(self._row) < index - 1:
                    self._row.append("")


def _read_excel_xml(stream: IO) -> list[list[str]]:
    handler = ExcelXmlRowHandler()
    parser = xml.sax.make_parser()
    parser.setFeature(feature_external_ges, False)
    parser.setFeature(feature_external_pes, False)
    parser.setContentHandler(handler)
    try:
        parser.parse(stream)
    except xml.sax.SAXParseException as exc:
        raise XmlParseFailure(str(exc)) from exc
    return handler.rows
