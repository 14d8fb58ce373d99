"""Tests for file type detection and row readers."""

import io

import pytest

from ledgerbook.services.importer import (
    FileType,
    InvalidFormat,
    UnsupportedFileType,
    XmlParseFailure,
    detect_file_type,
    read_rows,
    read_rows_from_path,
)

WORKBOOK = """<?xml version="1.0"?>
<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet"
 xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet">
  <Worksheet ss:Name="流水">
    <Table>
      <Row><Cell><Data ss:Type="String">时间</Data></Cell><Cell><Data ss:Type="String">金额</Data></Cell></Row>
      <Row><Cell><Data ss:Type="String">2024/1/5 14:30</Data></Cell><Cell><Data ss:Type="String">A &amp; B</Data></Cell></Row>
      {extra}
    </Table>
  </Worksheet>
</Workbook>
"""


def _xml(extra: str = "") -> io.BytesIO:
    return io.BytesIO(WORKBOOK.format(extra=extra).encode("utf-8"))


class TestDetectFileType:
    """Tests for extension handling."""

    @pytest.mark.parametrize("extension", ["csv", ".csv", "CSV", " .Csv "])
    def test_csv(self, extension):
        assert detect_file_type(extension) is FileType.CSV

    def test_xls(self):
        assert detect_file_type(".XLS") is FileType.XLS

    @pytest.mark.parametrize("extension", ["xlsx", "txt", ""])
    def test_unsupported(self, extension):
        with pytest.raises(UnsupportedFileType) as exc_info:
            detect_file_type(extension)
        assert exc_info.value.extension == extension


class TestCsvReader:
    """Tests for the unquoted CSV reader."""

    def test_splits_on_bare_comma(self):
        rows = read_rows(io.BytesIO("a,b,c\n1,2,3\n".encode("utf-8")), "csv")
        assert rows == [["a", "b", "c"], ["1", "2", "3"]]

    def test_skips_blank_lines_and_bom(self):
        data = "\ufeff时间,金额\r\n\r\n  \n2024-01-01,5\r\n".encode("utf-8")
        rows = read_rows(io.BytesIO(data), "csv")
        assert rows == [["时间", "金额"], ["2024-01-01", "5"]]

    def test_quotes_are_not_interpreted(self):
        rows = read_rows(io.BytesIO('"a,b",c'.encode("utf-8")), "csv")
        assert rows == [['"a', 'b"', "c"]]

    def test_accepts_text_stream(self):
        assert read_rows(io.StringIO("x,y\n"), "csv") == [["x", "y"]]

    def test_reads_from_path(self, tmp_path):
        path = tmp_path / "ledger.CSV"
        path.write_text("a,b\n", encoding="utf-8")
        assert read_rows_from_path(path) == [["a", "b"]]

    def test_only_line_feed_ends_a_record(self):
        data = "a,b\r\n2024-01-01,午餐\u2028晚饭\x0b\x85\n".encode("utf-8")
        rows = read_rows(io.BytesIO(data), "csv")
        assert rows == [["a", "b"], ["2024-01-01", "午餐\u2028晚饭\x0b\x85"]]

    def test_invalid_utf8_is_invalid_format(self):
        with pytest.raises(InvalidFormat) as exc_info:
            read_rows(io.BytesIO(b"\xff\xfe\x00bad,header\n"), "csv")
        assert exc_info.value.field == "encoding"

    def test_unsupported_path(self, tmp_path):
        path = tmp_path / "ledger.txt"
        path.write_text("a,b\n", encoding="utf-8")
        with pytest.raises(UnsupportedFileType):
            read_rows_from_path(path)


class TestExcelXmlReader:
    """Tests for the Excel 2003 XML reader."""

    def test_reads_rows_and_unescapes(self):
        rows = read_rows(_xml(), "xls")
        assert rows == [["时间", "金额"], ["2024/1/5 14:30", "A & B"]]

    def test_cell_without_data_is_empty_column(self):
        extra = '<Row><Cell/><Cell><Data ss:Type="String">x</Data></Cell></Row>'
        rows = read_rows(_xml(extra), "xls")
        assert rows[-1] == ["", "x"]

    def test_index_attribute_pads_skipped_cells(self):
        extra = '<Row><Cell ss:Index="3"><Data ss:Type="String">z</Data></Cell></Row>'
        rows = read_rows(_xml(extra), "xls")
        assert rows[-1] == ["", "", "z"]

    def test_blank_rows_are_dropped(self):
        extra = '<Row><Cell><Data ss:Type="String"> </Data></Cell></Row>'
        rows = read_rows(_xml(extra), "xls")
        assert len(rows) == 2

    def test_text_outside_data_is_ignored(self):
        extra = '<Row><Cell>stray<Data ss:Type="String">v</Data></Cell></Row>'
        rows = read_rows(_xml(extra), "xls")
        assert rows[-1] == ["v"]

    def test_malformed_document(self):
        with pytest.raises(XmlParseFailure):
            read_rows(io.BytesIO(b"<Workbook><Table><Row></Table>"), "xls")

    def test_comment_data_does_not_replace_cell_value(self):
        extra = (
            '<Row><Cell><Data ss:Type="Number">25.50</Data>'
            '<Comment ss:Author="me"><ss:Data>checked by bank</ss:Data></Comment></Cell>'
            '<Cell><Comment><Data>only a note</Data></Comment></Cell></Row>'
        )
        rows = read_rows(_xml(extra), "xls")
        assert rows[-1] == ["25.50", ""]

    def test_data_outside_cell_is_ignored(self):
        extra = '<Row><Data ss:Type="String">orphan</Data><Cell><Data ss:Type="String">v</Data></Cell></Row>'
        rows = read_rows(_xml(extra), "xls")
        assert rows[-1] == ["v"]
