"""Export services package."""

from ledgerbook.services.export.serializer import (
    EXPORT_HEADERS,
    csv_safe,
    export_filename,
    format_timestamp,
    record_cells,
    to_csv,
    to_excel_xml,
    xml_escape,
)

__all__ = [
    "EXPORT_HEADERS",
    "csv_safe",
    "export_filename",
    "format_timestamp",
    "record_cells",
    "to_csv",
    "to_excel_xml",
    "xml_escape",
]
