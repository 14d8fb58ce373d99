"""Import services package: file readers, header resolution, errors."""

from ledgerbook.services.importer.errors import (
    EmptyFile,
    InvalidFormat,
    LedgerImportError,
    UnsupportedFileType,
    XmlParseFailure,
)
from ledgerbook.services.importer.headers import (
    HEADER_SYNONYMS,
    REQUIRED_FIELDS,
    HeaderIndex,
    resolve_header,
)
from ledgerbook.services.importer.readers import (
    FileType,
    detect_file_type,
    read_rows,
    read_rows_from_path,
)

__all__ = [
    # Errors
    "EmptyFile",
    "InvalidFormat",
    "LedgerImportError",
    "UnsupportedFileType",
    "XmlParseFailure",
    # Headers
    "HEADER_SYNONYMS",
    "REQUIRED_FIELDS",
    "HeaderIndex",
    "resolve_header",
    # Readers
    "FileType",
    "detect_file_type",
    "read_rows",
    "read_rows_from_path",
]
