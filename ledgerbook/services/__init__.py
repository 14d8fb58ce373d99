"""Services package."""

from ledgerbook.services.export import export_filename, to_csv, to_excel_xml
from ledgerbook.services.importer import (
    EmptyFile,
    InvalidFormat,
    LedgerImportError,
    UnsupportedFileType,
    XmlParseFailure,
    read_rows,
    read_rows_from_path,
)
from ledgerbook.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryLedgerStore,
    JsonFileLedgerStore,
    JsonLinesAuditStorage,
    LedgerStore,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Export
    "export_filename",
    "to_csv",
    "to_excel_xml",
    # Import
    "EmptyFile",
    "InvalidFormat",
    "LedgerImportError",
    "UnsupportedFileType",
    "XmlParseFailure",
    "read_rows",
    "read_rows_from_path",
    # Storage
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryLedgerStore",
    "JsonFileLedgerStore",
    "JsonLinesAuditStorage",
    "LedgerStore",
    "NotFoundError",
    "StorageError",
]
