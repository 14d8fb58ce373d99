"""
Storage Services Package

Provides the abstract store interfaces consumed by the import/report core
and two implementations: in-memory (tests) and a JSON file store.
"""

from ledgerbook.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStore,
    NotFoundError,
    ProjectStorageInterface,
    RecordStorageInterface,
    StorageError,
)
from ledgerbook.services.storage.memory import InMemoryAuditStorage, InMemoryLedgerStore
from ledgerbook.services.storage.json_file import JsonFileLedgerStore, JsonLinesAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStore",
    "ProjectStorageInterface",
    "RecordStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryLedgerStore",
    "JsonFileLedgerStore",
    "JsonLinesAuditStorage",
]
