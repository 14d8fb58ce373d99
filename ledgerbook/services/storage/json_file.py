"""
JSON File Storage Implementation

DESIGN DECISION: The whole ledger lives in one JSON document:
1. Readable and diffable by the user
2. No database setup required
3. Easy to back up or move to another machine

TRADEOFFS:
- The full document is rewritten on every commit (fine for personal use)
- Queries filter in Python

Writes go to a temporary file first and are moved into place with
Path.replace, so a crash never leaves a half-written ledger behind.
"""

import json
from pathlib import Path
from uuid import UUID

from pydantic import ValidationError

from ledgerbook.models.audit import AuditEvent
from ledgerbook.models.record import LedgerRecord, Project
from ledgerbook.services.storage.interface import AuditStorageInterface, StorageError
from ledgerbook.services.storage.memory import InMemoryLedgerStore

STORE_FORMAT_VERSION = 1


class JsonFileLedgerStore(InMemoryLedgerStore):
    """
    In-memory store persisted to a single JSON file.

    Project writes commit immediately; record writes are made durable
    by commit(), which the reconciler calls once per import.
    """

    def __init__(self, path: Path):
        super().__init__()
        self._path = Path(path)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupted JSON data in {self._path}") from exc
        except OSError as exc:
            raise StorageError(f"Unable to read from {self._path}") from exc

        if not isinstance(payload, dict):
            raise StorageError(f"Expected object payload in {self._path}")

        try:
            for item in payload.get("projects", []):
                project = Project.model_validate(item)
                self._projects[project.id] = project
            for item in payload.get("records", []):
                record = LedgerRecord.model_validate(item)
                self._records[record.id] = record
        except ValidationError as exc:
            raise StorageError(f"Invalid ledger data in {self._path}: {exc}") from exc

    def commit(self) -> None:
        payload = {
            "version": STORE_FORMAT_VERSION,
            "projects": [p.model_dump(mode="json") for p in self.fetch_all_projects()],
            "records": [
                r.model_dump(mode="json")
                for r in sorted(self._records.values(), key=lambda r: r.occurred_at)
            ],
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
                handle.flush()
            temp_path.replace(self._path)
        except OSError as exc:
            raise StorageError(f"Unable to write to {self._path}") from exc
        super().commit()


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON event per line.

    Lives next to the ledger file so the history survives restarts.
    Appends never rewrite earlier lines.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(event.model_dump_json() + "\n")
        except OSError as exc:
            raise StorageError(f"Unable to append to {self._path}") from exc
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self._read_events() if e.correlation_id == correlation_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._read_events()))[:limit]

    def _read_events(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []
        events = []
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                for line in handle:
                    if line.strip():
                        events.append(AuditEvent.model_validate_json(line))
        except OSError as exc:
            raise StorageError(f"Unable to read from {self._path}") from exc
        except ValidationError as exc:
            raise StorageError(f"Invalid audit data in {self._path}: {exc}") from exc
        return events
