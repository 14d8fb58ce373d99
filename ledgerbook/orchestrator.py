"""
Main Orchestrator for ledgerbook

This module ties together all the components and defines the
end-to-end flows for:
1. Import (file -> rows -> header -> normalize -> reconcile -> commit)
2. Export (date window -> records -> CSV / Excel XML)
3. Report (date window -> filter -> per-currency breakdown)

DESIGN DECISION: The orchestrator is the only place errors are caught.
Each flow audits its outcome, and failures are logged then re-raised
unchanged to the caller.
"""

from datetime import date, datetime, time
from pathlib import Path
from typing import IO, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ledgerbook.audit import AuditLogger, create_correlation_id
from ledgerbook.config import LedgerSettings, get_settings
from ledgerbook.models.record import Currency, TransactionKind
from ledgerbook.models.report import CurrencyBreakdown, GroupingMode, IncomeExpenseTotals
from ledgerbook.queries import ReportAggregator
from ledgerbook.reconciliation import ProjectManager, Reconciler
from ledgerbook.reconciliation.reconciler import ChangeCallback
from ledgerbook.services.export import export_filename, to_csv, to_excel_xml
from ledgerbook.services.importer import (
    EmptyFile,
    FileType,
    LedgerImportError,
    detect_file_type,
    read_rows,
    resolve_header,
)
from ledgerbook.services.storage import (
    JsonFileLedgerStore,
    JsonLinesAuditStorage,
    LedgerStore,
    StorageError,
)
from ledgerbook.validation import RecordValidator, RowNormalizer


# =============================================================================
# RESULT MODELS
# =============================================================================

class ImportSummary(BaseModel):
    """Outcome of a successful import."""

    correlation_id: UUID
    filename: str
    file_type: FileType
    inserted: int = Field(..., ge=0)
    skipped_blank: int = Field(default=0, ge=0)
    skipped_short: int = Field(default=0, ge=0)
    created_projects: list[str] = Field(default_factory=list)


class ExportResult(BaseModel):
    """Serialized export, ready to be written or shared."""

    correlation_id: UUID
    filename: str
    file_type: FileType
    content: str
    record_count: int = Field(..., ge=0)

    def write_to(self, directory: Union[str, Path]) -> Path:
        """Write the export into a directory under its standard filename."""
        target = Path(directory) / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.content, encoding="utf-8")
        return target


class ReportResult(BaseModel):
    """A breakdown of one kind plus income/expense totals for the same window."""

    correlation_id: UUID
    mode: GroupingMode
    kind: TransactionKind
    breakdowns: list[CurrencyBreakdown] = Field(default_factory=list)
    totals: list[IncomeExpenseTotals] = Field(default_factory=list)
    record_count: int = Field(default=0, ge=0)


def _day_bounds(date_from: date, date_to: date) -> tuple[datetime, datetime]:
    return datetime.combine(date_from, time.min), datetime.combine(date_to, time.max)


# =============================================================================
# IMPORT
# =============================================================================

class ImportFlow:
    """
    Orchestrates a file import.

    Flow:
    1. Detect → csv or xls by extension
    2. Read → rows, header first
    3. Resolve → header columns, required fields present
    4. Filter → drop short rows and blank lines; nothing left is EmptyFile
    5. Normalize + Reconcile → row by row, one commit at the end
    6. Notify → on_change(count) once

    A failure in step 5 keeps the rows and projects written before it.
    """

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[RecordValidator] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or RecordValidator(self._settings)

    def import_file(
        self,
        path: Union[str, Path],
        on_change: Optional[ChangeCallback] = None,
    ) -> ImportSummary:
        """Import a file from disk, using its suffix as the declared type."""
        path = Path(path)
        file_type = detect_file_type(path.suffix)
        with path.open("rb") as handle:
            return self.import_stream(handle, file_type.value, path.name, on_change)

    def import_stream(
        self,
        stream: IO,
        extension: str,
        filename: str = "<stream>",
        on_change: Optional[ChangeCallback] = None,
    ) -> ImportSummary:
        """
        Import an open file.

        Raises:
            UnsupportedFileType, EmptyFile, InvalidFormat, XmlParseFailure
            StorageError: If the store fails to write
        """
        correlation_id = create_correlation_id()
        reconciler: Optional[Reconciler] = None

        try:
            file_type = detect_file_type(extension)
            self._audit_logger.log_import_started(filename, file_type.value, correlation_id)

            rows = read_rows(stream, file_type.value)
            if not rows:
                raise EmptyFile()

            header = rows[0]
            index = resolve_header(header)
            index.require(header)

            normalizer = RowNormalizer(index)
            candidates = normalizer.candidate_rows(rows[1:])
            if not candidates:
                raise EmptyFile()

            reconciler = Reconciler(
                self._store,
                audit_logger=self._audit_logger,
                settings=self._settings,
                validator=self._validator,
            )
            parsed = (normalizer.normalize(cells, line) for line, cells in candidates)
            inserted = reconciler.reconcile(parsed, on_change, correlation_id)

        except (LedgerImportError, StorageError) as e:
            self._audit_logger.log_import_failed(
                error_type=type(e).__name__,
                error_message=str(e),
                records_kept=reconciler.inserted if reconciler else 0,
                projects_kept=[p.name for p in reconciler.created_projects] if reconciler else [],
                correlation_id=correlation_id,
            )
            raise

        created = [p.name for p in reconciler.created_projects]
        self._audit_logger.log_import_completed(
            inserted=inserted,
            skipped_blank=normalizer.skipped_blank,
            skipped_short=normalizer.skipped_short,
            created_projects=created,
            correlation_id=correlation_id,
        )

        return ImportSummary(
            correlation_id=correlation_id,
            filename=filename,
            file_type=file_type,
            inserted=inserted,
            skipped_blank=normalizer.skipped_blank,
            skipped_short=normalizer.skipped_short,
            created_projects=created,
        )


# =============================================================================
# EXPORT
# =============================================================================

class ExportFlow:
    """Serializes the records of a whole-day date window."""

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._settings = settings or get_settings()

    def export(
        self,
        date_from: date,
        date_to: date,
        fmt: Union[FileType, str] = FileType.CSV,
    ) -> ExportResult:
        """
        Export records from date_from through date_to, oldest first.

        Raises:
            UnsupportedFileType: If fmt is neither csv nor xls
        """
        correlation_id = create_correlation_id()
        file_type = fmt if isinstance(fmt, FileType) else detect_file_type(fmt)

        start, end = _day_bounds(date_from, date_to)
        try:
            records = self._store.fetch_records(start, end)
            project_names = {p.id: p.name for p in self._store.fetch_all_projects()}
        except StorageError as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"flow": "export"},
                correlation_id=correlation_id,
            )
            raise

        unknown = self._settings.unknown_project_label
        if file_type is FileType.CSV:
            content = to_csv(records, project_names, unknown)
        else:
            content = to_excel_xml(records, project_names, self._settings.export_sheet_name, unknown)

        self._audit_logger.log_export_completed(file_type.value, len(records), correlation_id)

        return ExportResult(
            correlation_id=correlation_id,
            filename=export_filename(date_from, date_to, file_type),
            file_type=file_type,
            content=content,
            record_count=len(records),
        )


# =============================================================================
# REPORT
# =============================================================================

class ReportFlow:
    """Builds per-currency breakdowns for a whole-day date window."""

    def __init__(
        self,
        store: LedgerStore,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        aggregator: Optional[ReportAggregator] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._settings = settings or get_settings()
        self._aggregator = aggregator or ReportAggregator(self._settings)

    def report(
        self,
        date_from: date,
        date_to: date,
        kind: TransactionKind = TransactionKind.EXPENSE,
        mode: GroupingMode = GroupingMode.CATEGORY_L1,
        currency: Optional[Currency] = None,
        project_id: Optional[UUID] = None,
    ) -> ReportResult:
        correlation_id = create_correlation_id()

        start, end = _day_bounds(date_from, date_to)
        try:
            records = self._store.fetch_records(start, end)
            project_names = {p.id: p.name for p in self._store.fetch_all_projects()}
        except StorageError as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"flow": "report"},
                correlation_id=correlation_id,
            )
            raise

        selected = self._aggregator.filter_records(
            records,
            date_from,
            date_to,
            project_id=project_id,
            currency=currency,
        )
        breakdowns = self._aggregator.breakdown(selected, mode, kind, project_names)
        totals = self._aggregator.income_expense_totals(selected)

        self._audit_logger.log_report_generated(
            mode=mode.value,
            kind=kind.value,
            currencies=[b.currency.value for b in breakdowns],
            correlation_id=correlation_id,
        )

        return ReportResult(
            correlation_id=correlation_id,
            mode=mode,
            kind=kind,
            breakdowns=breakdowns,
            totals=totals,
            record_count=sum(1 for r in selected if r.kind == kind),
        )


class AppComponents(BaseModel):
    """Everything a front end needs, sharing one store and audit logger."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    store: LedgerStore
    import_flow: ImportFlow
    export_flow: ExportFlow
    report_flow: ReportFlow
    projects: ProjectManager


def create_app_components(
    settings: Optional[LedgerSettings] = None,
    store: Optional[LedgerStore] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use (defaults to get_settings())
        store: Store to use; defaults to the JSON file store at
            settings.store_path
        audit_logger: Audit logger to use; defaults to one appending to
            settings.audit_path

    Returns:
        Flows and project manager bound to the same store
    """
    settings = settings or get_settings()
    store = store or JsonFileLedgerStore(settings.store_path)
    audit_logger = audit_logger or AuditLogger(JsonLinesAuditStorage(settings.audit_path))

    return AppComponents(
        store=store,
        import_flow=ImportFlow(store, audit_logger, settings),
        export_flow=ExportFlow(store, audit_logger, settings),
        report_flow=ReportFlow(store, audit_logger, settings),
        projects=ProjectManager(store, audit_logger, settings),
    )
