"""Shared fixtures for ledgerbook tests."""

import io
from datetime import datetime
from typing import Optional

import pytest

from ledgerbook.audit import AuditLogger
from ledgerbook.config import LedgerSettings
from ledgerbook.models.record import Currency, LedgerRecord, Project, TransactionKind
from ledgerbook.orchestrator import ExportFlow, ImportFlow, ReportFlow
from ledgerbook.services.storage import InMemoryAuditStorage, InMemoryLedgerStore

CSV_HEADER = "时间,类型,币种,金额,一级分类,二级分类,项目,备注"


@pytest.fixture
def settings(tmp_path):
    return LedgerSettings(data_dir=tmp_path)


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def import_flow(store, audit_logger, settings):
    return ImportFlow(store, audit_logger, settings)


@pytest.fixture
def export_flow(store, audit_logger, settings):
    return ExportFlow(store, audit_logger, settings)


@pytest.fixture
def report_flow(store, audit_logger, settings):
    return ReportFlow(store, audit_logger, settings)


def csv_stream(*lines: str, header: str = CSV_HEADER) -> io.BytesIO:
    """Encode a header plus data lines as an uploaded CSV file."""
    return io.BytesIO(("\n".join((header,) + lines) + "\n").encode("utf-8"))


def make_record(
    project: Project,
    amount_minor: int = 1000,
    currency: Currency = Currency.SGD,
    kind: TransactionKind = TransactionKind.EXPENSE,
    occurred_at: Optional[datetime] = None,
    category_l1: str = "日常",
    category_l2: str = "吃饭",
    note: str = "",
) -> LedgerRecord:
    return LedgerRecord(
        amount_minor=amount_minor,
        currency=currency,
        kind=kind,
        occurred_at=occurred_at or datetime(2024, 1, 5, 12, 0),
        project_id=project.id,
        category_l1=category_l1,
        category_l2=category_l2,
        note=note,
    )
