"""Validation package: field normalization and semantic row checks."""

from ledgerbook.validation.normalizer import (
    DATE_FORMATS,
    RowNormalizer,
    parse_amount,
    parse_currency,
    parse_date,
    parse_kind,
)
from ledgerbook.validation.validator import RecordValidator

__all__ = [
    "DATE_FORMATS",
    "RecordValidator",
    "RowNormalizer",
    "parse_amount",
    "parse_currency",
    "parse_date",
    "parse_kind",
]
