"""Configuration package."""

from ledgerbook.config.settings import LedgerSettings, get_settings

__all__ = [
    "LedgerSettings",
    "get_settings",
]
