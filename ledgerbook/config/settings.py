"""
Configuration Management for ledgerbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable (data location, reserved project names, validation
thresholds, logging) is read from LEDGER_* variables or a .env file.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON ledger store"
    )
    store_filename: str = Field(
        default="ledger.json",
        description="File name of the JSON ledger store inside data_dir"
    )
    audit_filename: str = Field(
        default="audit.jsonl",
        description="File name of the append-only audit log inside data_dir"
    )

    # Reserved project names
    default_project_name: str = Field(
        default="日常项目",
        min_length=1,
        description="Name given to a default project synthesized during import"
    )
    unknown_project_label: str = Field(
        default="未知项目",
        min_length=1,
        description="Project label written for dangling references and mapped back to the default on import"
    )

    # Export
    export_sheet_name: str = Field(
        default="流水",
        min_length=1,
        description="Worksheet name used in Excel XML exports"
    )

    # Validation thresholds (warnings only)
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a record date can be before it is flagged"
    )
    max_reasonable_amount: Decimal = Field(
        default=Decimal("1000000"),
        gt=0,
        description="Amounts above this (in major units) are flagged as suspicious"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the ledgerbook loggers"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level

    @property
    def store_path(self) -> Path:
        """Full path of the JSON ledger store."""
        return self.data_dir / self.store_filename

    @property
    def audit_path(self) -> Path:
        """Full path of the audit log."""
        return self.data_dir / self.audit_filename


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
