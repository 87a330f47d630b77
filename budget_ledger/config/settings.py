"""
Configuration Management for Budget Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every field has a default, so the ledger runs on a fresh machine with no
environment at all. Environment variables (prefix BUDGET_LEDGER_) and a
.env file only override those defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage
    data_dir: Path = Field(
        default=Path.home() / ".budget-ledger",
        description="Directory holding the persisted snapshot"
    )
    storage_key: str = Field(
        default="controle-financeiro-dados",
        min_length=1,
        description="Fixed key the snapshot is stored under"
    )
    storage_quota_bytes: Optional[int] = Field(
        default=5 * 1024 * 1024,
        ge=1,
        description="Largest snapshot the medium accepts (None = unlimited)"
    )
    save_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a storage write before giving up"
    )

    # Export
    export_filename_prefix: str = Field(
        default="controle-financeiro-backup",
        min_length=1,
        description="Prefix of the downloadable backup filename"
    )

    # Month navigation
    month_name_locale: str = Field(
        default="pt",
        description="Language of month names in labels (pt or en)"
    )
    picker_years_back: int = Field(
        default=5,
        ge=0,
        description="Years before the current one offered by a month picker"
    )
    picker_years_ahead: int = Field(
        default=2,
        ge=0,
        description="Years after the current one offered by a month picker"
    )

    # Logging
    audit_history_size: int = Field(
        default=200,
        ge=1,
        description="How many recent audit events are kept in memory"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the local structured log"
    )

    @field_validator('month_name_locale')
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Only locales with a month-name table are allowed."""
        v = v.strip().lower()
        if v not in {"pt", "en"}:
            raise ValueError(f"Unsupported month name locale: {v}. Allowed: pt, en")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @property
    def snapshot_path(self) -> Path:
        """Path of the file the snapshot lives in when stored on disk."""
        return self.data_dir / f"{self.storage_key}.json"


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
