"""
Configuration Management for BudgetWise

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, retention caps and logging behaviour are validated
once at startup instead of being scattered as constants.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from BUDGETWISE_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage
    data_dir: Path = Field(
        default=Path.home() / ".budgetwise",
        description="Directory holding the on-device key-value files"
    )
    storage_backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Key-value backend to use"
    )
    storage_prefix: str = Field(
        default="budgetwise_",
        min_length=1,
        description="Namespace prefix for every persisted key"
    )
    backup_version: str = Field(
        default="1.0.0",
        description="Schema version stamped on backup documents"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False for console output)"
    )

    # Report history retention
    weekly_report_retention: int = Field(
        default=12,
        ge=1,
        description="Weekly reports kept in history"
    )
    monthly_report_retention: int = Field(
        default=12,
        ge=1,
        description="Monthly reports kept in history"
    )
    yearly_report_retention: int = Field(
        default=5,
        ge=1,
        description="Yearly reports kept in history"
    )

    # Budget and ledger defaults
    default_alert_threshold: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Alert threshold applied when a budget omits one"
    )
    recent_transactions_limit: int = Field(
        default=5,
        ge=1,
        description="Default size of the recent-transactions view"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing for the level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def report_retention(self) -> dict[str, int]:
        """Retention cap per report period."""
        return {
            "weekly": self.weekly_report_retention,
            "monthly": self.monthly_report_retention,
            "yearly": self.yearly_report_retention,
        }


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return AppSettings()
