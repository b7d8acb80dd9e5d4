"""
Tests for application settings.
"""

import pytest

from budgetwise.config import AppSettings


class TestAppSettings:
    """Tests for environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BUDGETWISE_LOG_LEVEL", raising=False)
        settings = AppSettings(_env_file=None)

        assert settings.storage_backend == "file"
        assert settings.storage_prefix == "budgetwise_"
        assert settings.report_retention == {"weekly": 12, "monthly": 12, "yearly": 5}

    def test_every_field_is_used_configuration(self):
        assert set(AppSettings.model_fields) == {
            "data_dir",
            "storage_backend",
            "storage_prefix",
            "backup_version",
            "log_level",
            "log_json",
            "weekly_report_retention",
            "monthly_report_retention",
            "yearly_report_retention",
            "default_alert_threshold",
            "recent_transactions_limit",
        }

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("BUDGETWISE_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("BUDGETWISE_YEARLY_REPORT_RETENTION", "3")
        monkeypatch.setenv("BUDGETWISE_APP_ENVIRONMENT", "production")

        settings = AppSettings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.report_retention["yearly"] == 3
        assert not hasattr(settings, "app_environment")

    def test_log_level_is_normalized(self):
        assert AppSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValueError):
            AppSettings(_env_file=None, storage_backend="sqlite")
