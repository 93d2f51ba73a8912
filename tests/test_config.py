"""Tests for configuration, wiring and audit logging."""

import json

import pytest

from trip_budget.audit import DEFAULT_HISTORY_SIZE, AuditLogger
from trip_budget.config import (
    DEFAULT_CATEGORY_NAMES,
    AppSettings,
    LedgerSettings,
    get_settings,
    validate_all_settings,
)
from trip_budget.models.audit import AuditEventBuilder, AuditEventType
from trip_budget.models.ledger import BudgetMode
from trip_budget.orchestrator import create_app_components
from trip_budget.services.storage import InMemorySnapshotStorage, JsonFileSnapshotStorage


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_ledger_defaults(self, monkeypatch):
        """Test the default ledger configuration."""
        monkeypatch.delenv("TRIP_BUDGET_BUDGET_MODE", raising=False)
        settings = LedgerSettings()
        assert settings.budget_mode == BudgetMode.PER_CATEGORY
        assert settings.allow_custom_categories is False
        assert settings.storage_key == "vacationBudgetTrackerData"
        assert settings.default_categories == DEFAULT_CATEGORY_NAMES

    def test_ledger_env_override(self, monkeypatch):
        """Test that environment variables select the trip mode."""
        monkeypatch.setenv("TRIP_BUDGET_BUDGET_MODE", "trip")
        monkeypatch.setenv("TRIP_BUDGET_ALLOW_CUSTOM_CATEGORIES", "true")
        monkeypatch.setenv("TRIP_BUDGET_DEFAULT_CATEGORIES", '["Flights", "Hotels"]')
        settings = LedgerSettings()
        assert settings.budget_mode == BudgetMode.TRIP
        assert settings.allow_custom_categories is True
        assert settings.default_categories == ["Flights", "Hotels"]

    def test_duplicate_default_categories(self):
        """Test that default categories must be unique."""
        with pytest.raises(ValueError, match="unique"):
            LedgerSettings(default_categories=["Food", "Food"])

    def test_blank_default_category(self):
        """Test that default categories cannot be blank."""
        with pytest.raises(ValueError, match="blank"):
            LedgerSettings(default_categories=["Food", " "])

    def test_app_settings_fields(self):
        """Test that app settings hold only what the page reads."""
        assert set(AppSettings.model_fields) == {"log_level", "currency_symbol"}

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValueError):
            AppSettings(log_level="LOUD")

    def test_validate_all_settings(self, monkeypatch):
        """Test the startup check with a clean environment."""
        monkeypatch.delenv("TRIP_BUDGET_BUDGET_MODE", raising=False)
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results["ledger"] is True
        assert results["app"] is True

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test that a bad value is reported, not raised."""
        monkeypatch.setenv("TRIP_BUDGET_BUDGET_MODE", "weekly")
        get_settings.cache_clear()
        results = validate_all_settings()
        assert results["ledger"] is False
        assert "ledger_error" in results


class TestCreateAppComponents:
    """Tests for component wiring."""

    def test_without_storage(self):
        """Test that use_storage=False keeps everything in memory."""
        store, storage, audit = create_app_components(use_storage=False, settings=LedgerSettings())
        assert isinstance(storage, InMemorySnapshotStorage)
        assert store.mode == BudgetMode.PER_CATEGORY
        assert isinstance(audit, AuditLogger)

    def test_with_file_storage(self, tmp_path):
        """Test that the file backend is used and written on mutation."""
        path = tmp_path / "ledger.json"
        settings = LedgerSettings(storage_path=path, storage_key="k")
        store, storage, _ = create_app_components(settings=settings)

        assert isinstance(storage, JsonFileSnapshotStorage)
        store.add_expense({"date": "2024-01-01", "category": "Food", "amount": "9"})
        assert json.loads(path.read_text(encoding="utf-8"))["k"]["expenses"][0]["amount"] == 9.0


class TestAuditLogger:
    """Tests for the structlog-backed audit logger."""

    def test_log_records_history(self):
        """Test that logged events are kept with the session correlation ID."""
        audit = AuditLogger()
        assert audit.log(AuditEventBuilder.category_added(name="Spa")) is True
        assert audit.history[0].event_type == AuditEventType.CATEGORY_ADDED
        assert audit.history[0].correlation_id == audit.correlation_id

    def test_log_keeps_explicit_correlation_id(self):
        """Test that an event's own correlation ID is not overwritten."""
        other = AuditLogger()
        audit = AuditLogger()
        audit.log(AuditEventBuilder.reset_requested(correlation_id=other.correlation_id))
        assert audit.history[0].correlation_id == other.correlation_id

    def test_history_disabled(self):
        """Test that a history size of 0 keeps nothing."""
        audit = AuditLogger(history_size=0)
        assert audit.log(AuditEventBuilder.save_failed(error_message="boom")) is True
        assert len(audit.history) == 0

    def test_history_is_bounded(self):
        """Test that only the most recent events are kept."""
        audit = AuditLogger(history_size=3)
        for i in range(5):
            audit.log(AuditEventBuilder.category_added(name=f"c{i}"))
        assert [event.details["name"] for event in audit.history] == ["c2", "c3", "c4"]

    def test_default_history_size(self):
        """Test that the default logger keeps a bounded history."""
        assert AuditLogger().history.maxlen == DEFAULT_HISTORY_SIZE


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
