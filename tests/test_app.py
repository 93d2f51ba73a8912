"""Tests for the Streamlit page, driven through streamlit's AppTest."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from trip_budget.config import DEFAULT_CATEGORY_NAMES, get_settings


APP_PATH = Path(__file__).parents[1] / "app" / "main.py"
FOOD = DEFAULT_CATEGORY_NAMES.index("Food")


@pytest.fixture
def storage_path(tmp_path, monkeypatch):
    path = tmp_path / "ledger.json"
    monkeypatch.setenv("TRIP_BUDGET_STORAGE_PATH", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


def start_app():
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.run()
    assert not at.exception
    return at


def confirm_reset(at):
    at.button(key="reset").click().run()
    at.button(key="confirm_reset").click().run()
    assert not at.exception


class TestResetPage:
    """Tests for the confirmed reset from the page."""

    def test_reset_clears_category_budgets(self, storage_path, monkeypatch):
        """Test that typed budgets do not come back after a reset."""
        monkeypatch.delenv("TRIP_BUDGET_BUDGET_MODE", raising=False)
        at = start_app()
        at.text_input(key="budget_Food_0").input("100").run()
        store = at.session_state["store"]
        assert store.categories[FOOD].budget == "100"
        assert storage_path.exists()

        confirm_reset(at)
        at.run()

        assert store.categories[FOOD].budget == ""
        assert at.text_input(key="budget_Food_1").value == ""
        assert not storage_path.exists()

    def test_reset_clears_trip_details(self, storage_path, monkeypatch):
        """Test that trip fields start over after a reset."""
        monkeypatch.setenv("TRIP_BUDGET_BUDGET_MODE", "trip")
        at = start_app()
        at.text_input(key="trip_budget_0").input("1500").run()
        store = at.session_state["store"]
        assert store.trip.budget == "1500"

        confirm_reset(at)
        at.run()

        assert store.trip.budget == ""
        assert not storage_path.exists()

    def test_cancelled_reset_keeps_budgets(self, storage_path, monkeypatch):
        """Test that cancelling leaves the typed budget in place."""
        monkeypatch.delenv("TRIP_BUDGET_BUDGET_MODE", raising=False)
        at = start_app()
        at.text_input(key="budget_Food_0").input("100").run()

        at.button(key="reset").click().run()
        at.button(key="cancel_reset").click().run()

        assert at.session_state["store"].categories[FOOD].budget == "100"
        assert at.text_input(key="budget_Food_0").value == "100"
        assert storage_path.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
