"""
Configuration Management for the Trip Budget Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The two budgeting variants (per-category budgets vs. one trip-wide budget)
are selected here rather than by maintaining two components.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trip_budget.models.ledger import BudgetMode


DEFAULT_CATEGORY_NAMES = [
    "Cruise",
    "Lodging",
    "Food",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Misc",
]


class LedgerSettings(BaseSettings):
    """Ledger behaviour and local persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRIP_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    budget_mode: BudgetMode = Field(
        default=BudgetMode.PER_CATEGORY,
        description="per_category: budget per category; trip: one trip-wide budget"
    )
    allow_custom_categories: bool = Field(
        default=False,
        description="Allow adding, renaming and removing categories at runtime"
    )

    # Local persistence
    storage_path: Path = Field(
        default=Path("data/trip_budget.json"),
        description="JSON file acting as the local key-value store"
    )
    storage_key: str = Field(
        default="vacationBudgetTrackerData",
        min_length=1,
        description="Fixed key the ledger snapshot is stored under"
    )

    default_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORY_NAMES),
        description="Categories restored on first start and after reset"
    )

    @field_validator("default_categories")
    @classmethod
    def validate_default_categories(cls, v: list[str]) -> list[str]:
        """Default names must be non-blank and unique."""
        names = [name.strip() for name in v]
        if any(not name for name in names):
            raise ValueError("Default category names cannot be blank")
        if len(names) != len(set(names)):
            raise ValueError("Default category names must be unique")
        return names


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Stdlib logging level used for structlog output"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol shown in front of amounts"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with `<name>_error`
    entries for the failures.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
