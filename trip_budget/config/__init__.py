"""Configuration package."""

from trip_budget.config.settings import (
    DEFAULT_CATEGORY_NAMES,
    AppSettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_CATEGORY_NAMES",
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
