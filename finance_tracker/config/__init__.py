"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    LocaleSettings,
    Settings,
    StorageSettings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LocaleSettings",
    "Settings",
    "StorageSettings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
