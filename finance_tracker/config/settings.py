"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Services receive their settings at construction time instead of reading
ambient platform state, so tests can build them with explicit values.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LocaleSettings(BaseSettings):
    """Display locale configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCALE_",
        extra="ignore"
    )

    language: str = Field(
        default="en",
        min_length=1,
        description="Language tag used to pick the display currency (e.g. en, es, ja, ar)"
    )

    @field_validator('language')
    @classmethod
    def normalize_language(cls, v: str) -> str:
        return v.strip()


class StoreSettings(BaseSettings):
    """Pro version purchase configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        extra="ignore"
    )

    pro_flag_key: str = Field(
        default="isPro",
        min_length=1,
        description="Key under which the Pro flag is persisted"
    )
    purchase_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Simulated purchase round-trip delay"
    )


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(memory|json)$",
        description="Storage backend: in-memory or a JSON file on disk"
    )
    path: Path = Field(
        default=Path("data/finance_tracker.json"),
        description="Location of the JSON preferences file"
    )


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def locale(self) -> LocaleSettings:
        return LocaleSettings()

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("locale", "store", "storage", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
