"""linguakit configuration settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.stdlib.get_logger(__name__, component="config")

MISSING_BEHAVIOR_VALUES = ("key", "empty", "throw")


class I18nSettings(BaseSettings):
    """Translation engine settings.

    Environment Variables:
        I18N_DEFAULT_LOCALE: Locale selected at start-up (default: en)
        I18N_FALLBACK_LOCALE: Secondary locale consulted on misses (optional)
        I18N_MISSING_BEHAVIOR: 'key', 'empty' or 'throw' (default: key)
        I18N_TRANSLATIONS_DIR: Directory of <locale>.yml files (optional)
        I18N_PRELOAD: Load every locale in the directory at start-up (default: True)
        I18N_USE_CACHE: Cache parsed YAML files in the loader (default: True)

    Example:
        ```python
        from linguakit.core.config import get_settings

        if get_settings().i18n.translations_dir:
            ...
        ```
    """

    default_locale: str = Field(
        default="en",
        alias="I18N_DEFAULT_LOCALE",
        description="Locale selected at start-up",
    )
    fallback_locale: Optional[str] = Field(
        default=None,
        alias="I18N_FALLBACK_LOCALE",
        description="Secondary locale consulted when the current locale misses a key",
    )
    missing_behavior: str = Field(
        default="key",
        alias="I18N_MISSING_BEHAVIOR",
        description="What t() returns for unknown keys: 'key', 'empty' or 'throw'",
    )
    translations_dir: Optional[str] = Field(
        default=None,
        alias="I18N_TRANSLATIONS_DIR",
        description="Directory containing <locale>.yml translation files",
    )
    preload: bool = Field(
        default=True,
        alias="I18N_PRELOAD",
        description="Load every locale found in translations_dir at start-up",
    )
    use_cache: bool = Field(
        default=True,
        alias="I18N_USE_CACHE",
        description="Cache parsed translation files in memory",
    )

    @field_validator("default_locale")
    @classmethod
    def _validate_default_locale(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("I18N_DEFAULT_LOCALE cannot be empty")
        return v

    @field_validator("fallback_locale", mode="before")
    @classmethod
    def _empty_fallback_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("missing_behavior")
    @classmethod
    def _validate_missing_behavior(cls, v: str) -> str:
        value = v.strip().lower()
        if value not in MISSING_BEHAVIOR_VALUES:
            logger.warning("invalid_missing_behavior", value=v)
            raise ValueError(
                f"I18N_MISSING_BEHAVIOR must be one of: {', '.join(MISSING_BEHAVIOR_VALUES)}"
            )
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """linguakit configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    i18n: I18nSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "i18n": I18nSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the settings from the environment on first use.

    Nothing reads the environment at import time, so a host with unrelated or
    invalid I18N_* values can still import the package. Call
    ``get_settings.cache_clear()`` to pick up environment changes.

    Raises:
        pydantic.ValidationError: If an I18N_* value is invalid.
    """
    return Settings()
