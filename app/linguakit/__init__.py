"""linguakit - runtime translation resolution.

Example:
    from linguakit import create_i18n

    i18n = create_i18n("en", translations={"en": {"items": {"one": "{{count}} item", "other": "{{count}} items"}}})
    i18n.t("items", {"count": 3})  # "3 items"
"""

from linguakit.core.logging import configure_logging
from linguakit.i18n import (
    I18n,
    I18nArgumentError,
    I18nError,
    InvalidLoadedDataError,
    LoaderNotConfiguredError,
    LocaleUnavailableError,
    MissingBehavior,
    MissingTranslationError,
    TranslateFunction,
    YAMLTranslationLoader,
    create_i18n,
    create_i18n_from_settings,
)

__version__ = "0.1.0"

__all__ = [
    "I18n",
    "TranslateFunction",
    "create_i18n",
    "create_i18n_from_settings",
    "configure_logging",
    "MissingBehavior",
    "YAMLTranslationLoader",
    "I18nError",
    "I18nArgumentError",
    "LocaleUnavailableError",
    "LoaderNotConfiguredError",
    "InvalidLoadedDataError",
    "MissingTranslationError",
]
