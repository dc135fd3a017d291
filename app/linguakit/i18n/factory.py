"""Factory functions for creating i18n instances from settings.

Provides a convenience constructor wiring the YAML directory loader and the
configured locales together.
"""

from pathlib import Path
from typing import Any, Optional

from linguakit.core.config import I18nSettings, get_settings
from linguakit.core.logging import get_module_logger
from linguakit.i18n.loader import YAMLTranslationLoader
from linguakit.i18n.translator import I18n

logger = get_module_logger()


def create_i18n_from_settings(
    i18n_settings: Optional[I18nSettings] = None,
    **overrides: Any,
) -> I18n:
    """Create and configure an I18n instance from I18nSettings.

    When a translations directory is configured its YAML loader becomes the
    instance's lazy loader, and with ``preload`` every locale found in the
    directory is registered up front (not marked as dynamically loaded).

    Args:
        i18n_settings: Settings to use (default: get_settings().i18n, read from the environment on first use).
        **overrides: Keyword arguments passed to I18n, taking precedence.

    Returns:
        I18n: Configured instance.

    Raises:
        ValueError: If the configured translations directory does not exist.
        pydantic.ValidationError: If settings are read from an environment
            holding invalid I18N_* values.

    Usage:
        # Use environment configuration
        i18n = create_i18n_from_settings()

        # Custom settings
        i18n = create_i18n_from_settings(
            I18nSettings(I18N_DEFAULT_LOCALE="fr", I18N_TRANSLATIONS_DIR="locales")
        )
    """
    config = i18n_settings or get_settings().i18n

    options = {
        "fallback_locale": config.fallback_locale,
        "missing_behavior": config.missing_behavior,
    }

    if config.translations_dir:
        translations_dir = Path(config.translations_dir)
        loader = YAMLTranslationLoader(translations_dir, use_cache=config.use_cache)
        options["loader"] = loader

        if config.preload:
            options["translations"] = loader.load_all_sync()
            logger.info(
                "i18n_created_with_preload",
                translations_dir=str(translations_dir),
                locale_count=len(options["translations"]),
            )
        else:
            logger.info("i18n_created_lazy", translations_dir=str(translations_dir))

    options.update(overrides)
    default_locale = options.pop("default_locale", config.default_locale)
    return I18n(default_locale, **options)
