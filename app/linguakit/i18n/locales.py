"""Bridge from opaque locale identifiers to Babel locales.

The engine never normalizes locale strings; this mapping is only used when
asking Babel for plural rules or formatting data.
"""

from functools import lru_cache

from babel import Locale as BabelLocale
from babel import UnknownLocaleError

from linguakit.core.logging import get_module_logger

logger = get_module_logger()

DEFAULT_BABEL_LOCALE = "en"


@lru_cache(maxsize=128)
def get_babel_locale(locale: str) -> BabelLocale:
    """Return the Babel locale for an identifier such as "en", "pt-BR" or "zh_Hant".

    Identifiers Babel does not know fall back to English data.
    """
    sep = "-" if "-" in locale else "_"
    try:
        return BabelLocale.parse(locale, sep=sep)
    except (ValueError, TypeError, UnknownLocaleError) as e:
        logger.debug(
            "unknown_babel_locale",
            locale=locale,
            fallback=DEFAULT_BABEL_LOCALE,
            error=str(e),
        )
        return BabelLocale.parse(DEFAULT_BABEL_LOCALE)
