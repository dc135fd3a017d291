"""Custom exceptions for the translation engine.

Every exception derives from I18nError so callers can catch the whole family
in one place. Argument and data-shape errors also derive from the matching
builtin (TypeError, LookupError, RuntimeError) so generic handlers keep working.
"""

from typing import Optional


class I18nError(Exception):
    """Base exception for all translation engine errors.

    Example:
        try:
            i18n.set_locale("xx")
        except I18nError as e:
            logger.error("i18n_error", error=str(e))
    """

    pass


class I18nArgumentError(I18nError, TypeError):
    """Raised when an argument has the wrong type or shape.

    Always raised synchronously, before any state is mutated.

    Example:
        >>> i18n.t(123)
        Traceback (most recent call last):
        ...
        I18nArgumentError: key must be a string
    """

    pass


class LocaleUnavailableError(I18nError, LookupError):
    """Raised when switching to a locale that has no translations and no fallback."""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(f"No translations available for locale '{locale}'")


class LoaderNotConfiguredError(I18nError, RuntimeError):
    """Raised when load_locale() is called on an instance built without a loader."""

    def __init__(self, message: str = "loader not configured"):
        super().__init__(message)


class InvalidLoadedDataError(I18nError, TypeError):
    """Raised when the loader returns something other than a mapping."""

    def __init__(self, locale: str, received: Optional[type] = None):
        self.locale = locale
        self.received = received
        type_name = received.__name__ if received is not None else "unknown"
        super().__init__(
            f"loader must return a mapping for locale '{locale}', got {type_name}"
        )


class MissingTranslationError(I18nError, LookupError):
    """Raised by t() for unknown keys when missing behavior is 'throw'."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing translation: {key}")
