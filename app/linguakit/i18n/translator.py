"""Translation store and resolution pipeline.

I18n owns the per-locale translation trees and the current/fallback locale
pair, and resolves keys through the current locale first, then the fallback.
Misses (including keys only the fallback could answer) are reported to
missing-translation listeners with the current locale.
"""

from collections.abc import Iterable
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from linguakit.core.logging import get_module_logger
from linguakit.i18n import formatters
from linguakit.i18n.errors import (
    I18nArgumentError,
    LocaleUnavailableError,
    MissingTranslationError,
)
from linguakit.i18n.events import EventHub
from linguakit.i18n.interpolation import interpolate
from linguakit.i18n.keys import KEY_SEPARATOR, join_key, lookup_plural, lookup_text, node_exists
from linguakit.i18n.loader import LoadCoordinator
from linguakit.i18n.merge import DEFAULT_RESERVED_KEYS, clone_tree, merge_trees, to_plain
from linguakit.i18n.models import (
    ChangeCallback,
    InterpolationParams,
    MissingBehavior,
    MissingCallback,
    PluralSelector,
    TranslationLoaderFunc,
    TranslationTree,
)
from linguakit.i18n.plurals import babel_plural_category, is_count, resolve_plural

logger = get_module_logger()


def _validate_locale(locale: Any, name: str = "locale") -> str:
    if not isinstance(locale, str):
        raise I18nArgumentError(f"{name} must be a string")
    if not locale.strip():
        raise I18nArgumentError(f"{name} cannot be empty")
    return locale


class TranslateFunction:
    """Callable bound to an I18n instance and an optional key prefix.

    Calling it resolves ``prefix.key`` against the instance's current locale
    at call time, so a namespaced function follows later locale switches.

    Usage:
        t = i18n.t
        t("greeting", {"name": "Ada"})
        common = t.namespace("common")
        common("save")            # resolves "common.save"
        common.namespace("btn")   # resolves "common.btn.<key>"
    """

    def __init__(self, i18n: "I18n", prefix: Optional[str] = None):
        self._i18n = i18n
        self.prefix = prefix or None

    def __call__(self, key: str, params: Optional[InterpolationParams] = None) -> str:
        if not isinstance(key, str):
            raise I18nArgumentError("key must be a string")
        return self._i18n.translate(join_key(self.prefix, key), params)

    def namespace(self, prefix: Optional[str]) -> "TranslateFunction":
        """Derive a translate function scoped under ``prefix``.

        None or an empty prefix returns a function equivalent to this one.

        Raises:
            I18nArgumentError: If prefix is neither None nor a string.
        """
        if prefix is not None and not isinstance(prefix, str):
            raise I18nArgumentError("prefix must be a string")

        combined = self.prefix
        if prefix:
            combined = f"{self.prefix}{KEY_SEPARATOR}{prefix}" if self.prefix else prefix
        return TranslateFunction(self._i18n, combined)

    def __repr__(self) -> str:
        return f"TranslateFunction(prefix={self.prefix!r})"


class I18n:
    """Translation store with fallback resolution, pluralization and lazy loading.

    Attributes:
        t: Root translate function (no prefix).
    """

    def __init__(
        self,
        default_locale: str,
        fallback_locale: Optional[str] = None,
        translations: Optional[Mapping[str, Mapping[str, Any]]] = None,
        loader: Optional[TranslationLoaderFunc] = None,
        plural_selector: Optional[PluralSelector] = None,
        reserved_keys: Optional[Iterable] = None,
        missing_behavior: Union[str, MissingBehavior] = MissingBehavior.KEY,
    ):
        """Initialize I18n.

        All arguments are validated before any state is created.

        Args:
            default_locale: Locale selected at start-up.
            fallback_locale: Locale consulted when the current one misses a key.
            translations: Initial trees by locale (cloned, not marked as loaded).
            loader: Callable returning (or resolving to) a tree for a locale.
            plural_selector: (locale, abs_count) -> CLDR category. Defaults to Babel rules.
            reserved_keys: Keys dropped from all ingested trees.
            missing_behavior: "key", "empty" or "throw".

        Raises:
            I18nArgumentError: If any argument has the wrong type or shape.
        """
        _validate_locale(default_locale, "default_locale")
        if fallback_locale is not None:
            _validate_locale(fallback_locale, "fallback_locale")
        if translations is not None:
            if not isinstance(translations, Mapping):
                raise I18nArgumentError("translations must be a mapping")
            for locale, tree in translations.items():
                _validate_locale(locale, "translations locale")
                if not isinstance(tree, Mapping):
                    raise I18nArgumentError(
                        f"translations for locale '{locale}' must be a mapping"
                    )
        if loader is not None and not callable(loader):
            raise I18nArgumentError("loader must be callable")
        if plural_selector is not None and not callable(plural_selector):
            raise I18nArgumentError("plural_selector must be callable")
        if reserved_keys is None:
            reserved = DEFAULT_RESERVED_KEYS
        elif isinstance(reserved_keys, str) or not isinstance(reserved_keys, Iterable):
            raise I18nArgumentError("reserved_keys must be a collection of strings")
        else:
            reserved = frozenset(reserved_keys)
        behavior = self._coerce_behavior(missing_behavior)

        self._lock = RLock()
        self._current_locale = default_locale
        self._fallback_locale = fallback_locale
        self._missing_behavior = behavior
        self._plural_selector = plural_selector or babel_plural_category
        self._reserved_keys = reserved
        self._translations: Dict[str, TranslationTree] = {}
        self._events = EventHub()
        self._loads = LoadCoordinator(loader, self._merge_loaded)

        for locale, tree in (translations or {}).items():
            self._translations[locale] = clone_tree(tree, self._reserved_keys)

        self.t = TranslateFunction(self)

        logger.info(
            "initialized_i18n",
            default_locale=default_locale,
            fallback_locale=fallback_locale,
            locale_count=len(self._translations),
            lazy_loading=loader is not None,
        )

    # Resolution

    def translate(self, key: str, params: Optional[InterpolationParams] = None) -> str:
        """Resolve ``key`` for the current locale and interpolate ``params``.

        Args:
            key: Dot-separated key; surrounding whitespace is ignored.
            params: Placeholder values. A numeric "count" also selects plural forms.

        Returns:
            The translated text, or the missing-behavior result.

        Raises:
            I18nArgumentError: If key is not a string or params is not a mapping.
            MissingTranslationError: If the key is missing and behavior is "throw".
        """
        if not isinstance(key, str):
            raise I18nArgumentError("key must be a string")
        if params is not None and not isinstance(params, Mapping):
            raise I18nArgumentError("params must be a mapping")

        trimmed_key = key.strip()
        if not trimmed_key:
            return ""

        count = params.get("count") if params else None
        if not is_count(count):
            count = None

        current = self._current_locale
        fallback = self._fallback_locale

        result = self._resolve(current, trimmed_key, count)
        found_in_current = result is not None

        if result is None and fallback:
            result = self._resolve(fallback, trimmed_key, count)
            if result is not None:
                logger.debug(
                    "used_fallback_translation",
                    key=trimmed_key,
                    requested_locale=current,
                    fallback_locale=fallback,
                )

        if result is None:
            logger.info("translation_missing", key=trimmed_key, locale=current)
            self._events.emit_missing(trimmed_key, current)

            behavior = self._missing_behavior
            if behavior is MissingBehavior.EMPTY:
                return ""
            if behavior is MissingBehavior.THROW:
                raise MissingTranslationError(trimmed_key)
            return trimmed_key

        if not found_in_current:
            self._events.emit_missing(trimmed_key, current)

        return interpolate(result, params)

    def _resolve(self, locale: str, key: str, count: Optional[float]) -> Optional[str]:
        tree = self._translations.get(locale)
        if tree is None:
            return None

        if count is not None:
            forms = lookup_plural(tree, key)
            if forms is not None:
                text = resolve_plural(forms, locale, count, self._plural_selector)
                if text is not None:
                    return text

        return lookup_text(tree, key)

    def namespace(self, prefix: Optional[str]) -> TranslateFunction:
        """Shortcut for ``i18n.t.namespace(prefix)``."""
        return self.t.namespace(prefix)

    # Locale management

    def get_locale(self) -> str:
        return self._current_locale

    @property
    def fallback_locale(self) -> Optional[str]:
        return self._fallback_locale

    def set_locale(self, locale: str) -> "I18n":
        """Switch the current locale and notify change listeners.

        Setting the current locale again is a no-op.

        Raises:
            I18nArgumentError: If locale is not a non-empty string.
            LocaleUnavailableError: If translations exist, none are registered
                for ``locale`` and no fallback locale is configured.
        """
        _validate_locale(locale)

        with self._lock:
            if locale == self._current_locale:
                return self

            if (
                self._translations
                and locale not in self._translations
                and not self._fallback_locale
            ):
                logger.warning("locale_unavailable", locale=locale)
                raise LocaleUnavailableError(locale)

            previous = self._current_locale
            self._current_locale = locale

        logger.info("locale_changed", locale=locale, previous_locale=previous)
        self._events.emit_change(locale, previous)
        return self

    async def set_locale_async(self, locale: str) -> "I18n":
        """Load ``locale`` if a loader is configured and it was not loaded yet, then switch."""
        _validate_locale(locale)
        if self._loads.configured and not self._loads.is_loaded(locale):
            await self.load_locale(locale)
        return self.set_locale(locale)

    def get_available_locales(self) -> List[str]:
        """Return the locales that have translations, in insertion order."""
        with self._lock:
            return list(self._translations)

    # Translation management

    def add_translations(self, locale: str, translations: Mapping[str, Any]) -> "I18n":
        """Deep-merge ``translations`` into the tree for ``locale``.

        A locale seen for the first time is marked as loaded.

        Raises:
            I18nArgumentError: If locale or translations have the wrong shape.
        """
        _validate_locale(locale)
        if not isinstance(translations, Mapping):
            raise I18nArgumentError("translations must be a mapping")

        with self._lock:
            existing = self._translations.get(locale)
            if existing is not None:
                self._translations[locale] = merge_trees(
                    existing, translations, self._reserved_keys
                )
            else:
                self._translations[locale] = clone_tree(translations, self._reserved_keys)
                self._loads.mark_loaded(locale)

        logger.debug("added_translations", locale=locale, key_count=len(translations))
        return self

    def _merge_loaded(self, locale: str, data: Mapping[str, Any]) -> None:
        self.add_translations(locale, data)

    def has_key(self, key: str, locale: Optional[str] = None) -> bool:
        """Check whether ``key`` exists in one locale (the fallback is not consulted).

        Namespaces and plural forms count as existing keys.

        Raises:
            I18nArgumentError: If key or locale is not a string.
        """
        if not isinstance(key, str):
            raise I18nArgumentError("key must be a string")
        if locale is not None and not isinstance(locale, str):
            raise I18nArgumentError("locale must be a string")

        target = locale if locale is not None else self._current_locale
        return node_exists(self._translations.get(target), key)

    def get_translations(self, locale: Optional[str] = None) -> Dict[str, Any]:
        """Return a deep copy of the tree for ``locale`` (default: current), or {}."""
        if locale is not None and not isinstance(locale, str):
            raise I18nArgumentError("locale must be a string")

        target = locale if locale is not None else self._current_locale
        tree = self._translations.get(target)
        return to_plain(tree) if tree is not None else {}

    # Lazy loading

    def load_locale(self, locale: str, force_reload: bool = False):
        """Load ``locale`` through the configured loader.

        Must be called from a running event loop; await the returned future.
        Concurrent calls for the same locale share one loader invocation.

        Raises:
            I18nArgumentError: If locale is not a non-empty string.
            LoaderNotConfiguredError: If no loader was configured.
        """
        _validate_locale(locale)
        return self._loads.load(locale, force_reload=force_reload)

    def is_locale_loaded(self, locale: str) -> bool:
        """Check whether any translations are registered for ``locale``."""
        return locale in self._translations

    # Events

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback(new_locale, previous_locale)``; returns an unsubscribe function."""
        return self._events.on_change(callback)

    def on_missing(self, callback: MissingCallback) -> Callable[[], None]:
        """Register ``callback(key, current_locale)``; returns an unsubscribe function."""
        return self._events.on_missing(callback)

    @property
    def last_listener_error(self) -> Optional[Exception]:
        """Most recent exception raised (and swallowed) by a listener."""
        return self._events.last_error

    # Missing behavior

    @staticmethod
    def _coerce_behavior(value: Union[str, MissingBehavior]) -> MissingBehavior:
        try:
            return MissingBehavior.from_value(value)
        except ValueError as e:
            raise I18nArgumentError(str(e)) from e

    @property
    def missing_behavior(self) -> MissingBehavior:
        return self._missing_behavior

    def set_missing_behavior(self, behavior: Union[str, MissingBehavior]) -> "I18n":
        """Choose what t() returns for unknown keys.

        Raises:
            I18nArgumentError: If behavior is not "key", "empty" or "throw".
        """
        self._missing_behavior = self._coerce_behavior(behavior)
        return self

    # Formatting

    def format_number(self, value: Any, **options: Any) -> str:
        return formatters.format_number(value, self._current_locale, **options)

    def format_date(self, value: Any, format: str = "medium") -> str:
        return formatters.format_date(value, self._current_locale, format=format)

    def format_relative_time(self, value: Any, unit: str) -> str:
        return formatters.format_relative_time(value, unit, self._current_locale)

    def __repr__(self) -> str:
        return (
            f"I18n(locale={self._current_locale!r}, "
            f"fallback_locale={self._fallback_locale!r}, "
            f"locales={list(self._translations)!r})"
        )


def create_i18n(
    default_locale: str,
    *,
    fallback_locale: Optional[str] = None,
    translations: Optional[Mapping[str, Mapping[str, Any]]] = None,
    loader: Optional[TranslationLoaderFunc] = None,
    plural_selector: Optional[PluralSelector] = None,
    reserved_keys: Optional[Iterable] = None,
    missing_behavior: Union[str, MissingBehavior] = MissingBehavior.KEY,
) -> I18n:
    """Create an I18n instance.

    Usage:
        i18n = create_i18n(
            "en",
            translations={
                "en": {"hello": "Hello", "greeting": "Hello, {{name}}!"},
                "es": {"hello": "Hola", "greeting": "¡Hola, {{name}}!"},
            },
        )
        i18n.t("hello")                       # "Hello"
        i18n.t("greeting", {"name": "World"})  # "Hello, World!"

    Raises:
        I18nArgumentError: If any option has the wrong type or shape.
    """
    return I18n(
        default_locale,
        fallback_locale=fallback_locale,
        translations=translations,
        loader=loader,
        plural_selector=plural_selector,
        reserved_keys=reserved_keys,
        missing_behavior=missing_behavior,
    )
