"""i18n engine - translation resolution for linguakit.

Resolves dot-notation keys against per-locale translation trees, with a single
fallback locale, CLDR pluralization, ``{{name}}`` interpolation and
deduplicated asynchronous locale loading.

Main components:
- models: PluralForms, MissingBehavior and the callable shapes
- keys: dot-notation lookup
- merge: clone/merge of translation trees with reserved-key filtering
- plurals: plural form selection
- interpolation: placeholder substitution
- events: change and missing-translation listeners
- loader: LoadCoordinator and YAMLTranslationLoader
- translator: I18n, TranslateFunction, create_i18n
- formatters: Babel-backed number/date/relative-time formatting
- factory: create_i18n_from_settings
"""

from linguakit.i18n.errors import (
    I18nArgumentError,
    I18nError,
    InvalidLoadedDataError,
    LoaderNotConfiguredError,
    LocaleUnavailableError,
    MissingTranslationError,
)
from linguakit.i18n.factory import create_i18n_from_settings
from linguakit.i18n.loader import LoadCoordinator, YAMLTranslationLoader
from linguakit.i18n.merge import DEFAULT_RESERVED_KEYS, clone_tree, merge_trees
from linguakit.i18n.models import PLURAL_CATEGORIES, MissingBehavior, PluralForms
from linguakit.i18n.translator import I18n, TranslateFunction, create_i18n

__all__ = [
    "I18n",
    "TranslateFunction",
    "create_i18n",
    "create_i18n_from_settings",
    "MissingBehavior",
    "PluralForms",
    "PLURAL_CATEGORIES",
    "DEFAULT_RESERVED_KEYS",
    "clone_tree",
    "merge_trees",
    "LoadCoordinator",
    "YAMLTranslationLoader",
    "I18nError",
    "I18nArgumentError",
    "LocaleUnavailableError",
    "LoaderNotConfiguredError",
    "InvalidLoadedDataError",
    "MissingTranslationError",
]
