"""Asynchronous locale loading.

LoadCoordinator wraps an injected loader function with per-locale in-flight
deduplication and force-reload support. YAMLTranslationLoader is a ready-made
loader reading translation files from a directory.
"""

import asyncio
import copy
import glob
import inspect
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

import yaml

from linguakit.core.logging import get_module_logger
from linguakit.i18n.errors import InvalidLoadedDataError, LoaderNotConfiguredError
from linguakit.i18n.merge import merge_trees, to_plain
from linguakit.i18n.models import TranslationLoaderFunc, TranslationTree

logger = get_module_logger()

YAML_SUFFIXES = (".yml", ".yaml")


class LoadCoordinator:
    """Runs the injected loader at most once per overlapping burst per locale.

    Attributes:
        loader: Callable taking a locale and returning (or resolving to) a mapping.
        loaded_locales: Locales populated through the dynamic path.
    """

    def __init__(
        self,
        loader: Optional[TranslationLoaderFunc],
        on_loaded: Callable[[str, Mapping[str, Any]], None],
    ):
        """Initialize LoadCoordinator.

        Args:
            loader: Loader function, or None when lazy loading is disabled.
            on_loaded: Called with (locale, data) to merge a successful load.
        """
        self.loader = loader
        self.loaded_locales: Set[str] = set()
        self._on_loaded = on_loaded
        self._in_flight: Dict[str, "asyncio.Future[None]"] = {}

    @property
    def configured(self) -> bool:
        return self.loader is not None

    def is_loaded(self, locale: str) -> bool:
        return locale in self.loaded_locales

    def is_loading(self, locale: str) -> bool:
        return locale in self._in_flight

    def mark_loaded(self, locale: str) -> None:
        self.loaded_locales.add(locale)

    def load(self, locale: str, force_reload: bool = False) -> "asyncio.Future[None]":
        """Start (or join) a load for ``locale``.

        Must be called from a running event loop. Concurrent callers for the
        same locale receive the same future.

        Args:
            locale: Locale to load.
            force_reload: Ignore both the loaded marker and any pending load.

        Returns:
            Future resolving to None once the data has been merged.

        Raises:
            LoaderNotConfiguredError: If no loader was configured.
        """
        if self.loader is None:
            raise LoaderNotConfiguredError()

        if not force_reload:
            pending = self._in_flight.get(locale)
            if pending is not None:
                logger.debug("joined_pending_load", locale=locale)
                return pending

            if locale in self.loaded_locales:
                done = asyncio.get_running_loop().create_future()
                done.set_result(None)
                return done

        task = asyncio.get_running_loop().create_task(self._run(locale))
        self._in_flight[locale] = task
        return task

    async def _run(self, locale: str) -> None:
        logger.info("loading_locale", locale=locale)
        try:
            data = self.loader(locale)
            if inspect.isawaitable(data):
                data = await data

            if not isinstance(data, Mapping):
                raise InvalidLoadedDataError(locale, type(data))

            self._on_loaded(locale, data)
            self.loaded_locales.add(locale)
            logger.info("loaded_locale", locale=locale, key_count=len(data))
        except Exception as e:
            logger.warning("load_locale_failed", locale=locale, error=str(e))
            raise
        finally:
            # A forced reload may own the entry now; it clears its own on settle
            if self._in_flight.get(locale) is asyncio.current_task():
                del self._in_flight[locale]


class YAMLTranslationLoader:
    """Loader for YAML-based translation files.

    Expects files named <locale>.yml or <domain>.<locale>.yml (``.yaml`` also
    accepted) in the translations directory. All files for a locale are
    deep-merged in name order.

    Instances are awaitable loader functions: ``await loader("fr")``.

    Attributes:
        translations_dir: Path to directory containing YAML files.
        cache: Parsed trees by locale (when use_cache is enabled).
    """

    def __init__(self, translations_dir: Path, use_cache: bool = True):
        """Initialize YAML translation loader.

        Args:
            translations_dir: Path to directory with YAML translation files.
            use_cache: Whether to cache parsed trees in memory.

        Raises:
            ValueError: If the directory does not exist.
        """
        self.translations_dir = Path(translations_dir)
        self.use_cache = use_cache
        self.cache: Dict[str, TranslationTree] = {}

        if not self.translations_dir.is_dir():
            raise ValueError(
                f"Translations directory not found: {self.translations_dir}"
            )

        logger.info(
            "initialized_yaml_loader",
            translations_dir=str(self.translations_dir),
            use_cache=use_cache,
        )

    async def __call__(self, locale: str) -> TranslationTree:
        return await asyncio.to_thread(self.load_sync, locale)

    def files_for(self, locale: str) -> List[Path]:
        """List the translation files for a locale, sorted by name."""
        escaped = glob.escape(locale)
        files = set()
        for suffix in YAML_SUFFIXES:
            files.update(self.translations_dir.glob(f"*.{escaped}{suffix}"))
            exact = self.translations_dir / f"{locale}{suffix}"
            if exact.is_file():
                files.add(exact)
        return sorted(files)

    def load_sync(self, locale: str) -> TranslationTree:
        """Read and merge every file for ``locale``.

        Raises:
            FileNotFoundError: If no files exist for the locale.
            ValueError: If a file is not valid YAML.
        """
        if self.use_cache and locale in self.cache:
            logger.debug("loaded_from_cache", locale=locale)
            return copy.deepcopy(self.cache[locale])

        yaml_files = self.files_for(locale)
        if not yaml_files:
            raise FileNotFoundError(
                f"No translation files found for locale {locale} in {self.translations_dir}"
            )

        tree: TranslationTree = {}
        for yaml_file in yaml_files:
            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
                raise ValueError(f"Failed to parse {yaml_file}: {e}") from e

            if data is None:
                continue
            if not isinstance(data, dict):
                logger.warning(
                    "invalid_yaml_format", file=str(yaml_file), expected="dict"
                )
                continue
            tree = to_plain(merge_trees(tree, data))

        logger.info(
            "read_translation_files",
            locale=locale,
            file_count=len(yaml_files),
            namespace_count=len(tree),
        )

        if self.use_cache:
            self.cache[locale] = tree
            return copy.deepcopy(tree)
        return tree

    def available_locales(self) -> List[str]:
        """Detect locales from file names (the last dotted part of the stem)."""
        locales = set()
        for suffix in YAML_SUFFIXES:
            for path in self.translations_dir.glob(f"*{suffix}"):
                locale = path.stem.split(".")[-1]
                if locale:
                    locales.add(locale)
        return sorted(locales)

    def load_all_sync(self) -> Dict[str, TranslationTree]:
        """Load every locale found in the directory.

        Raises:
            ValueError: If the directory holds no translation files at all.
        """
        locales = self.available_locales()
        if not locales:
            raise ValueError(f"No translation files found in {self.translations_dir}")
        return {locale: self.load_sync(locale) for locale in locales}

    def clear_cache(self) -> None:
        """Clear all cached translations."""
        self.cache.clear()
        logger.info("cleared_translation_cache")
