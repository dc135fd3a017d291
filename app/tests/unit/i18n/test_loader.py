"""Tests for linguakit.i18n.loader module."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from linguakit.i18n import YAMLTranslationLoader
from linguakit.i18n.errors import InvalidLoadedDataError, LoaderNotConfiguredError
from linguakit.i18n.loader import LoadCoordinator
from tests.factories.i18n import make_async_loader

pytestmark = pytest.mark.unit


class TestLoadCoordinator:
    """Tests for LoadCoordinator."""

    def test_load_without_loader_raises_synchronously(self):
        """load() raises before creating any task when no loader is configured."""
        coordinator = LoadCoordinator(None, MagicMock())
        assert coordinator.configured is False
        with pytest.raises(LoaderNotConfiguredError):
            coordinator.load("fr")

    @pytest.mark.asyncio
    async def test_load_merges_and_marks_loaded(self):
        """A successful load hands the data to on_loaded and marks the locale."""
        on_loaded = MagicMock()
        loader = make_async_loader({"fr": {"hello": "Bonjour"}})
        coordinator = LoadCoordinator(loader, on_loaded)

        await coordinator.load("fr")

        loader.assert_awaited_once_with("fr")
        on_loaded.assert_called_once_with("fr", {"hello": "Bonjour"})
        assert coordinator.is_loaded("fr")
        assert not coordinator.is_loading("fr")

    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_invocation(self):
        """Overlapping loads of one locale call the loader once."""
        loader = make_async_loader({"fr": {"hello": "Bonjour"}}, delay=0.05)
        coordinator = LoadCoordinator(loader, MagicMock())

        first = coordinator.load("fr")
        second = coordinator.load("fr")
        third = coordinator.load("fr")
        assert first is second is third

        await asyncio.gather(first, second, third)

        assert loader.await_count == 1

    @pytest.mark.asyncio
    async def test_already_loaded_skips_loader(self):
        """A loaded locale resolves immediately without calling the loader."""
        loader = make_async_loader()
        coordinator = LoadCoordinator(loader, MagicMock())

        await coordinator.load("fr")
        await coordinator.load("fr")

        assert loader.await_count == 1

    @pytest.mark.asyncio
    async def test_force_reload_calls_loader_again(self):
        """force_reload bypasses the loaded marker."""
        loader = make_async_loader()
        coordinator = LoadCoordinator(loader, MagicMock())

        await coordinator.load("fr")
        await coordinator.load("fr", force_reload=True)

        assert loader.await_count == 2

    @pytest.mark.asyncio
    async def test_different_locales_load_independently(self):
        """Each locale gets its own loader invocation."""
        loader = make_async_loader(delay=0.01)
        coordinator = LoadCoordinator(loader, MagicMock())

        await asyncio.gather(coordinator.load("fr"), coordinator.load("de"))

        assert loader.await_count == 2
        assert coordinator.loaded_locales == {"fr", "de"}

    @pytest.mark.asyncio
    async def test_loader_error_propagates_to_all_awaiters(self):
        """Every concurrent caller sees the loader's exception."""
        error = ConnectionError("network down")
        loader = AsyncMock(side_effect=error)
        coordinator = LoadCoordinator(loader, MagicMock())

        first = coordinator.load("fr")
        second = coordinator.load("fr")
        results = await asyncio.gather(first, second, return_exceptions=True)

        assert results == [error, error]
        assert loader.await_count == 1
        assert not coordinator.is_loaded("fr")

    @pytest.mark.asyncio
    async def test_in_flight_entry_cleared_after_failure(self):
        """A failed load does not block later attempts."""
        loader = AsyncMock(side_effect=[ConnectionError("once"), {"hello": "Bonjour"}])
        coordinator = LoadCoordinator(loader, MagicMock())

        with pytest.raises(ConnectionError):
            await coordinator.load("fr")
        assert not coordinator.is_loading("fr")

        await coordinator.load("fr")

        assert loader.await_count == 2
        assert coordinator.is_loaded("fr")

    @pytest.mark.asyncio
    async def test_forced_reload_stays_joinable_after_earlier_load_settles(self):
        """The earlier load settling leaves a pending forced reload in the table."""
        gates = [asyncio.Event(), asyncio.Event()]
        calls = []

        async def loader(locale):
            gate = gates[len(calls)]
            calls.append(locale)
            await gate.wait()
            return {"hello": "Bonjour"}

        coordinator = LoadCoordinator(loader, MagicMock())

        first = coordinator.load("fr")
        forced = coordinator.load("fr", force_reload=True)
        assert first is not forced
        while len(calls) < 2:
            await asyncio.sleep(0)

        gates[0].set()
        await first

        assert coordinator.is_loading("fr")
        joined = coordinator.load("fr")
        assert joined is forced

        gates[1].set()
        await joined

        assert not coordinator.is_loading("fr")
        assert calls == ["fr", "fr"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, ["a", "b"], "text", 42])
    async def test_non_mapping_data_rejected(self, payload):
        """Non-mapping loader results raise InvalidLoadedDataError."""
        on_loaded = MagicMock()
        coordinator = LoadCoordinator(AsyncMock(return_value=payload), on_loaded)

        with pytest.raises(InvalidLoadedDataError) as exc_info:
            await coordinator.load("fr")

        assert exc_info.value.locale == "fr"
        assert isinstance(exc_info.value, TypeError)
        on_loaded.assert_not_called()
        assert not coordinator.is_loaded("fr")

    @pytest.mark.asyncio
    async def test_synchronous_loader_supported(self):
        """A plain function returning a mapping also works as a loader."""
        on_loaded = MagicMock()
        coordinator = LoadCoordinator(lambda locale: {"hello": locale}, on_loaded)

        await coordinator.load("fr")

        on_loaded.assert_called_once_with("fr", {"hello": "fr"})


class TestYAMLTranslationLoader:
    """Tests for YAMLTranslationLoader."""

    def test_loader_initialization(self, temp_translations_dir):
        """YAMLTranslationLoader initializes with valid directory."""
        loader = YAMLTranslationLoader(temp_translations_dir)
        assert loader.translations_dir == temp_translations_dir
        assert loader.use_cache is True
        assert loader.cache == {}

    def test_loader_initialization_nonexistent_directory(self, tmp_path):
        """YAMLTranslationLoader raises ValueError for missing directory."""
        with pytest.raises(ValueError):
            YAMLTranslationLoader(tmp_path / "nonexistent")

    def test_load_sync_merges_domain_files(self, yaml_loader):
        """load_sync() deep-merges every file for the locale."""
        tree = yaml_loader.load_sync("en")

        assert tree["common"] == {
            "save": "Save",
            "greeting": "Hello, {{name}}!",
            "cancel": "Cancel",
        }
        assert tree["incident"]["created"] == "Incident {{incident_id}} created"
        assert tree["items"] == {"one": "{{count}} item", "other": "{{count}} items"}

    def test_load_sync_bare_locale_file(self, yaml_loader):
        """<locale>.yml files are picked up."""
        assert yaml_loader.load_sync("de") == {"common": {"save": "Speichern"}}

    def test_load_sync_unicode(self, yaml_loader):
        """Non-ASCII text survives the round trip."""
        assert yaml_loader.load_sync("fr")["common"]["greeting"] == "Bonjour, {{name}} !"

    def test_load_sync_missing_locale(self, yaml_loader):
        """load_sync() raises FileNotFoundError for unknown locales."""
        with pytest.raises(FileNotFoundError):
            yaml_loader.load_sync("ja")

    def test_load_sync_invalid_yaml(self, tmp_path):
        """Malformed YAML raises ValueError."""
        (tmp_path / "en.yml").write_text("common: [unclosed", encoding="utf-8")
        loader = YAMLTranslationLoader(tmp_path)
        with pytest.raises(ValueError):
            loader.load_sync("en")

    def test_load_sync_skips_non_mapping_files(self, tmp_path):
        """Files whose top level is not a mapping are ignored."""
        (tmp_path / "list.en.yml").write_text("- a\n- b\n", encoding="utf-8")
        with open(tmp_path / "ok.en.yml", "w", encoding="utf-8") as f:
            yaml.dump({"hello": "Hello"}, f)
        loader = YAMLTranslationLoader(tmp_path)
        assert loader.load_sync("en") == {"hello": "Hello"}

    def test_cache_used(self, yaml_loader_with_cache):
        """Cached trees are served as independent copies."""
        first = yaml_loader_with_cache.load_sync("en")
        first["common"]["save"] = "changed"
        second = yaml_loader_with_cache.load_sync("en")

        assert "en" in yaml_loader_with_cache.cache
        assert second["common"]["save"] == "Save"

    def test_clear_cache(self, yaml_loader_with_cache):
        """clear_cache() empties the cache."""
        yaml_loader_with_cache.load_sync("en")
        yaml_loader_with_cache.clear_cache()
        assert yaml_loader_with_cache.cache == {}

    def test_available_locales(self, yaml_loader):
        """Locales are detected from file names."""
        assert yaml_loader.available_locales() == ["de", "en", "fr"]

    def test_load_all_sync(self, yaml_loader):
        """load_all_sync() returns a tree per detected locale."""
        trees = yaml_loader.load_all_sync()
        assert set(trees) == {"de", "en", "fr"}
        assert trees["fr"]["common"]["save"] == "Enregistrer"

    def test_load_all_sync_empty_directory(self, tmp_path):
        """load_all_sync() raises ValueError when no files exist."""
        with pytest.raises(ValueError):
            YAMLTranslationLoader(tmp_path).load_all_sync()

    @pytest.mark.asyncio
    async def test_awaitable_loader(self, yaml_loader):
        """Instances can be awaited as loader functions."""
        tree = await yaml_loader("fr")
        assert tree["common"]["save"] == "Enregistrer"
