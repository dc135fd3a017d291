"""Feature-level fixtures for i18n engine tests.

Provides translation directories and loaders for file-backed loading scenarios.
"""

import pytest
import yaml

from linguakit.i18n import YAMLTranslationLoader


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML translation files.

    Returns a directory structure like:
    - common.en.yml
    - incident.en.yml
    - common.fr.yml
    - de.yml
    """
    en_common = {
        "common": {
            "save": "Save",
            "greeting": "Hello, {{name}}!",
        },
        "items": {"one": "{{count}} item", "other": "{{count}} items"},
    }
    with open(tmp_path / "common.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(en_common, f)

    en_incident = {
        "incident": {
            "created": "Incident {{incident_id}} created",
            "resolved": "Incident {{incident_id}} resolved",
        },
        "common": {"cancel": "Cancel"},
    }
    with open(tmp_path / "incident.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(en_incident, f)

    fr_common = {
        "common": {
            "save": "Enregistrer",
            "greeting": "Bonjour, {{name}} !",
        },
    }
    with open(tmp_path / "common.fr.yml", "w", encoding="utf-8") as f:
        yaml.dump(fr_common, f, allow_unicode=True)

    de_all = {"common": {"save": "Speichern"}}
    with open(tmp_path / "de.yml", "w", encoding="utf-8") as f:
        yaml.dump(de_all, f)

    return tmp_path


@pytest.fixture
def yaml_loader(temp_translations_dir):
    """Create YAMLTranslationLoader for temporary translations directory."""
    return YAMLTranslationLoader(temp_translations_dir, use_cache=False)


@pytest.fixture
def yaml_loader_with_cache(temp_translations_dir):
    """Create YAMLTranslationLoader with caching enabled."""
    return YAMLTranslationLoader(temp_translations_dir, use_cache=True)


@pytest.fixture
def polluting_payload():
    """Untrusted tree carrying reserved structural keys at several depths."""
    return {
        "__proto__": {"polluted": True},
        "constructor": {"prototype": {"polluted": True}},
        "safe": "ok",
        "nested": {
            "__proto__": {"polluted": True},
            "prototype": "bad",
            "value": "kept",
        },
    }


I18N_ENV_VARS = (
    "I18N_DEFAULT_LOCALE",
    "I18N_FALLBACK_LOCALE",
    "I18N_MISSING_BEHAVIOR",
    "I18N_TRANSLATIONS_DIR",
    "I18N_PRELOAD",
    "I18N_USE_CACHE",
)


@pytest.fixture
def clean_i18n_env(monkeypatch):
    """Remove I18N_* variables so settings fall back to their defaults."""
    for name in I18N_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
