import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing `linguakit`
# works during pytest collection regardless of the invocation directory.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402

from linguakit.core.logging import configure_logging  # noqa: E402
from tests.factories.i18n import make_async_loader, make_i18n  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    """Route structlog through stdlib logging with output suppressed."""
    configure_logging()


@pytest.fixture
def i18n():
    """I18n instance with English and German trees, current locale "en"."""
    return make_i18n()


@pytest.fixture
def i18n_with_fallback():
    """I18n instance with current locale "de" and fallback "en"."""
    return make_i18n(default_locale="de", fallback_locale="en")


@pytest.fixture
def async_loader():
    """AsyncMock loader serving factory trees for en/de/fr."""
    return make_async_loader()
