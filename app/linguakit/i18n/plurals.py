"""Plural form selection.

An exact zero count always selects the "zero" category. Every other count is
categorized by the plural selector (CLDR rules via Babel unless one is
injected) using its absolute value.
"""

import math
from numbers import Real
from typing import Any, Optional

from linguakit.i18n.locales import get_babel_locale
from linguakit.i18n.models import PluralForms, PluralSelector


def is_count(value: Any) -> bool:
    """Check whether a params value can drive plural selection."""
    return isinstance(value, Real) and not isinstance(value, bool)


def babel_plural_category(locale: str, count: float) -> str:
    """Return the CLDR plural category of ``count`` for ``locale``.

    Args:
        locale: Opaque locale identifier.
        count: Non-negative count.

    Returns:
        One of "zero", "one", "two", "few", "many", "other".
    """
    if not math.isfinite(count):
        return "other"
    return get_babel_locale(locale).plural_form(count)


def select_category(locale: str, count: float, selector: PluralSelector) -> str:
    """Pick the plural category for a signed count."""
    if count == 0:
        return "zero"
    return selector(locale, abs(count))


def resolve_plural(
    forms: PluralForms,
    locale: str,
    count: float,
    selector: PluralSelector = babel_plural_category,
) -> Optional[str]:
    """Return the plural text for ``count``.

    Falls back to the "other" slot when the selected category has no text;
    returns None when "other" is empty too.
    """
    category = select_category(locale, count, selector)
    if category == "zero" and forms.get("zero") is not None:
        return forms.get("zero")
    text = forms.get(category)
    if text is not None:
        return text
    return forms.get("other")
