"""Locale-aware number, date and relative-time formatting.

Thin pass-throughs to Babel. The i18n instance binds them to its current locale.
"""

import math
from datetime import date, datetime, timedelta, timezone
from numbers import Real
from typing import Any, Union

from babel import dates as babel_dates
from babel import numbers as babel_numbers

from linguakit.i18n.errors import I18nArgumentError
from linguakit.i18n.locales import get_babel_locale

RELATIVE_TIME_UNITS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}

DateLike = Union[datetime, date, int, float, str]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def format_number(value: Any, locale: str, **options: Any) -> str:
    """Format a number with the locale's decimal conventions.

    Args:
        value: Number to format.
        locale: Locale identifier.
        **options: Passed to babel.numbers.format_decimal (format, decimal_quantization, ...).

    Raises:
        I18nArgumentError: If value is not a number.
    """
    if not _is_number(value):
        raise I18nArgumentError("value must be a number")
    return babel_numbers.format_decimal(value, locale=get_babel_locale(locale), **options)


def _coerce_date(value: Any) -> Union[datetime, date]:
    if isinstance(value, (datetime, date)):
        return value
    if _is_number(value):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise I18nArgumentError("value must be a valid date") from e
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise I18nArgumentError("value must be a valid date") from e
    raise I18nArgumentError("value must be a valid date")


def format_date(value: Any, locale: str, format: str = "medium") -> str:
    """Format a date or datetime.

    Args:
        value: datetime, date, POSIX timestamp (seconds) or ISO-8601 string.
        locale: Locale identifier.
        format: Babel format name ("short", "medium", "long", "full") or pattern.

    Raises:
        I18nArgumentError: If value cannot be interpreted as a date.
    """
    moment = _coerce_date(value)
    babel_locale = get_babel_locale(locale)
    if isinstance(moment, datetime):
        return babel_dates.format_datetime(moment, format=format, locale=babel_locale)
    return babel_dates.format_date(moment, format=format, locale=babel_locale)


def format_relative_time(value: Any, unit: str, locale: str) -> str:
    """Format a signed offset such as -1 "day" as "1 day ago".

    Raises:
        I18nArgumentError: If value is not a number or unit is unknown.
    """
    if not _is_number(value):
        raise I18nArgumentError("value must be a number")
    if not isinstance(unit, str) or unit not in RELATIVE_TIME_UNITS:
        raise I18nArgumentError(
            "unit must be one of: " + ", ".join(RELATIVE_TIME_UNITS)
        )

    if not math.isfinite(value):
        raise I18nArgumentError("value must be a finite number")
    try:
        delta = timedelta(seconds=value * RELATIVE_TIME_UNITS[unit])
    except OverflowError as e:
        raise I18nArgumentError("value is out of range") from e
    return babel_dates.format_timedelta(
        delta,
        granularity=unit,
        threshold=1,
        add_direction=True,
        locale=get_babel_locale(locale),
    )
