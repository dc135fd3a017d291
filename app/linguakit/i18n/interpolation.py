"""Placeholder substitution for resolved templates.

Placeholders use the ``{{name}}`` syntax, optionally padded with whitespace
(``{{ name }}``). Placeholders without a matching parameter are left intact.
"""

import math
import re
from decimal import Decimal
from typing import Any, Mapping, Optional

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def stringify(value: Any) -> str:
    """Render a parameter value for display.

    None becomes "", booleans become "true"/"false" and floats use the
    shortest round-trip digits in JavaScript notation: no trailing ".0",
    plain decimals from 1e-6 up to 1e21 and exponents like "1.5e-7" or
    "1e+21" outside that range. Non-finite floats render as NaN/Infinity.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    size = len(digits)
    # Position of the decimal point relative to the first digit
    point = exponent + size

    if size <= point <= 21:
        text = digits + "0" * (point - size)
    elif 0 < point <= 21:
        text = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        mantissa = digits[0] + ("." + digits[1:] if size > 1 else "")
        power = point - 1
        text = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + text


def interpolate(template: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Replace ``{{name}}`` placeholders with values from ``params``.

    Args:
        template: Resolved translation text.
        params: Parameter values by name. None returns the template unchanged.

    Returns:
        The template with every known placeholder substituted.
    """
    if not params:
        return template

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in params:
            return match.group(0)
        return stringify(params[name])

    return PLACEHOLDER_PATTERN.sub(_replace, template)
