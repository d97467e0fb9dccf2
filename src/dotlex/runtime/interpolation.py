"""Placeholder interpolation for resolved translation strings.

Placeholders are "{" + one or more ASCII word characters + "}". Missing
parameters leave the placeholder text untouched. Only substituted values
are HTML-escaped; template text never is.

Python 3.13+.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from dotlex.constants import HTML_ESCAPE_TABLE

if TYPE_CHECKING:
    from dotlex.localization.types import ParamValue, TranslationParams

__all__ = ["PLACEHOLDER_PATTERN", "escape_html", "interpolate", "stringify_param"]

PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(r"\{(\w+)\}", re.ASCII)


def escape_html(value: str) -> str:
    """Replace & < > " ' with their HTML entities.

    Example:
        >>> escape_html("<b>Tom & Jerry</b>")
        '&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;'
    """
    return value.translate(HTML_ESCAPE_TABLE)


def stringify_param(value: ParamValue) -> str:
    """Convert a parameter to its canonical string form.

    Booleans become "true"/"false"; integral floats drop the fractional part
    ("5.0" -> "5") so numeric output matches integers.
    """
    match value:
        case bool():
            return "true" if value else "false"
        case float() if math.isnan(value):
            return "NaN"
        case float() if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        case float() if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        case _:
            return str(value)


def interpolate(
    template: str,
    params: TranslationParams | None,
    *,
    escape: bool = False,
) -> str:
    """Substitute {name} placeholders from params.

    Args:
        template: Resolved translation string
        params: Parameter map; None returns the template without scanning
        escape: HTML-escape each substituted value

    Returns:
        Interpolated string

    Example:
        >>> interpolate("Hello {name}, {missing}", {"name": "Ann"})
        'Hello Ann, {missing}'
    """
    if params is None:
        return template

    def _substitute(match: re.Match[str]) -> str:
        value = params.get(match.group(1))
        if value is None:
            return match.group(0)
        text = stringify_param(value)
        return escape_html(text) if escape else text

    return PLACEHOLDER_PATTERN.sub(_substitute, template)
