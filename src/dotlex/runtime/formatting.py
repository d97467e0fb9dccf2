"""Pattern-based number, currency, date and relative-time formatting.

These helpers substitute fixed patterns; they are not a CLDR formatting
engine. Locale only selects the currency symbol and the wording of
relative times (Chinese for "zh*" locales, English otherwise).

Timestamps are datetime/date objects or POSIX seconds.

Python 3.13+.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from dotlex.constants import DAY, HOUR, MINUTE, MONTH, WEEK, YEAR
from dotlex.enums import DateStyle
from dotlex.locale_utils import primary_language

__all__ = [
    "DateFormat",
    "NumberFormat",
    "format_currency",
    "format_date",
    "format_number",
    "format_relative",
]

type Timestamp = datetime | date | int | float

_GROUPING_PATTERN = re.compile(r"\B(?=(\d{3})+(?!\d))")

# Relative-time units, largest threshold first: (upper bound, size, zh, en singular)
_RELATIVE_UNITS: tuple[tuple[float, int, str, str], ...] = (
    (HOUR, MINUTE, "分钟", "minute"),
    (DAY, HOUR, "小时", "hour"),
    (WEEK, DAY, "天", "day"),
    (MONTH, WEEK, "周", "week"),
    (YEAR, MONTH, "个月", "month"),
    (float("inf"), YEAR, "年", "year"),
)


@dataclass(frozen=True, slots=True)
class NumberFormat:
    """Number formatting options.

    Attributes:
        decimals: Fixed number of fraction digits (default: 2)
        thousands_separator: Group separator inserted every three digits
        decimal_separator: Separator between integer and fraction parts
    """

    decimals: int = 2
    thousands_separator: str = ","
    decimal_separator: str = "."

    def __post_init__(self) -> None:
        """Validate decimals.

        Raises:
            ValueError: If decimals is negative
        """
        if self.decimals < 0:
            msg = "decimals must be non-negative"
            raise ValueError(msg)

    def replace(self, **overrides: object) -> NumberFormat:
        """Return a copy with the given fields overridden."""
        return replace(self, **overrides)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class DateFormat:
    """Named date patterns using the tokens YYYY MM DD HH mm ss."""

    date: str = "YYYY-MM-DD"
    time: str = "HH:mm:ss"
    datetime: str = "YYYY-MM-DD HH:mm:ss"

    def pattern_for(self, style: str) -> str:
        """Return the pattern for a DateStyle name, or style itself as a custom pattern."""
        match style:
            case DateStyle.DATE:
                return self.date
            case DateStyle.TIME:
                return self.time
            case DateStyle.DATETIME:
                return self.datetime
            case _:
                return style


def _to_datetime(value: Timestamp) -> datetime:
    match value:
        case datetime():
            return value
        case date():
            return datetime(value.year, value.month, value.day)
        case _:
            try:
                return datetime.fromtimestamp(value)
            except (OverflowError, OSError, ValueError) as e:
                msg = f"Timestamp out of range: {value!r}"
                raise ValueError(msg) from e


def format_number(value: float | int | Decimal, options: NumberFormat | None = None) -> str:
    """Format a number with fixed decimals and digit grouping.

    Rounds half away from zero on the exact value. Non-finite input is
    rendered as "Infinity", "-Infinity" or "NaN" without grouping.

    Example:
        >>> format_number(1234567.89)
        '1,234,567.89'
        >>> format_number(1234.5, NumberFormat(decimals=0))
        '1,235'
    """
    opts = options or NumberFormat()
    exact = Decimal(value)
    if exact.is_nan():
        return "NaN"
    if exact.is_infinite():
        return "-Infinity" if exact.is_signed() else "Infinity"

    quantum = Decimal(1).scaleb(-opts.decimals)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the decimals
        ctx.prec = max(exact.adjusted(), 0) + opts.decimals + 2
        fixed = str(exact.quantize(quantum, rounding=ROUND_HALF_UP))
    if fixed.startswith("-") and Decimal(fixed) == 0:
        fixed = fixed[1:]

    int_part, _, dec_part = fixed.partition(".")
    sep = opts.thousands_separator
    grouped = _GROUPING_PATTERN.sub(lambda _m: sep, int_part)

    if dec_part:
        return f"{grouped}{opts.decimal_separator}{dec_part}"
    return grouped


def format_currency(
    value: float | int | Decimal,
    locale_code: str,
    currency: str | None = None,
    options: NumberFormat | None = None,
) -> str:
    """Format a monetary amount as symbol + formatted number.

    Without an explicit symbol: "¥" for Chinese locales, "$" for English
    locales, "¤" otherwise.

    Example:
        >>> format_currency(1234.56, "en-US")
        '$1,234.56'
        >>> format_currency(1234.56, "en-US", "€")
        '€1,234.56'
    """
    if currency is None:
        match primary_language(locale_code):
            case "zh":
                currency = "¥"
            case "en":
                currency = "$"
            case _:
                currency = "¤"
    return f"{currency}{format_number(value, options)}"


def format_date(
    value: Timestamp,
    style: str = DateStyle.DATE,
    patterns: DateFormat | None = None,
) -> str:
    """Format a timestamp in local time.

    Args:
        value: datetime, date or POSIX seconds
        style: "date", "time", "datetime" or a custom pattern
        patterns: Named patterns (default: DateFormat())

    Returns:
        Pattern with the first occurrence of each token substituted

    Raises:
        ValueError: If value is POSIX seconds outside the platform range

    Example:
        >>> format_date(datetime(2024, 1, 15, 14, 30), "datetime")
        '2024-01-15 14:30:00'
    """
    pattern = (patterns or DateFormat()).pattern_for(style)
    moment = _to_datetime(value)
    return (
        pattern.replace("YYYY", str(moment.year), 1)
        .replace("MM", f"{moment.month:02d}", 1)
        .replace("DD", f"{moment.day:02d}", 1)
        .replace("HH", f"{moment.hour:02d}", 1)
        .replace("mm", f"{moment.minute:02d}", 1)
        .replace("ss", f"{moment.second:02d}", 1)
    )


def format_relative(
    value: Timestamp,
    locale_code: str,
    *,
    now: float | None = None,
) -> str:
    """Describe a timestamp relative to now.

    Args:
        value: datetime, date or POSIX seconds
        locale_code: Chinese wording for "zh*" locales, English otherwise
        now: Reference POSIX time (default: time.time())

    Raises:
        ValueError: If value is POSIX seconds outside the platform range

    Example:
        >>> format_relative(1_000_000 - 300, "en-US", now=1_000_000)
        '5 minutes ago'
        >>> format_relative(1_000_000 - 300, "zh-CN", now=1_000_000)
        '5 分钟前'
    """
    reference = time.time() if now is None else now
    diff = reference - _to_datetime(value).timestamp()
    abs_diff = abs(diff)
    is_zh = primary_language(locale_code) == "zh"

    if abs_diff < MINUTE:
        return "刚刚" if is_zh else "just now"

    for bound, size, zh_unit, en_unit in _RELATIVE_UNITS:
        if abs_diff < bound:
            count = int(abs_diff // size)
            break

    if is_zh:
        return f"{count} {zh_unit}前" if diff > 0 else f"{count} {zh_unit}后"
    unit = en_unit if count == 1 else f"{en_unit}s"
    return f"{count} {unit} ago" if diff > 0 else f"in {count} {unit}"
