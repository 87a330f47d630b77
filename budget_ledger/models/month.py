"""
Month Keys

A month key is the string "YYYY-MM" that partitions the ledger: the year
zero-padded to at least four digits, the month zero-padded to two.
Keys are plain strings so they serialize as-is into the snapshot.
"""

import re
from datetime import date

from budget_ledger.exceptions import ValidationError


MONTH_KEY_PATTERN = re.compile(r"([0-9]{4,})-(0[1-9]|1[0-2])")

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "pt": (
        "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
        "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}


def make_month_key(year: int, month: int) -> str:
    """Build a month key, rejecting months outside 1..12 and negative years."""
    if isinstance(year, bool) or not isinstance(year, int) or year < 0:
        raise ValidationError.single(
            "year", "invalid_value", f"Year must be a non-negative integer, got {year!r}"
        )
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError.single(
            "month", "out_of_range", f"Month must be between 1 and 12, got {month!r}"
        )
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a month key into (year, month)."""
    match = MONTH_KEY_PATTERN.fullmatch(key) if isinstance(key, str) else None
    if match is None:
        raise ValidationError.single(
            "month_key", "invalid_format", f"Month key must look like YYYY-MM, got {key!r}"
        )
    return int(match.group(1)), int(match.group(2))


def is_month_key(key: object) -> bool:
    return isinstance(key, str) and MONTH_KEY_PATTERN.fullmatch(key) is not None


def month_key_for(day: date) -> str:
    """Month key of the calendar month containing `day`."""
    return make_month_key(day.year, day.month)


def shift_month(key: str, delta: int) -> str:
    """
    Move a month key by `delta` calendar months.

    Months wrap 12 <-> 1 with the matching year adjustment.
    """
    year, month = parse_month_key(key)
    index = year * 12 + (month - 1) + delta
    if index < 0:
        raise ValidationError.single(
            "month_key", "out_of_range", f"Cannot move {delta} month(s) from {key}"
        )
    return make_month_key(index // 12, index % 12 + 1)


def format_month_key(key: str, locale: str = "pt") -> str:
    """
    Render a month key as "<Month name> <Year>", e.g. "Março 2024".

    Pure lookup against the fixed list of twelve month names.
    """
    year, month = parse_month_key(key)
    try:
        names = MONTH_NAMES[locale]
    except KeyError:
        raise ValidationError.single(
            "locale", "unsupported", f"No month names for locale {locale!r}"
        ) from None
    return f"{names[month - 1]} {year:04d}"
