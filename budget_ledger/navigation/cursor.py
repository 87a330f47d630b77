"""
Month Cursor

Tracks which month the user is looking at. It starts on the calendar month
of the day the session began and moves only by explicit navigation.
"""

from datetime import date
from typing import Any, Optional

from budget_ledger.exceptions import ValidationError
from budget_ledger.models.month import (
    format_month_key,
    make_month_key,
    month_key_for,
    parse_month_key,
    shift_month,
)


def _as_int(value: Any, field: str) -> int:
    """Accept ints and ASCII digit strings (what a picker hands back)."""
    if isinstance(value, bool):
        raise ValidationError.single(field, "invalid_type", f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError.single(
        field, "invalid_type", f"{field} must be an integer, got {value!r}"
    )


class MonthCursor:
    """The currently viewed month key, with relative and absolute navigation."""

    def __init__(
        self,
        current: Optional[str] = None,
        today: Optional[date] = None,
        locale: str = "pt",
    ):
        if current is not None:
            parse_month_key(current)
            self._current = current
        else:
            self._current = month_key_for(today or date.today())
        self._locale = locale

    @property
    def current(self) -> str:
        return self._current

    @property
    def year(self) -> int:
        return parse_month_key(self._current)[0]

    @property
    def month(self) -> int:
        return parse_month_key(self._current)[1]

    def next(self) -> str:
        """Advance one calendar month (December rolls into January)."""
        self._current = shift_month(self._current, 1)
        return self._current

    def previous(self) -> str:
        """Go back one calendar month (January rolls into December)."""
        self._current = shift_month(self._current, -1)
        return self._current

    def jump_to(self, year: Any, month: Any) -> str:
        """
        Set the cursor to `year`-`month`.

        Any four-digit year is valid, not just the ones a picker offers.

        Raises:
            ValidationError: month outside 1..12 or year not four digits
        """
        year_value = _as_int(year, "year")
        month_value = _as_int(month, "month")
        if not 1000 <= year_value <= 9999:
            raise ValidationError.single(
                "year", "out_of_range", f"Year must have four digits, got {year_value}"
            )
        self._current = make_month_key(year_value, month_value)
        return self._current

    def format(self, key: Optional[str] = None) -> str:
        """Label such as "Março 2024" for `key` (default: the current month)."""
        return format_month_key(key if key is not None else self._current, self._locale)

    @staticmethod
    def picker_years(
        reference_year: Optional[int] = None,
        years_back: int = 5,
        years_ahead: int = 2,
    ) -> list[int]:
        """Years a month picker offers around `reference_year` (default: this year)."""
        year = reference_year if reference_year is not None else date.today().year
        return list(range(year - years_back, year + years_ahead + 1))

    def __repr__(self) -> str:
        return f"MonthCursor(current={self._current!r})"
