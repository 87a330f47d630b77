"""Tests for month navigation."""

import pytest
from datetime import date

from budget_ledger.exceptions import ValidationError
from budget_ledger.navigation import MonthCursor


class TestMonthCursor:
    """Tests for MonthCursor navigation and labels."""

    def test_starts_on_calendar_month(self):
        assert MonthCursor(today=date(2024, 3, 17)).current == "2024-03"

    def test_explicit_start(self):
        cursor = MonthCursor("2031-11")
        assert (cursor.year, cursor.month) == (2031, 11)

    def test_malformed_start_rejected(self):
        with pytest.raises(ValidationError):
            MonthCursor("2031-1")

    def test_previous_wraps_year(self):
        """Scenario: previous() from 2024-01 gives 2023-12."""
        cursor = MonthCursor("2024-01")
        assert cursor.previous() == "2023-12"
        assert cursor.current == "2023-12"

    def test_next_wraps_year(self):
        cursor = MonthCursor("2024-12")
        assert cursor.next() == "2025-01"

    @pytest.mark.parametrize("start", ["2024-01", "2024-06", "2024-12", "1999-12", "0001-01"])
    def test_next_then_previous_is_identity(self, start):
        cursor = MonthCursor(start)
        cursor.next()
        cursor.previous()
        assert cursor.current == start

    def test_jump_to_december_then_next(self):
        cursor = MonthCursor("2024-05")
        cursor.jump_to(2026, 12)
        assert cursor.next() == "2027-01"

    def test_jump_to_accepts_picker_strings(self):
        cursor = MonthCursor("2024-05")
        assert cursor.jump_to("2019", "3") == "2019-03"

    def test_jump_to_outside_picker_range(self):
        """Years a picker would not offer are still valid."""
        cursor = MonthCursor("2024-05")
        assert cursor.jump_to(1950, 7) == "1950-07"

    @pytest.mark.parametrize("year, month", [
        (2024, 0),
        (2024, 13),
        (24, 5),
        (12024, 5),
        ("20x4", 5),
        (2024, "may"),
        (True, 5),
        (2024.0, 5),
        ("²⁰²⁴", 1),
        ("２０２４", 3),
        (2024, "¹"),
    ])
    def test_jump_to_rejects_bad_values(self, year, month):
        cursor = MonthCursor("2024-05")
        with pytest.raises(ValidationError):
            cursor.jump_to(year, month)
        assert cursor.current == "2024-05"

    def test_no_year_bound_on_relative_navigation(self):
        cursor = MonthCursor("9999-12")
        assert cursor.next() == "10000-01"
        assert cursor.previous() == "9999-12"

    def test_cannot_step_before_year_zero(self):
        cursor = MonthCursor("0000-01")
        with pytest.raises(ValidationError):
            cursor.previous()
        assert cursor.current == "0000-01"

    def test_format(self):
        cursor = MonthCursor("2024-03")
        assert cursor.format() == "Março 2024"
        assert cursor.format("2023-12") == "Dezembro 2023"

    def test_format_english(self):
        assert MonthCursor("2024-03", locale="en").format() == "March 2024"

    def test_picker_years(self):
        assert MonthCursor.picker_years(2024) == [2019, 2020, 2021, 2022, 2023, 2024, 2025, 2026]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
