"""Month navigation package."""

from budget_ledger.navigation.cursor import MonthCursor

__all__ = ["MonthCursor"]
