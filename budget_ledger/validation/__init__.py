"""Validation package."""

from budget_ledger.exceptions import ValidationError, ValidationIssue
from budget_ledger.validation.validator import EntryInputValidator, parse_amount

__all__ = [
    "EntryInputValidator",
    "ValidationError",
    "ValidationIssue",
    "parse_amount",
]
