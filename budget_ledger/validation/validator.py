"""
Entry Form Validation

DESIGN DECISION: Raw form input (a name string, an amount typed as text,
an optional category) is checked here, before any Entry exists.

All problems are collected and reported together so the form can mark
every bad field at once.

IMPORTANT: Validation NEVER silently fixes issues. "12abc" is not twelve,
"-10" is not ten. Only surrounding whitespace is trimmed.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from budget_ledger.exceptions import ValidationError, ValidationIssue
from budget_ledger.models.ledger import MAX_AMOUNT_DIGITS, Entry, amount_digits


def parse_amount(raw: Any) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
    """
    Turn a form amount into a Decimal.

    Returns (amount, None) on success or (None, issue) on failure.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, ValidationIssue(
            field="amount",
            issue_type="missing",
            message="Amount is required",
        )

    if isinstance(raw, bool):
        amount = None
    elif isinstance(raw, Decimal):
        amount = raw
    elif isinstance(raw, (int, float)):
        amount = Decimal(str(raw))
    elif isinstance(raw, str):
        try:
            amount = Decimal(raw.strip())
        except InvalidOperation:
            amount = None
    else:
        amount = None

    if amount is None or not amount.is_finite():
        return None, ValidationIssue(
            field="amount",
            issue_type="not_a_number",
            message=f"Amount must be a finite number, got {raw!r}",
        )
    if amount < 0:
        return None, ValidationIssue(
            field="amount",
            issue_type="negative",
            message="Amount cannot be negative",
        )
    if amount_digits(amount) > MAX_AMOUNT_DIGITS:
        return None, ValidationIssue(
            field="amount",
            issue_type="too_many_digits",
            message=f"Amount must have at most {MAX_AMOUNT_DIGITS} digits, got {raw!r}",
        )
    return amount, None


class EntryInputValidator:
    """
    Validates raw entry form input and builds the Entry.

    Checks:
    - Name present and non-blank
    - Amount numeric, finite, non-negative and at most 15 digits long
    - Category, when given, is text
    """

    def _collect_issues(
        self,
        name: Any,
        amount: Any,
        category: Any,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        issues = []

        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Name is required",
            ))

        parsed_amount, amount_issue = parse_amount(amount)
        if amount_issue is not None:
            issues.append(amount_issue)

        if category is not None and not isinstance(category, str):
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_type",
                message="Category must be text",
            ))

        return parsed_amount, issues

    def build_entry(
        self,
        name: Any,
        amount: Any,
        category: Any = None,
    ) -> Entry:
        """
        Validate form input and construct a new Entry with a fresh id.

        Raises:
            ValidationError: listing every failing field
        """
        parsed_amount, issues = self._collect_issues(name, amount, category)
        if issues:
            raise ValidationError(
                "Entry rejected: " + "; ".join(issue.message for issue in issues),
                issues=issues,
            )

        try:
            return Entry(name=name, amount=parsed_amount, category=category)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("Entry rejected", e) from e
