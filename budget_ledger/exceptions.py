"""
Ledger Exceptions

ValidationError is the single error kind for rejected input: form values,
month/year values and import payloads. It carries the individual issues
found so the presentation layer can point at the offending field.

Storage failures live with the storage interface
(budget_ledger.services.storage.PersistenceError).
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues: list[ValidationIssue] = list(issues or [])

    @classmethod
    def single(cls, field: str, issue_type: str, message: str) -> "ValidationError":
        """Build an error for one failing field."""
        return cls(
            message,
            issues=[ValidationIssue(field=field, issue_type=issue_type, message=message)],
        )

    @classmethod
    def from_pydantic(cls, message: str, exc: PydanticValidationError) -> "ValidationError":
        """Translate a pydantic error, one issue per failing location."""
        issues = [
            ValidationIssue(
                field=".".join(str(part) for part in error["loc"]) or "payload",
                issue_type=error["type"],
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return cls(f"{message}: {exc.error_count()} problem(s) found", issues=issues)

    @property
    def fields(self) -> list[str]:
        """Names of the fields that failed."""
        return [issue.field for issue in self.issues]
