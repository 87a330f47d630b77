"""
Core Data Models for Budget Ledger

These models define the strict schemas for all ledger data.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the snapshot wire format (Portuguese field names)
4. Reject anything that does not conform, never coerce it

DESIGN DECISION: Field names in Python are English; the wire format keeps
the Portuguese keys of the browser-era snapshot (ganhos, nome, valor, ...)
through aliases, so existing backups stay importable.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from budget_ledger.exceptions import ValidationError
from budget_ledger.models.month import is_month_key


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Bucket(str, Enum):
    """
    The three entry lists of a month.

    The value is the public API name; `wire_key` is the snapshot key.
    """
    INCOME = "income"
    FIXED_EXPENSES = "fixedExpenses"
    VARIABLE_EXPENSES = "variableExpenses"

    @property
    def wire_key(self) -> str:
        return _WIRE_KEYS[self]

    @property
    def field_name(self) -> str:
        """Attribute of MonthLedger holding this bucket."""
        return _FIELD_NAMES[self]

    @classmethod
    def coerce(cls, value: Union["Bucket", str]) -> "Bucket":
        """Accept a member, its API value or its wire key."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for bucket in cls:
                if value in (bucket.value, bucket.wire_key):
                    return bucket
        raise ValidationError.single(
            "bucket",
            "unknown_bucket",
            f"Unknown bucket {value!r}. Expected one of: "
            + ", ".join(bucket.value for bucket in cls),
        )


_WIRE_KEYS = {
    Bucket.INCOME: "ganhos",
    Bucket.FIXED_EXPENSES: "despesasFixas",
    Bucket.VARIABLE_EXPENSES: "despesasVariaveis",
}

_FIELD_NAMES = {
    Bucket.INCOME: "income",
    Bucket.FIXED_EXPENSES: "fixed_expenses",
    Bucket.VARIABLE_EXPENSES: "variable_expenses",
}


class ExpenseCategory(str, Enum):
    """
    Suggested categories for variable expenses.

    Categories stay free text on Entry; these are the choices a form offers.
    """
    FOOD = "alimentacao"
    TRANSPORT = "transporte"
    LEISURE = "lazer"
    HEALTH = "saude"
    EDUCATION = "educacao"
    CLOTHING = "vestuario"
    OTHER = "outros"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ExpenseCategory.FOOD: "Alimentação",
    ExpenseCategory.TRANSPORT: "Transporte",
    ExpenseCategory.LEISURE: "Lazer",
    ExpenseCategory.HEALTH: "Saúde",
    ExpenseCategory.EDUCATION: "Educação",
    ExpenseCategory.CLOTHING: "Vestuário",
    ExpenseCategory.OTHER: "Outros",
}


def new_entry_id() -> str:
    """Fresh opaque entry identifier."""
    return str(uuid4())


# Amounts are written as JSON numbers. Up to 15 digits (integer plus
# fractional part, trailing zeros ignored) survive a float round trip exactly.
MAX_AMOUNT_DIGITS = 15


def amount_digits(amount: Decimal) -> int:
    """Digits needed to write `amount` in plain notation, e.g. 1234.5 -> 5."""
    if amount == 0:
        return 1
    _, digits, exponent = amount.as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    if exponent >= 0:
        return len(digits) + exponent
    return max(len(digits), -exponent)


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Entry(BaseModel):
    """
    A single income or expense line.

    Entries are immutable: once created they are only ever appended to or
    removed from a bucket.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str = Field(
        default_factory=new_entry_id,
        min_length=1,
        description="Unique entry ID within its bucket"
    )
    name: str = Field(
        ...,
        min_length=1,
        alias="nome",
        description="Display label"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        alias="valor",
        description="Non-negative magnitude, currency-agnostic"
    )
    category: Optional[str] = Field(
        default=None,
        alias="categoria",
        description="Optional label, used for variable expenses"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def reject_non_numbers(cls, v: Any) -> Any:
        """Amounts must already be numbers; text is parsed by the form validator."""
        if isinstance(v, (bool, str)):
            raise ValueError("Amount must be a number")
        return v

    @field_validator('amount')
    @classmethod
    def validate_digit_count(cls, v: Decimal) -> Decimal:
        if amount_digits(v) > MAX_AMOUNT_DIGITS:
            raise ValueError(f"Amount must have at most {MAX_AMOUNT_DIGITS} digits")
        return v

    @field_validator('category', mode='before')
    @classmethod
    def blank_category_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_serializer('amount', when_used='json')
    def amount_as_number(self, amount: Decimal) -> Union[int, float]:
        """Emit a JSON number: integer when integral, float otherwise."""
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)


class MonthTotals(BaseModel):
    """
    Derived totals for one month.

    Serializes with camelCase keys (totalExpenses, ...) for callers that
    render the summary cards.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    income: Decimal = Decimal("0")
    fixed_expenses: Decimal = Decimal("0")
    variable_expenses: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")

    @model_validator(mode='after')
    def validate_consistency(self) -> 'MonthTotals':
        """Totals must add up."""
        if self.total_expenses != self.fixed_expenses + self.variable_expenses:
            raise ValueError("Total expenses must equal fixed plus variable expenses")
        if self.balance != self.income - self.total_expenses:
            raise ValueError("Balance must equal income minus total expenses")
        return self


class MonthLedger(BaseModel):
    """
    The three categorized entry lists of one calendar month.

    Insertion order is display order. Ids are unique inside each list.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    income: list[Entry] = Field(..., alias="ganhos")
    fixed_expenses: list[Entry] = Field(..., alias="despesasFixas")
    variable_expenses: list[Entry] = Field(..., alias="despesasVariaveis")

    @classmethod
    def empty(cls) -> "MonthLedger":
        return cls(income=[], fixed_expenses=[], variable_expenses=[])

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'MonthLedger':
        """Reject a list that repeats an entry id."""
        for bucket in Bucket:
            ids = [entry.id for entry in self.entries(bucket)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate entry id in {bucket.wire_key}")
        return self

    def entries(self, bucket: Union[Bucket, str]) -> list[Entry]:
        """The live list backing `bucket`."""
        return getattr(self, Bucket.coerce(bucket).field_name)

    def total(self, bucket: Union[Bucket, str]) -> Decimal:
        return sum((entry.amount for entry in self.entries(bucket)), Decimal("0"))

    def compute_totals(self) -> MonthTotals:
        income = self.total(Bucket.INCOME)
        fixed = self.total(Bucket.FIXED_EXPENSES)
        variable = self.total(Bucket.VARIABLE_EXPENSES)
        total_expenses = fixed + variable
        return MonthTotals(
            income=income,
            fixed_expenses=fixed,
            variable_expenses=variable,
            total_expenses=total_expenses,
            balance=income - total_expenses,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.income or self.fixed_expenses or self.variable_expenses)


class LedgerSnapshot(RootModel[dict[str, MonthLedger]]):
    """
    The complete serialized state: month key -> month ledger.

    Any key that is not a YYYY-MM month key invalidates the snapshot.
    """

    @field_validator('root')
    @classmethod
    def validate_month_keys(cls, v: dict[str, MonthLedger]) -> dict[str, MonthLedger]:
        bad_keys = [key for key in v if not is_month_key(key)]
        if bad_keys:
            raise ValueError(f"Not a month key (YYYY-MM): {', '.join(map(repr, bad_keys))}")
        return v

    @property
    def months(self) -> dict[str, MonthLedger]:
        return self.root

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible structure in the snapshot wire format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
