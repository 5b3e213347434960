"""Input validation for the budget form.

The submit gate only looks at gross income and location. Expenses never block
a calculation; a budget with no valid expenses is legal and simply totals to
zero.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional, Union

from .exceptions import ValidationError
from .models import ValidationResult

if TYPE_CHECKING:
    from .ledger import ExpenseLedger


FORM_INCOMPLETE_MESSAGE = (
    "Please fill in your gross income, location, and at least one valid expense."
)

# Leading numeric prefix, so "1500/mo" reads as 1500 the way a browser form would.
_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _within_float_range(value: Decimal) -> Optional[Decimal]:
    # Values a browser would read as Infinity also overflow Decimal arithmetic.
    if not value.is_finite() or math.isinf(float(value)):
        return None
    return value


def parse_amount(value: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """Parse user-entered money text into a finite Decimal.

    Returns None for empty input, text without a leading number, NaN,
    infinities and magnitudes beyond double precision range (e.g. "1e1000000").
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return _within_float_range(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None

    match = _NUMERIC_PREFIX.match(value)
    if not match:
        return None
    try:
        parsed = Decimal(match.group(1))
    except InvalidOperation:
        return None
    return _within_float_range(parsed)


def is_valid(gross_income: Union[str, int, float, Decimal, None], location: Optional[str]) -> bool:
    """Return True when the form may be submitted for estimation."""
    income = parse_amount(gross_income)
    if income is None or income <= 0:
        return False
    return bool(location and location.strip())


def validate_form(
    gross_income: Union[str, int, float, Decimal, None],
    location: Optional[str],
    ledger: "ExpenseLedger",
) -> ValidationResult:
    """Derive the expense total and submit readiness for the current form."""
    return ValidationResult(
        total_expenses=ledger.compute_total(),
        is_form_valid=is_valid(gross_income, location),
    )


def require_valid(
    gross_income: Union[str, int, float, Decimal, None],
    location: Optional[str],
) -> Decimal:
    """Return the parsed gross income, raising ValidationError if the form is incomplete."""
    income = parse_amount(gross_income)
    if income is None or income <= 0:
        raise ValidationError(
            FORM_INCOMPLETE_MESSAGE,
            field="gross_income",
            value=gross_income,
        )
    if not location or not location.strip():
        raise ValidationError(
            FORM_INCOMPLETE_MESSAGE,
            field="location",
            value=location,
        )
    return income
