"""
Lightweight domain validation helpers.

Pure checks with no I/O.  Used at service boundaries so that a rejected
call never reaches the session.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from timesheet_kernel.exceptions import (
    InvalidBudgetError,
    InvalidEmailError,
    InvalidHoursError,
    InvalidRateError,
    MissingFieldError,
    ValidationError,
)

# Hours, rates and budgets are stored as Numeric(..., 2).
CENT = Decimal("0.01")


def to_decimal(value: Any, name: str = "amount") -> Decimal:
    """Convert int/str/float/Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number, got {value!r}") from None


def require_text(entity_type: str, field_name: str, value: str | None) -> str:
    """Return the stripped value; raise MissingFieldError when blank."""
    text = (value or "").strip()
    if not text:
        raise MissingFieldError(entity_type, field_name)
    return text


def _fits_cents(value: Decimal) -> bool:
    """Finite and storable in a two-decimal column without rounding."""
    if not value.is_finite():
        return False
    try:
        return value == value.quantize(CENT)
    except InvalidOperation:
        return False


def require_positive_hours(value: Any) -> Decimal:
    hours = to_decimal(value, "hours")
    if not _fits_cents(hours) or hours <= 0:
        raise InvalidHoursError(str(value))
    return hours


def require_daily_rate(value: Any) -> Decimal | None:
    if value is None:
        return None
    rate = to_decimal(value, "daily_rate")
    if not _fits_cents(rate) or rate < 0:
        raise InvalidRateError(str(value))
    return rate


def require_budget(field_name: str, value: Any) -> Decimal | None:
    if value is None:
        return None
    budget = to_decimal(value, field_name)
    if not _fits_cents(budget) or budget < 0:
        raise InvalidBudgetError(field_name, str(value))
    return budget


def require_email(entity_type: str, value: str | None) -> str:
    email = require_text(entity_type, "email", value)
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise InvalidEmailError(email)
    return email
