"""Validation helpers for the expense commands."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .exceptions import ValidationError

TWO_PLACES = Decimal("0.01")
# Largest value a NUMERIC(10, 2) column holds.
MAX_AMOUNT = Decimal("99999999.99")


def quantize_amount(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a non-zero Decimal with exactly two fraction digits."""
    if raw is None:
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")

    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{field} must be at most {MAX_AMOUNT} in magnitude")

    try:
        rounded = quantize_amount(amount)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} cannot be rounded to two decimal places") from exc
    # 0.004 rounds to 0.00, which would persist a zero expense.
    if rounded == 0:
        raise ValidationError(f"{field} must not be zero")
    return rounded


def validate_memo(value: object, field: str = "memo") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    if not value.strip():
        raise ValidationError(f"{field} cannot be empty")
    return value


def parse_expense_id(raw: object) -> Optional[int]:
    """Return the integer id, or None when ``raw`` is not an integer token."""
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None
