"""
Input validation shared by the order and payment services.

Each helper returns the coerced value or raises the engine ValidationError
(HTTP 400) naming the offending field. Amounts are rounded half-up to the
currency's minor unit before any sign check, so a value that rounds to zero
is rejected rather than stored as zero.
"""
from decimal import Decimal, InvalidOperation as DecimalError

from payments.money import quantize

from .exceptions import ValidationError


def _coerce_decimal(value, field):
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field=field)
    try:
        if isinstance(value, float):
            value = str(value)
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (DecimalError, TypeError, ValueError):
        raise ValidationError(f"{field} must be a valid amount", field=field)
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a valid amount", field=field)
    return amount


def validate_positive_amount(value, field, message=None, currency=None) -> Decimal:
    amount = quantize(_coerce_decimal(value, field), currency)
    if amount <= 0:
        raise ValidationError(message or f"{field} must be greater than zero", field=field)
    return amount


def validate_non_negative_amount(value, field, message=None, currency=None) -> Decimal:
    amount = _coerce_decimal(value, field)
    if amount < 0:
        raise ValidationError(message or f"{field} cannot be negative", field=field)
    return quantize(amount, currency)


def validate_positive_int(value, field, message=None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(message or f"{field} must be a positive integer", field=field)
    return value
