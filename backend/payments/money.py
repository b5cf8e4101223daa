"""
Monetary precision helpers for order and payment calculations.

CRITICAL: All money in the engine is Decimal. Floats never touch a total.

Key Principles:
1. NEVER use float for money (floats are converted via str() first)
2. Carry full precision through intermediate sums, round only at the edges
3. Use ROUND_HALF_UP so 0.005 always rounds away from zero, matching
   what guests see on a printed check
4. Round each component (subtotal, tax) before summing them into a total
"""

from decimal import Decimal, ROUND_HALF_UP, getcontext
from typing import Iterable, Union

from django.conf import settings

# Set high precision for intermediate calculations
getcontext().prec = 28

Amount = Union[Decimal, str, int, float]

ZERO = Decimal("0.00")

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    # 2-decimal currencies (most common)
    "USD": 2,  # United States Dollar (cents)
    "EUR": 2,  # Euro (cents)
    "GBP": 2,  # British Pound (pence)
    "CAD": 2,  # Canadian Dollar (cents)
    "AUD": 2,  # Australian Dollar (cents)
    "MXN": 2,  # Mexican Peso (centavos)

    # Zero-decimal currencies
    "JPY": 0,  # Japanese Yen (no subunit)
    "KRW": 0,  # South Korean Won (no subunit)
}


def default_currency() -> str:
    return getattr(settings, "DEFAULT_CURRENCY", "USD")


def currency_exponent(currency: str = None) -> int:
    """
    Get the number of decimal places for a currency.

    Unknown codes fall back to 2 places.

    Examples:
        >>> currency_exponent("USD")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get((currency or default_currency()).upper(), 2)


def quantize_decimal(currency: str = None) -> Decimal:
    """
    Get the quantization decimal for a currency (0.01 for USD, 1 for JPY).
    """
    return Decimal(10) ** -currency_exponent(currency)


def to_decimal(amount: Amount) -> Decimal:
    """
    Coerce any numeric input to Decimal without float artefacts.
    """
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        # Convert float to string first to avoid precision issues
        amount = str(amount)
    return Decimal(amount)


def quantize(amount: Amount, currency: str = None) -> Decimal:
    """
    Round to currency decimals using round-half-up.

    Examples:
        >>> quantize("10.125")
        Decimal('10.13')
        >>> quantize("10.124")
        Decimal('10.12')
        >>> quantize("1234.5", "JPY")
        Decimal('1235')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_UP)


def to_minor(amount: Amount, currency: str = None) -> int:
    """
    Convert to minor units (e.g., cents) after quantization.

    CRITICAL: Always quantize BEFORE converting to integer.

    Examples:
        >>> to_minor("10.125")
        1013
        >>> to_minor("1234.56", "JPY")
        1235
    """
    quantized = quantize(amount, currency)
    exponent = currency_exponent(currency)
    return int((quantized * (10 ** exponent)).to_integral_value())


def from_minor(minor: int, currency: str = None) -> Decimal:
    """
    Convert from minor units back to a quantized Decimal.

    Examples:
        >>> from_minor(1013)
        Decimal('10.13')
    """
    exponent = currency_exponent(currency)
    return quantize(Decimal(minor) / (10 ** exponent), currency)


def sum_amounts(amounts: Iterable[Amount]) -> Decimal:
    """
    Sum amounts at full precision. An empty iterable yields Decimal('0.00').
    """
    return sum((to_decimal(a) for a in amounts), ZERO)


def is_positive(amount: Amount) -> bool:
    return to_decimal(amount) > 0
