"""
Order financial calculators.

Pure functions compute line totals, subtotal and tax; OrderCalculator applies
them to a persisted Order so the recompute step and previews share one
implementation.

Rounding policy:
    subtotal and tax are rounded independently (round-half-up, currency minor
    unit) and the total is the sum of the ROUNDED parts. Summing unrounded
    values and rounding once can differ by a cent, so keep this order.

Usage:
    from orders.calculators import calculate_order_totals
    totals = calculate_order_totals(
        [{"price": Decimal("6.50"), "quantity": 2}], rate=Decimal("0.0825")
    )

    from orders.calculators import OrderCalculator
    totals = OrderCalculator(order).calculate_totals()
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from django.conf import settings

from payments.money import ZERO, quantize, sum_amounts, to_decimal


def _field(source, name, default=None):
    """Read a field from either a mapping or an object."""
    if isinstance(source, dict):
        return source.get(name, default)
    return getattr(source, name, default)


def default_tax_rate() -> Decimal:
    return to_decimal(getattr(settings, "DEFAULT_TAX_RATE", Decimal("0.08")))


def calculate_subtotal(items: Iterable[Any]) -> Decimal:
    """
    Sum of price * quantity over all items.

    No rounding is applied here; full precision is carried forward.
    Empty input yields Decimal('0.00').
    """
    return sum_amounts(
        to_decimal(_field(item, "price")) * int(_field(item, "quantity", 1))
        for item in items
    )


def calculate_tax(subtotal, rate=None) -> Decimal:
    """
    subtotal * rate, unrounded. rate is a fraction (0.0825 for 8.25%).
    """
    if rate is None:
        rate = default_tax_rate()
    return to_decimal(subtotal) * to_decimal(rate)


def calculate_order_totals(items: Iterable[Any], rate=None, currency: Optional[str] = None) -> Dict[str, Decimal]:
    """
    Compose subtotal and tax, round each, then sum the rounded values.

    Returns:
        dict: {'subtotal': Decimal, 'tax': Decimal, 'total': Decimal}
    """
    raw_subtotal = calculate_subtotal(items)
    raw_tax = calculate_tax(raw_subtotal, rate)

    subtotal = quantize(raw_subtotal, currency)
    tax = quantize(raw_tax, currency)

    return {
        "subtotal": subtotal,
        "tax": tax,
        "total": subtotal + tax,
    }


def _modifier_quantity(modifier) -> int:
    quantity = _field(modifier, "quantity")
    return 1 if quantity is None else int(quantity)


def calculate_modifier_total(modifiers: Iterable[Any]) -> Decimal:
    """
    sum(modifier.price * modifier.quantity); quantity defaults to 1.
    """
    return sum_amounts(
        to_decimal(_field(modifier, "price")) * _modifier_quantity(modifier)
        for modifier in modifiers
    )


def calculate_item_total(price, quantity: int, modifier_total=ZERO) -> Decimal:
    """
    Line total: (price * quantity) + modifier_total.
    """
    return to_decimal(price) * int(quantity) + to_decimal(modifier_total)


class OrderCalculator:
    """
    Calculator for a persisted Order.

    Subtotal is the sum of the order's line totals, tax uses the venue's
    rate, and the stored discount is preserved and subtracted last.
    """

    def __init__(self, order):
        self.order = order

    @property
    def currency(self) -> Optional[str]:
        venue = getattr(self.order, "venue", None)
        return getattr(venue, "currency", None)

    @property
    def tax_rate(self) -> Decimal:
        venue = getattr(self.order, "venue", None)
        if hasattr(venue, "get_effective_tax_rate"):
            return to_decimal(venue.get_effective_tax_rate())
        rate = getattr(venue, "tax_rate", None)
        return default_tax_rate() if rate is None else to_decimal(rate)

    def calculate_subtotal(self) -> Decimal:
        # OrderItem.total already includes the modifier total
        return sum_amounts(item.total for item in self.order.items.all())

    def calculate_totals(self) -> Dict[str, Decimal]:
        """
        Returns:
            dict: {'subtotal', 'tax', 'discount', 'total'} all quantized
        """
        raw_subtotal = self.calculate_subtotal()
        subtotal = quantize(raw_subtotal, self.currency)
        tax = quantize(calculate_tax(raw_subtotal, self.tax_rate), self.currency)
        discount = quantize(self.order.discount or ZERO, self.currency)

        return {
            "subtotal": subtotal,
            "tax": tax,
            "discount": discount,
            "total": subtotal + tax - discount,
        }
