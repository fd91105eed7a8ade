"""Line item arithmetic shared by the gateway payload and the stored invoice

Quantities and prices are rounded to the precision of their columns before
any arithmetic, so a stored line always satisfies
total == quantity * unit_price to the cent.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")
QUANTITY_STEP = Decimal("0.0001")

_RATE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%?\s*$")


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_quantity(value: Decimal) -> Decimal:
    return Decimal(value).quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


def parse_rate(rate: str) -> Optional[Decimal]:
    """'18%' -> Decimal('18'). None when the rate is not a plain percentage."""
    match = _RATE_PATTERN.match(rate or "")
    if not match:
        return None
    return Decimal(match.group(1))


def line_value(quantity: Decimal, unit_price: Decimal) -> Decimal:
    """Value excluding sales tax"""
    return to_cents(to_quantity(quantity) * to_cents(unit_price))


def line_sales_tax(value: Decimal, rate: str) -> Decimal:
    percentage = parse_rate(rate) or Decimal("0")
    return to_cents(value * percentage / Decimal("100"))
