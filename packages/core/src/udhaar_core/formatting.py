"""Indian Rupee display formatting.

Amounts are grouped the Indian way (the last three digits, then pairs:
12,34,567) and shown with up to two decimals, trailing zeros dropped.
This is the only place where monetary values are rounded.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

RUPEE_SYMBOL = "₹"

_CENTS = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def group_indian(digits: str) -> str:
    """Insert Indian-style thousands separators into a string of digits."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def _to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        digits = re.sub(r"[^0-9]", "", value)
        if not digits:
            raise InvalidOperation(value)
        return Decimal(digits)
    return Decimal(value)


def format_rupees(value: Amount) -> str:
    """
    Format an amount as rupees for display.

    Strings are read leniently: every non-digit character is dropped, so
    "₹50,000" formats the same as 50000. Unparseable input formats as "".

    Examples:
        >>> format_rupees(50000)
        '₹50,000'
        >>> format_rupees(Decimal("1000000"))
        '₹10,00,000'
        >>> format_rupees(Decimal("8779.9"))
        '₹8,779.9'
    """
    try:
        amount = _to_decimal(value)
    except (InvalidOperation, ValueError):
        return ""
    if not amount.is_finite():
        return ""

    rounded = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    whole, _, fraction = f"{abs(rounded):f}".partition(".")
    fraction = fraction.rstrip("0")

    text = f"{sign}{RUPEE_SYMBOL}{group_indian(whole)}"
    if fraction:
        text += f".{fraction}"
    return text


__all__ = ["RUPEE_SYMBOL", "group_indian", "format_rupees"]
