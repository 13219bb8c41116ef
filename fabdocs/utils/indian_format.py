"""Indian number formatting utilities.

Digit grouping follows the Indian system (3,2,2 pattern from the right after the
first group of 3) and amounts in words use crore/lakh/thousand rather than the
international million/billion grouping.

Rules:
- Pure string manipulation (avoid locale dependence)
- Currency helpers always render two decimals, rounded HALF_UP
- Words are Indian English: "One Lakh Rupees Only"

Examples:
>>> format_indian_number(1234567)
'12,34,567'
>>> format_amount(1234567.5)
'12,34,567.50'
>>> to_indian_words(100000)
'One Lakh Rupees Only'
"""
from __future__ import annotations
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]

__all__ = [
    "to_decimal",
    "format_indian_number",
    "format_amount",
    "format_inr",
    "to_indian_words",
]

CENT = Decimal("0.01")

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten",
    "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen", "Seventeen",
    "Eighteen", "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

_CRORE = 10_000_000
_LAKH = 100_000
_THOUSAND = 1_000


def to_decimal(value: Number | str | None) -> Decimal:
    """Coerce a number (or numeric string) to Decimal; floats go through ``str``."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _split_number_str(num_str: str) -> tuple[str, str]:
    if '.' in num_str:
        left, right = num_str.split('.', 1)
    else:
        left, right = num_str, ''
    return left, right


def format_indian_number(value: Number) -> str:
    """Format a number using Indian digit grouping.

    Does not add decimals; use :func:`format_amount` for currency.
    """
    if isinstance(value, Decimal):
        num_str = format(value, 'f')
    else:
        num_str = ('{0}'.format(value))
    sign = ''
    if num_str.startswith('-'):
        sign, num_str = '-', num_str[1:]
    left, right = _split_number_str(num_str)
    if len(left) <= 3:
        grouped = left
    else:
        # Last 3 digits stay together; preceding part grouped in 2s
        head = left[:-3]
        tail = left[-3:]
        head_groups: list[str] = []
        while len(head) > 2:
            head_groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            head_groups.insert(0, head)
        grouped = ','.join(head_groups + [tail])
    return sign + (grouped + ('.' + right if right else ''))


def format_amount(value: Number) -> str:
    """Two-decimal amount with Indian grouping and no currency symbol (table cells)."""
    dec = to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    return format_indian_number(dec)


def format_inr(value: Number, symbol: bool = True) -> str:
    """Format a number as INR currency with Indian digit grouping and two decimals."""
    base = format_amount(value)
    return ('₹' + base) if symbol else base


def _below_thousand(n: int) -> str:
    if n == 0:
        return ""
    if n < 20:
        return _ONES[n]
    if n < 100:
        return _TENS[n // 10] + (" " + _ONES[n % 10] if n % 10 else "")
    rest = _below_thousand(n % 100)
    return _ONES[n // 100] + " Hundred" + (" " + rest if rest else "")


def _integer_words(n: int) -> str:
    """Words for a non-negative integer using crore/lakh/thousand grouping."""
    if n == 0:
        return ""
    crore, n = divmod(n, _CRORE)
    lakh, n = divmod(n, _LAKH)
    thousand, remainder = divmod(n, _THOUSAND)
    parts: list[str] = []
    if crore:
        # 100 crore and above: the crore count itself is grouped again
        parts.append((_integer_words(crore) if crore >= _THOUSAND else _below_thousand(crore)) + " Crore")
    if lakh:
        parts.append(_below_thousand(lakh) + " Lakh")
    if thousand:
        parts.append(_below_thousand(thousand) + " Thousand")
    if remainder:
        parts.append(_below_thousand(remainder))
    return " ".join(parts)


def to_indian_words(amount: Number) -> str:
    """Spell a non-negative rupee amount in Indian English.

    ``paise`` is the fractional part rounded half-up to two places; when it rounds
    up to a full rupee it carries into the integer part. The paise clause is
    omitted entirely when it is zero.

    >>> to_indian_words(12345678.50)
    'One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Rupees and Fifty Paise Only'
    >>> to_indian_words(0)
    'Zero Rupees Only'
    """
    dec = to_decimal(amount)
    if dec < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    rupees = int(dec.to_integral_value(rounding=ROUND_FLOOR))
    paise = int(((dec - rupees) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if paise >= 100:
        rupees, paise = rupees + 1, paise - 100

    words = (_integer_words(rupees) or "Zero") + " Rupees"
    if paise:
        words += " and " + _below_thousand(paise) + " Paise"
    return words + " Only"
