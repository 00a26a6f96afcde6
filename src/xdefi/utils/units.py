"""Conversions between human-readable token amounts and atomic units.

Amounts are handled as strings and Python integers throughout; nothing here
goes through float, so 18-decimal tokens keep full precision.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

# Plain decimal numerals only: "1", "1.5", ".5", "1."
_AMOUNT_RE = re.compile(r"^(\d+\.?\d*|\.\d+)$")


def is_positive_amount(value: Optional[str]) -> bool:
    """Check that a user-entered amount is a plain decimal numeral greater than zero."""
    if value is None:
        return False
    text = value.strip()
    if not _AMOUNT_RE.match(text):
        return False
    try:
        return Decimal(text) > 0
    except InvalidOperation:
        return False


def parse_units(value: str, decimals: int) -> int:
    """Convert a human-readable amount into atomic units.

    Fractional digits beyond the token's precision are rounded half-up.

    Raises:
        ValueError: If the value is not a plain non-negative decimal numeral
            or decimals is negative.
    """
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")

    text = value.strip()
    if not _AMOUNT_RE.match(text):
        raise ValueError(f"Invalid amount: {value!r}")

    whole, _, fraction = text.partition(".")
    whole = whole or "0"

    if len(fraction) <= decimals:
        return int(whole + fraction.ljust(decimals, "0"))

    kept = fraction[:decimals]
    round_up = fraction[decimals] >= "5"
    return int(whole + kept) + (1 if round_up else 0)


def format_units(value: int, decimals: int) -> str:
    """Convert atomic units into a human-readable decimal string.

    Trailing fractional zeros are dropped, so 2 * 10**18 formats as "2".
    """
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    if decimals == 0:
        return f"{sign}{whole}"

    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    if fraction_text:
        return f"{sign}{whole}.{fraction_text}"
    return f"{sign}{whole}"


def truncate_fraction(display: str, max_digits: int = 6) -> str:
    """Cut a decimal string to at most max_digits fractional digits.

    Digits are dropped, never rounded, and trailing zeros are removed:
    "1.2345670000" -> "1.234567", "2.000000" -> "2".
    """
    whole, _, fraction = display.partition(".")
    fraction = fraction[:max_digits].rstrip("0")
    return f"{whole}.{fraction}" if fraction else whole
