"""
Conversion between smallest-unit integers and human decimal strings.

Amounts stay ``int`` everywhere inside the wallet. These helpers are only
used where a value enters from user input or leaves for display.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

DISPLAY_PLACES = 4

_DECIMAL_RE = re.compile(r"(-)?(\d+)(?:\.(\d*))?")


def format_units(value: int, decimals: int = 18, places: int = DISPLAY_PLACES) -> str:
    """Render *value* smallest units as a decimal string with *places* digits.

    >>> format_units(10**18)
    '1.0000'
    """
    with localcontext() as ctx:
        ctx.prec = max(len(str(abs(value))) + places + 2, 28)
        amount = Decimal(value).scaleb(-decimals)
        quantum = Decimal(1).scaleb(-places)
        return f"{amount.quantize(quantum, rounding=ROUND_HALF_UP):f}"


def format_units_exact(value: int, decimals: int = 18) -> str:
    """Full-precision rendering with trailing zeros trimmed (``"1.0"`` minimum)."""
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10**decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{frac_text or '0'}"


def parse_units(text: str, decimals: int = 18) -> int:
    """Parse a decimal string into smallest units.

    Raises:
        ValueError: when the text is not a plain decimal number (surrounding
            whitespace included), or carries
            more fractional digits than *decimals* allows (zeros excepted).
    """
    if not isinstance(text, str):
        raise ValueError("amount must be a string")
    match = _DECIMAL_RE.fullmatch(text)
    if not match:
        raise ValueError(f"invalid decimal value: {text!r}")
    negative, whole, frac = match.group(1), match.group(2), match.group(3) or ""
    frac = frac.rstrip("0")
    if len(frac) > decimals:
        raise ValueError(f"too many decimals for {decimals}-decimal unit: {text!r}")
    value = int(whole) * 10**decimals + (int(frac.ljust(decimals, "0")) if frac else 0)
    return -value if negative else value


__all__ = ["DISPLAY_PLACES", "format_units", "format_units_exact", "parse_units"]
