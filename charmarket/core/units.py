"""Ether/wei conversion for prices typed by humans."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

WEI_PER_ETHER = 10**18


def parse_ether(text: str) -> int:
    """Convert a decimal ether string (``"1"``, ``"0.5"``) to wei.

    Raises ``ValueError`` for malformed input, negative values, or more than
    18 decimal places.
    """
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"Not a decimal ether amount: {text!r}") from None
    if not value.is_finite() or value < 0:
        raise ValueError(f"Ether amount must be a non-negative number: {text!r}")
    wei = value * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValueError(f"Ether amount has more than 18 decimals: {text!r}")
    return int(wei)


def format_ether(wei: int) -> str:
    """Render *wei* as a decimal ether string without trailing zeros."""
    whole, frac = divmod(wei, WEI_PER_ETHER)
    if frac == 0:
        return str(whole)
    return f"{whole}.{frac:018d}".rstrip("0")
