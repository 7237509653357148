"""
Unit conversion between ether and wei.

All amounts inside the auction are integer wei. Ether strings only appear
at the edges (CLI arguments, printed summaries).
"""

from decimal import Decimal, InvalidOperation
from typing import Union

WEI_PER_ETHER = 10**18
ETHER_DECIMALS = 18


def parse_ether(value: Union[str, int, Decimal]) -> int:
    """
    Convert an ether amount to wei.

    Args:
        value: Ether amount, e.g. "1.5" or Decimal("0.001")

    Returns:
        Amount in wei

    Raises:
        ValueError: if the value is not a number, is negative, or has more
            than 18 decimal places
    """
    try:
        ether = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid ether amount: {value!r}")

    if not ether.is_finite():
        raise ValueError(f"Invalid ether amount: {value!r}")
    if ether < 0:
        raise ValueError(f"Ether amount cannot be negative: {value!r}")

    wei = ether * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValueError(f"Too many decimal places (max {ETHER_DECIMALS}): {value!r}")
    return int(wei)


def format_ether(wei: int) -> str:
    """
    Convert wei to a plain ether string ("1.2", "0.0", "3.0").

    Trailing zeros are dropped but at least one decimal is kept.
    """
    whole, frac = divmod(abs(wei), WEI_PER_ETHER)
    sign = "-" if wei < 0 else ""
    frac_str = f"{frac:018d}".rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"
