"""
Formatting helpers for AutoSwap.
"""

from decimal import ROUND_HALF_UP, Decimal
from urllib.parse import urlparse


def to_base_units(value, decimals: int) -> int:
    """
    Convert a human-unit amount to the token's smallest unit.

    Examples:
        to_base_units("0.5", 18) -> 500000000000000000
        to_base_units(60, 6) -> 60000000

    Args:
        value: Amount in whole tokens (str, int, float or Decimal)
        decimals: Token decimal precision

    Returns:
        Integer amount in smallest units (truncated)
    """
    return int(Decimal(str(value)).scaleb(decimals))


def format_amount(amount: int, token) -> str:
    """
    Format a smallest-unit amount at the token's display precision.

    Args:
        amount: Amount in smallest units
        token: Token carrying decimals and format_decimals

    Returns:
        String like "0.012345" or "123.45"
    """
    quantum = Decimal(1).scaleb(-token.format_decimals)
    value = Decimal(amount).scaleb(-token.decimals).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{value:.{token.format_decimals}f}"


def mask_url(url: str) -> str:
    """Mask the path of an RPC URL (API keys live there) for safe logging."""
    if not url:
        return "Not configured"

    try:
        parsed = urlparse(url)
        if not parsed.netloc:
            return "***MASKED***"
        if parsed.path in ("", "/"):
            return f"{parsed.scheme}://{parsed.netloc}"
        return f"{parsed.scheme}://{parsed.netloc}/***MASKED***"
    except ValueError:
        return "***MASKED***"


def format_duration(seconds: float) -> str:
    """
    Convert seconds to a short human-readable duration.

    Examples:
        42 -> "42s"
        3725 -> "1h 2m"
        90000 -> "1d 1h"
    """
    if seconds <= 0:
        return "0s"

    total = int(seconds)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)

    if days:
        return f"{days}d {hours}h" if hours else f"{days}d"
    if hours:
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    return f"{secs}s"
