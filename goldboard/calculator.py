"""Gold calculator and USD/IDR currency converter."""

import math
import re


def parse_usd_input(value: str) -> float | None:
    """Parse a typed USD amount such as '1,250.50'. None when unparseable."""
    cleaned = re.sub(r"[\s,$]", "", value or "")
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def parse_idr_input(value: str) -> int | None:
    """Parse a typed IDR amount, ignoring separators and symbols ('Rp 1.500.000')."""
    digits = re.sub(r"[^0-9]", "", value or "")
    return int(digits) if digits else None


def usd_to_gold(usd: float, price: float) -> float | None:
    """Gold amount (in the unit the price is quoted in) that usd buys."""
    if not price:
        return None
    return round(usd / price, 4)


def gold_to_usd(amount: float, price: float) -> float:
    """USD value of an amount of gold at the given unit price."""
    return round(amount * price, 2)


def usd_to_idr(usd: float, rate: float) -> int | None:
    """Whole rupiah for a USD amount at the given USD/IDR rate."""
    if not rate:
        return None
    return round(usd * rate)


def idr_to_usd(idr: float, rate: float) -> float | None:
    """USD, to the cent, for a rupiah amount at the given USD/IDR rate."""
    if not rate:
        return None
    return round(idr / rate, 2)
