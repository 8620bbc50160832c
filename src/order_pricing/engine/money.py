"""
Integer-cents arithmetic helpers.

Builtin round() rounds half to even; every money rounding here is half-up
so 0.5 cents always goes up, matching what customers see on invoices.
"""
from decimal import Decimal, ROUND_HALF_UP


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value, places: int = 0):
    """Round to ``places`` decimals, half away from zero.

    Returns an int when ``places`` is 0, otherwise a float.
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


def percent_of_cents(amount_cents: int, percent) -> int:
    """Return ``amount_cents * percent / 100`` rounded half-up to whole cents."""
    return round_half_up(Decimal(amount_cents) * to_decimal(percent) / Decimal(100))


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer ceiling division for positive denominators."""
    return -(-numerator // denominator)
