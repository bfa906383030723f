"""Amount conversion between catalog prices and gateway minor units."""

MINOR_UNITS_PER_MAJOR = 100


def to_minor_units(price: int) -> int:
    """Catalog price (e.g. 199 INR) -> gateway amount (19900 paise)."""
    return int(price) * MINOR_UNITS_PER_MAJOR

