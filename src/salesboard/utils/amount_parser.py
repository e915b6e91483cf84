"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "1234.50", "$1,234.50", "€99" and surrounding whitespace.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str)
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")


def parse_category_target(value: str) -> tuple[str, Decimal, int]:
    """Parse a ``NAME=VOLUME:UNITS`` category target.

    The units part is optional and defaults to 0, so "Solar=5000" is valid.

    Returns:
        (category name, volume target, units target)

    Raises:
        ValueError: If the string is malformed
    """
    name, sep, figures = value.partition("=")
    name = name.strip()
    if not sep or not name or not figures.strip():
        raise ValueError(
            f"Invalid category target '{value}'. Expected NAME=VOLUME:UNITS"
        )

    volume_str, _, units_str = figures.partition(":")
    volume = parse_amount(volume_str)
    try:
        units = int(units_str.strip()) if units_str.strip() else 0
    except ValueError:
        raise ValueError(f"Invalid units in category target '{value}'")
    return (name, volume, units)
