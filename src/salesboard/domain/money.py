"""Checks for money amounts stored with cent precision."""

from decimal import Decimal

from salesboard.domain.errors import ValidationError

MONEY_PLACES = 2


def validate_money(amount: Decimal, label: str) -> None:
    """Reject amounts that cannot be stored exactly.

    Args:
        amount: Amount to check
        label: Field name used in the error message, e.g. "Sale amount"

    Raises:
        ValidationError: If the amount is not finite, is negative, or has
            more than two decimal places
    """
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a finite number, got {amount}")
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative, got {amount}")
    # Trailing zeros are fine: 10.500 is 10.50
    if amount.normalize().as_tuple().exponent < -MONEY_PLACES:
        raise ValidationError(
            f"{label} cannot have more than {MONEY_PLACES} decimal places, got {amount}"
        )
