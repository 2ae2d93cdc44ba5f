"""Pre-submission checks for native transfers."""

from __future__ import annotations

from ...services.address import is_valid_evm_address
from ...services.units import parse_units
from .errors import ValidationError, ValidationErrorKind


def parse_amount(amount_smallest_unit: str) -> int:
    """Parse a user-entered smallest-unit amount; raises INVALID_AMOUNT."""
    try:
        return parse_units(amount_smallest_unit, 0)
    except ValueError:
        raise ValidationError(ValidationErrorKind.INVALID_AMOUNT) from None


def validate_transfer(
    recipient: str,
    amount_smallest_unit: str,
    current_balance_display: str,
    decimals: int = 18,
) -> int:
    """
    Validate a proposed transfer and return the amount in smallest units.

    Checks run in a fixed order and stop at the first failure:
    recipient format, amount format, amount positivity, then balance.
    The displayed balance is converted back to smallest units for the
    comparison; a balance that is not a number (``"Error"``) makes the
    amount unverifiable and is reported as an invalid amount.

    Raises:
        ValidationError: with the kind of the first failed check
    """
    if not is_valid_evm_address(recipient):
        raise ValidationError(ValidationErrorKind.INVALID_RECIPIENT)

    amount = parse_amount(amount_smallest_unit)
    if amount <= 0:
        raise ValidationError(ValidationErrorKind.AMOUNT_NOT_POSITIVE)

    try:
        balance = parse_units(current_balance_display, decimals)
    except ValueError:
        raise ValidationError(ValidationErrorKind.INVALID_AMOUNT) from None

    if amount > balance:
        raise ValidationError(ValidationErrorKind.INSUFFICIENT_BALANCE)

    return amount


__all__ = ["parse_amount", "validate_transfer"]
