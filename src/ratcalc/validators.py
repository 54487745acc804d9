"""Raising guards used by the engine before and after each operation."""

from __future__ import annotations

from ratcalc.constants import MAX_MAGNITUDE_BITS
from ratcalc.exceptions import (
    DivisionByZeroError,
    DomainError,
    InvalidInputError,
    OutOfRangeError,
    OverflowError,
)
from ratcalc.rational import RationalNumber


def validate_number(value: object) -> RationalNumber:
    """
    Coerce ints and pass RationalNumbers through.

    Raises:
        InvalidInputError: If value is neither
    """
    if isinstance(value, bool) or not isinstance(value, (int, RationalNumber)):
        raise InvalidInputError(value, f"Expected number, got {type(value).__name__}")
    if isinstance(value, int):
        return RationalNumber.from_int(value)
    return value


def validate_non_zero(divisor: RationalNumber, dividend: RationalNumber | None = None) -> RationalNumber:
    """
    Validate a divisor.

    Raises:
        DivisionByZeroError: If divisor is zero
    """
    if divisor.is_zero():
        raise DivisionByZeroError(dividend)
    return divisor


def validate_magnitude(value: RationalNumber, operation: str = "calculation") -> RationalNumber:
    """
    Validate that a result stays below roughly 10**10000 in magnitude.

    Raises:
        OverflowError: If the value is too large to represent
    """
    if not value.is_zero() and value.magnitude_bits() > MAX_MAGNITUDE_BITS:
        raise OverflowError(operation)
    return value


def validate_positive(value: RationalNumber, function: str, allow_zero: bool = False) -> RationalNumber:
    """
    Validate the argument of a logarithm or root.

    Raises:
        DomainError: If value is negative (or zero when not allowed)
    """
    if value.is_negative() or (value.is_zero() and not allow_zero):
        raise DomainError(function, value)
    return value


def validate_range(
    value: RationalNumber,
    min_val: RationalNumber | int | None = None,
    max_val: RationalNumber | int | None = None,
    inclusive: bool = True,
) -> RationalNumber:
    """
    Validate that a value is within a specified range.

    Args:
        value: The value to validate
        min_val: Minimum allowed value (None for no limit)
        max_val: Maximum allowed value (None for no limit)
        inclusive: Whether bounds are inclusive

    Raises:
        OutOfRangeError: If the value is outside the range
    """
    if min_val is not None:
        if inclusive and value < min_val:
            raise OutOfRangeError(value, min_val, max_val)
        if not inclusive and value <= min_val:
            raise OutOfRangeError(value, min_val, max_val)

    if max_val is not None:
        if inclusive and value > max_val:
            raise OutOfRangeError(value, min_val, max_val)
        if not inclusive and value >= max_val:
            raise OutOfRangeError(value, min_val, max_val)

    return value
