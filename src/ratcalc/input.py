"""Accumulates a number from individual key presses."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ratcalc.exceptions import CalculatorError
from ratcalc.operations import DIGITS, digits_to_limbs
from ratcalc.number import BigNumber
from ratcalc.rational import RationalNumber
from ratcalc.utils import max_value_string

logger = logging.getLogger(__name__)


@dataclass
class NumberSection:
    """Digits and sign of either the base or the exponent."""

    value: str = ""
    is_negative: bool = False

    def clear(self) -> None:
        self.value = ""
        self.is_negative = False

    def is_empty(self) -> bool:
        return not self.value


def _fits(digits: str, max_num_str: str) -> bool:
    """Compare digit strings by length, then lexicographically."""
    digits = digits.lstrip("0")
    limit = max_num_str.upper().lstrip("0")
    if len(digits) != len(limit):
        return len(digits) < len(limit)
    return digits <= limit


class InputAccumulator:
    """
    State machine for a number being typed.

    Digits go to the base, or to the exponent once an exponent marker has
    been entered.  The decimal point is not stored in the digit string;
    its position is kept as an index instead.

    Example:
        >>> acc = InputAccumulator()
        >>> for digit in (1, 2):
        ...     acc.try_add_digit(digit, 10, False, "", 64, 32)
        True
        True
        >>> acc.try_add_decimal_point()
        True
        >>> acc.try_add_digit(5, 10, False, "", 64, 32)
        True
        >>> acc.to_string(10)
        '12.5'
    """

    def __init__(self, decimal_symbol: str = ".") -> None:
        self._decimal_symbol = decimal_symbol
        self._base = NumberSection()
        self._exponent = NumberSection()
        self._has_decimal = False
        self._decimal_index = 0
        self._has_exponent = False

    def clear(self) -> None:
        self._base.clear()
        self._exponent.clear()
        self._has_decimal = False
        self._decimal_index = 0
        self._has_exponent = False

    def is_empty(self) -> bool:
        return self._base.is_empty() and not self._has_exponent

    def has_decimal_point(self) -> bool:
        return self._has_decimal

    def has_exponent(self) -> bool:
        return self._has_exponent

    def set_decimal_symbol(self, decimal_symbol: str) -> None:
        self._decimal_symbol = decimal_symbol

    def try_add_digit(
        self,
        value: int,
        radix: int,
        integer_mode: bool,
        max_num_str: str,
        word_bit_width: int,
        max_digits: int,
    ) -> bool:
        """
        Append one digit.

        Returns:
            False, leaving the state untouched, when the digit is not valid
            in ``radix``, the field is full, or (integer mode) the number
            would exceed ``max_num_str``
        """
        if not 0 <= value < radix:
            return False
        digit = DIGITS[value]

        if self._has_exponent:
            if len(self._exponent.value) >= max_digits:
                return False
            self._exponent.value += digit
            return True

        if len(self._base.value) >= max_digits:
            logger.debug("Digit rejected: %d digits already entered", max_digits)
            return False

        previous = self._base.value
        if previous == "0" and not self._has_decimal:
            self._base.value = digit
        else:
            self._base.value += digit

        if integer_mode:
            limit = max_num_str or max_value_string(word_bit_width, radix)
            if not _fits(self._base.value, limit):
                logger.debug("Digit rejected: %s exceeds %s", self._base.value, limit)
                self._base.value = previous
                return False
        return True

    def try_add_decimal_point(self) -> bool:
        if self._has_exponent or self._has_decimal:
            return False
        if not self._base.value:
            self._base.value = "0"
        self._has_decimal = True
        self._decimal_index = len(self._base.value)
        return True

    def try_begin_exponent(self) -> bool:
        if self._has_exponent:
            return False
        if not self._base.value:
            self._base.value = "1"
        self._has_exponent = True
        return True

    def try_toggle_sign(self, integer_mode: bool, max_num_str: str) -> bool:
        if self._has_exponent:
            self._exponent.is_negative = not self._exponent.is_negative
            return True

        if integer_mode and self._base.value and max_num_str and not _fits(self._base.value, max_num_str):
            return False
        self._base.is_negative = not self._base.is_negative
        return True

    def backspace(self) -> None:
        if self._has_exponent:
            if self._exponent.value:
                self._exponent.value = self._exponent.value[:-1]
            else:
                self._has_exponent = False
                self._exponent.clear()
            return

        if self._has_decimal and len(self._base.value) == self._decimal_index:
            self._has_decimal = False
            return
        self._base.value = self._base.value[:-1]
        if not self._base.value:
            self._base.is_negative = False

    def to_string(self, radix: int) -> str:
        """Text of the number as typed, e.g. ``-12.5e-3``."""
        if self.is_empty():
            return ""

        text = "-" if self._base.is_negative else ""
        if self._has_decimal:
            text += (
                self._base.value[: self._decimal_index]
                + self._decimal_symbol
                + self._base.value[self._decimal_index :]
            )
        else:
            text += self._base.value

        if self._has_exponent:
            text += "e" + ("-" if self._exponent.is_negative else "+") + (self._exponent.value or "0")
        return text

    def commit(self, radix: int, precision: int) -> RationalNumber:
        """
        Convert the typed number to a RationalNumber.

        At most ``precision`` significant digits are honoured; further
        digits count as zeros.  Unparseable input converts to zero.
        """
        if self.is_empty():
            return RationalNumber()

        digits = self._base.value
        scale = -(len(digits) - self._decimal_index) if self._has_decimal else 0

        significant = digits.lstrip("0")
        if len(significant) > precision:
            digits = significant[:precision] + "0" * (len(significant) - precision)

        try:
            magnitude = digits_to_limbs(digits, radix)
            exponent = int(self._exponent.value or "0", 10)
        except (CalculatorError, ValueError):
            logger.debug("Could not parse %r in radix %d", self.to_string(radix), radix)
            return RationalNumber()

        if self._exponent.is_negative:
            exponent = -exponent
        scale += exponent

        value = RationalNumber(BigNumber(-1 if self._base.is_negative else 1, 0, magnitude))
        if scale:
            value = value * RationalNumber.from_int(radix).power(scale)
        return value
