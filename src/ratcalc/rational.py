"""Exact rational numbers built from two BigNumbers."""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Union

from ratcalc.constants import RATIONAL_PRECISION, NumberFormat
from ratcalc.exceptions import DivisionByZeroError, InvalidInputError
from ratcalc.number import UINT64_MASK, BigNumber
from ratcalc.operations import (
    add_small,
    bit_length,
    compare_limbs,
    divmod_limbs,
    gcd_limbs,
    limbs_to_digits,
    mul_limbs,
    number_add,
    number_compare,
    number_multiply,
    number_negate,
    number_subtract,
)

Operand = Union["RationalNumber", int]

# Plain rendering is used while the leading digit's exponent is in this range
_MIN_PLAIN_EXPONENT = -5

# Larger values are shown approximately by repr
_REPR_MAX_BITS = 4096

_ONE = BigNumber(1, 0, [1])


def _fold(numerator: BigNumber, denominator: BigNumber) -> tuple[BigNumber, BigNumber]:
    """Simplified (numerator, denominator): exponents folded, gcd removed, q > 0."""
    if denominator.is_zero():
        raise DivisionByZeroError(numerator)
    if numerator.is_zero():
        return BigNumber.zero(), _ONE

    shift = numerator.exponent - denominator.exponent
    p = numerator.mantissa
    q = denominator.mantissa
    if shift > 0:
        p = [0] * shift + p
    elif shift < 0:
        q = [0] * -shift + q

    divisor = gcd_limbs(p, q)
    if divisor != [1]:
        p = divmod_limbs(p, divisor)[0]
        q = divmod_limbs(q, divisor)[0]
    return BigNumber(numerator.sign * denominator.sign, 0, p), BigNumber(1, 0, q)


class RationalNumber:
    """
    A value ``numerator / denominator`` with exact arithmetic.

    Every arithmetic operator returns a simplified result: the
    denominator is positive, coprime with the numerator, and both
    exponents are zero.  Instances built from raw components keep those
    components until ``simplify()`` is called.

    Example:
        >>> (RationalNumber.from_ints(1, 3) + RationalNumber.from_ints(1, 6)).to_string()
        '0.5'
    """

    __slots__ = ("_p", "_q")

    def __init__(self, numerator: BigNumber | None = None, denominator: BigNumber | None = None) -> None:
        if denominator is not None and denominator.is_zero():
            raise DivisionByZeroError(numerator)
        self._p = numerator.clone() if numerator is not None else BigNumber.zero()
        self._q = denominator.clone() if denominator is not None else _ONE.clone()

    # -- construction ---------------------------------------------------

    @classmethod
    def from_int(cls, value: int) -> RationalNumber:
        return cls(BigNumber.from_int(value))

    @classmethod
    def from_uint64(cls, value: int) -> RationalNumber:
        return cls(BigNumber.from_uint64(value))

    @classmethod
    def from_ints(cls, numerator: int, denominator: int = 1) -> RationalNumber:
        """Simplified ``numerator / denominator``."""
        if denominator == 0:
            raise DivisionByZeroError(numerator)
        return cls(BigNumber.from_int(numerator), BigNumber.from_int(denominator)).simplify()

    @classmethod
    def _from_parts(cls, numerator: BigNumber, denominator: BigNumber) -> RationalNumber:
        result = cls.__new__(cls)
        result._p, result._q = _fold(numerator, denominator)
        return result

    @staticmethod
    def _coerce(value: object) -> RationalNumber | None:
        if isinstance(value, RationalNumber):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return RationalNumber.from_int(value)
        return None

    # -- accessors -----------------------------------------------------

    @property
    def numerator(self) -> BigNumber:
        return self._p

    @property
    def denominator(self) -> BigNumber:
        return self._q

    def simplify(self) -> RationalNumber:
        """Return the canonical form of this value."""
        return RationalNumber._from_parts(self._p, self._q)

    def is_zero(self) -> bool:
        return self._p.is_zero()

    def is_negative(self) -> bool:
        return self._p.sign * self._q.sign < 0

    @property
    def sign(self) -> int:
        return self._p.sign * self._q.sign

    def is_integer(self) -> bool:
        simplified = self.simplify()
        return simplified._q.mantissa == [1]

    def as_integer_ratio(self) -> tuple[int, int]:
        simplified = self.simplify()
        return simplified._p.to_int(), simplified._q.to_int()

    # -- arithmetic ----------------------------------------------------

    def __neg__(self) -> RationalNumber:
        return RationalNumber(number_negate(self._p), self._q)

    def __abs__(self) -> RationalNumber:
        return -self if self.is_negative() else self.simplify()

    def __add__(self, other: Operand) -> RationalNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        # a/b + c/d = (ad + cb) / bd
        numerator = number_add(number_multiply(self._p, other._q), number_multiply(other._p, self._q))
        return RationalNumber._from_parts(numerator, number_multiply(self._q, other._q))

    __radd__ = __add__

    def __sub__(self, other: Operand) -> RationalNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        numerator = number_subtract(number_multiply(self._p, other._q), number_multiply(other._p, self._q))
        return RationalNumber._from_parts(numerator, number_multiply(self._q, other._q))

    def __rsub__(self, other: Operand) -> RationalNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other: Operand) -> RationalNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return RationalNumber._from_parts(number_multiply(self._p, other._p), number_multiply(self._q, other._q))

    __rmul__ = __mul__

    def __truediv__(self, other: Operand) -> RationalNumber:
        """
        Exact division.

        Raises:
            DivisionByZeroError: If ``other`` is zero
        """
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        if other.is_zero():
            raise DivisionByZeroError(self)
        return RationalNumber._from_parts(number_multiply(self._p, other._q), number_multiply(self._q, other._p))

    def __rtruediv__(self, other: Operand) -> RationalNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other / self

    def __mod__(self, other: Operand) -> RationalNumber:
        """
        Floor-based remainder ``a - b * floor(a / b)``.

        Properties:
            - Sign follows the divisor: -7 % 3 == 2, 7 % -3 == -2
            - Reconstruction: a == b * floor(a / b) + a % b
        """
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self - other * (self / other).floor()

    def power(self, exponent: int) -> RationalNumber:
        """
        Integer power by repeated squaring.

        ``x ** 0`` is one for every base, zero included.  A negative
        exponent inverts the base first.

        Raises:
            DivisionByZeroError: If a zero base is raised to a negative power
        """
        if exponent < 0:
            if self.is_zero():
                raise DivisionByZeroError(self)
            base = RationalNumber._from_parts(self._q, self._p)
            exponent = -exponent
        else:
            base = self.simplify()

        result_p = [1]
        result_q = [1]
        p, q = base._p.mantissa, base._q.mantissa
        negative = base._p.sign < 0 and exponent % 2 == 1
        while exponent:
            if exponent & 1:
                result_p = mul_limbs(result_p, p)
                result_q = mul_limbs(result_q, q)
            exponent >>= 1
            if exponent:
                p = mul_limbs(p, p)
                q = mul_limbs(q, q)

        # powers of coprime numbers stay coprime, so the result is canonical
        numerator = BigNumber(-1 if negative else 1, 0, result_p)
        return RationalNumber(numerator, BigNumber(1, 0, result_q))

    def __pow__(self, exponent: int) -> RationalNumber:
        if not isinstance(exponent, int):
            return NotImplemented
        return self.power(exponent)

    # -- integer coercion ----------------------------------------------

    def _integer_part(self) -> tuple[RationalNumber, bool]:
        """Quotient truncated toward zero, and whether a remainder was dropped."""
        simplified = self.simplify()
        quotient, remainder = divmod_limbs(simplified._p.mantissa, simplified._q.mantissa)
        return RationalNumber(BigNumber(simplified._p.sign, 0, quotient)), bool(remainder)

    def trunc(self) -> RationalNumber:
        """Integer part, rounded toward zero."""
        return self._integer_part()[0]

    def floor(self) -> RationalNumber:
        quotient, inexact = self._integer_part()
        if inexact and self.is_negative():
            return quotient - 1
        return quotient

    def to_int(self) -> int:
        """Truncate toward zero and return a Python int."""
        return self.trunc()._p.to_int()

    def to_uint64(self) -> int:
        """
        Coerce to an unsigned 64-bit integer.

        The value is truncated toward zero, then reduced modulo 2**64, so
        negative values map to their two's-complement bit pattern.
        """
        mantissa = self.trunc()._p.mantissa
        low = 0
        if mantissa:
            low = mantissa[0] | ((mantissa[1] if len(mantissa) > 1 else 0) << 32)
        if self.is_negative():
            low = -low
        return low & UINT64_MASK

    # -- bitwise -------------------------------------------------------

    def _bitwise(self, other: object, combine) -> RationalNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return RationalNumber.from_uint64(combine(self.to_uint64(), other.to_uint64()))

    def __and__(self, other: Operand) -> RationalNumber:
        return self._bitwise(other, lambda a, b: a & b)

    def __or__(self, other: Operand) -> RationalNumber:
        return self._bitwise(other, lambda a, b: a | b)

    def __xor__(self, other: Operand) -> RationalNumber:
        return self._bitwise(other, lambda a, b: a ^ b)

    def __lshift__(self, other: Operand) -> RationalNumber:
        return self._bitwise(other, lambda a, b: (a << b) & UINT64_MASK if b < 64 else 0)

    def __rshift__(self, other: Operand) -> RationalNumber:
        return self._bitwise(other, lambda a, b: a >> b if b < 64 else 0)

    def __invert__(self) -> RationalNumber:
        return RationalNumber.from_uint64(~self.to_uint64())

    # -- comparison ----------------------------------------------------

    def _compare(self, other: RationalNumber) -> int:
        a = self.simplify()
        b = other.simplify()
        # a/b ? c/d  <=>  ad ? cb  (denominators are positive after simplify)
        return number_compare(number_multiply(a._p, b._q), number_multiply(b._p, a._q))

    def __eq__(self, other: object) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: Operand) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: Operand) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: Operand) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: Operand) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) >= 0

    def __hash__(self) -> int:
        numerator, denominator = self.as_integer_ratio()
        if denominator == 1:
            return hash(numerator)
        return hash((numerator, denominator))

    def __bool__(self) -> bool:
        return not self.is_zero()

    # -- rendering -----------------------------------------------------

    def magnitude_bits(self) -> int:
        """Approximate log2 of the absolute value (bit length difference)."""
        simplified = self.simplify()
        return bit_length(simplified._p.mantissa) - bit_length(simplified._q.mantissa)

    def to_string(
        self,
        radix: int = 10,
        fmt: NumberFormat = NumberFormat.FLOAT,
        precision: int = RATIONAL_PRECISION,
    ) -> str:
        """
        Render in ``radix`` with at most ``precision`` significant digits.

        Integers that fit in ``precision`` digits are rendered exactly in
        FLOAT format.  Everything else is rounded half-up at the last
        significant digit, trailing zeros are dropped, and the result is
        written plainly or with an ``e+N`` / ``e-N`` exponent suffix.

        Raises:
            InvalidInputError: If precision is not positive
        """
        if precision < 1:
            raise InvalidInputError(precision, "Precision must be positive")
        simplified = self.simplify()
        if simplified.is_zero():
            return "0"

        sign = "-" if simplified.is_negative() else ""
        p = simplified._p.mantissa
        q = simplified._q.mantissa

        if q == [1] and fmt == NumberFormat.FLOAT and compare_limbs(p, _power_limbs(radix, precision)) < 0:
            return sign + limbs_to_digits(p, radix)

        digits, exponent = _significant_digits(p, q, radix, precision)
        return sign + _layout(digits, exponent, fmt, precision)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        simplified = self.simplify()
        if max(bit_length(simplified._p.mantissa), bit_length(simplified._q.mantissa)) > _REPR_MAX_BITS:
            return f"RationalNumber(~{simplified.to_string(10, NumberFormat.SCIENTIFIC, 20)})"
        numerator, denominator = simplified.as_integer_ratio()
        if denominator == 1:
            return f"RationalNumber({numerator})"
        return f"RationalNumber({numerator}/{denominator})"


@lru_cache(maxsize=64)
def _cached_power(radix: int, exponent: int) -> tuple[int, ...]:
    result = [1]
    square = [radix]
    while exponent:
        if exponent & 1:
            result = mul_limbs(result, square)
        exponent >>= 1
        if exponent:
            square = mul_limbs(square, square)
    return tuple(result)


def _power_limbs(radix: int, exponent: int) -> list[int]:
    return list(_cached_power(radix, exponent))


def _compare_scaled(p: list[int], q: list[int], radix: int, exponent: int) -> int:
    """Compare ``p / q`` with ``radix ** exponent``."""
    if exponent >= 0:
        return compare_limbs(p, mul_limbs(q, _power_limbs(radix, exponent)))
    return compare_limbs(mul_limbs(p, _power_limbs(radix, -exponent)), q)


def _significant_digits(p: list[int], q: list[int], radix: int, precision: int) -> tuple[str, int]:
    """
    Round ``p / q`` to ``precision`` significant digits.

    Returns:
        (digits, exponent): digits without trailing zeros and the radix
        exponent of the first digit
    """
    # estimate from bit lengths, off by at most a couple of digits
    exponent = math.floor((bit_length(p) - bit_length(q)) / math.log2(radix))
    while _compare_scaled(p, q, radix, exponent) < 0:
        exponent -= 1
    while _compare_scaled(p, q, radix, exponent + 1) >= 0:
        exponent += 1

    scale = precision - 1 - exponent
    if scale >= 0:
        numerator, denominator = mul_limbs(p, _power_limbs(radix, scale)), q
    else:
        numerator, denominator = p, mul_limbs(q, _power_limbs(radix, -scale))

    quotient, remainder = divmod_limbs(numerator, denominator)
    if compare_limbs(mul_limbs(remainder, [2]), denominator) >= 0:
        quotient = add_small(quotient, 1)

    digits = limbs_to_digits(quotient, radix)
    if len(digits) > precision:
        # rounding carried into a new leading digit (e.g. 9.99 -> 10.0)
        digits = digits[:precision]
        exponent += 1
    return digits.rstrip("0") or "0", exponent


def _layout(digits: str, exponent: int, fmt: NumberFormat, precision: int) -> str:
    if fmt == NumberFormat.FLOAT and _MIN_PLAIN_EXPONENT <= exponent < precision:
        if exponent < 0:
            return "0." + "0" * (-exponent - 1) + digits
        whole = digits[: exponent + 1].ljust(exponent + 1, "0")
        fraction = digits[exponent + 1 :]
        return f"{whole}.{fraction}" if fraction else whole

    lead = 1
    if fmt == NumberFormat.ENGINEERING:
        lead += exponent % 3
        exponent -= exponent % 3
    whole = digits[:lead].ljust(lead, "0")
    fraction = digits[lead:]
    mantissa = f"{whole}.{fraction}" if fraction else whole
    return f"{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
