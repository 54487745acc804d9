"""
Transcendental and root functions for the engine.

Values are converted to ``mpmath`` floats at a working precision a few
digits beyond the display precision, evaluated, and converted back to
exact binary fractions.  Right-angle multiples in degrees and gradians
are resolved exactly so that, for example, ``sin(180°)`` is exactly 0.
"""

from __future__ import annotations

import logging
import math

from mpmath import mp

from ratcalc.constants import MAX_MAGNITUDE_BITS, AngleType, OpCode
from ratcalc.exceptions import DivisionByZeroError, DomainError, OverflowError
from ratcalc.rational import RationalNumber
from ratcalc.validators import validate_magnitude, validate_positive, validate_range

logger = logging.getLogger(__name__)

GUARD_DIGITS = 10

# Fractions whose exact power would be larger than this are evaluated approximately
_EXACT_FRACTION_BITS = 4096

# Size of a right angle in each unit; radians have no exact multiples
_RIGHT_ANGLE = {
    AngleType.DEGREES: RationalNumber.from_int(90),
    AngleType.GRADIANS: RationalNumber.from_int(100),
}

_HALF_TURN = {
    AngleType.DEGREES: 180,
    AngleType.GRADIANS: 200,
}

_SIN_QUADRANT = (0, 1, 0, -1)
_COS_QUADRANT = (1, 0, -1, 0)


def to_mpf(value: RationalNumber):
    numerator, denominator = value.as_integer_ratio()
    return mp.mpf(numerator) / denominator


def from_mpf(value, operation: str = "calculation") -> RationalNumber:
    """
    Exact RationalNumber equal to a finite mpmath float.

    Raises:
        OverflowError: If the value is infinite, NaN or too large
    """
    if not mp.isfinite(value):
        raise OverflowError(operation)
    if value == 0:
        return RationalNumber()
    magnitude = mp.mag(value)
    if magnitude > MAX_MAGNITUDE_BITS:
        raise OverflowError(operation)
    if magnitude < -MAX_MAGNITUDE_BITS:
        # underflows to zero
        return RationalNumber()
    mantissa, exponent = value.man_exp
    return RationalNumber.from_int(mantissa) * RationalNumber.from_int(2).power(exponent)


def pi(precision: int) -> RationalNumber:
    with mp.workdps(precision + GUARD_DIGITS):
        return from_mpf(+mp.pi, "pi")


def _to_radians(value, angle: AngleType):
    if angle == AngleType.DEGREES:
        return value * mp.pi / 180
    if angle == AngleType.GRADIANS:
        return value * mp.pi / 200
    return value


def _from_radians(value, angle: AngleType):
    if angle == AngleType.RADIANS:
        return value
    return value * _HALF_TURN[angle] / mp.pi


def _right_angle_quadrant(value: RationalNumber, angle: AngleType) -> int | None:
    """Quadrant index when ``value`` is an exact multiple of a right angle."""
    right_angle = _RIGHT_ANGLE.get(angle)
    if right_angle is None:
        return None
    turns = value / right_angle
    if not turns.is_integer():
        return None
    return (turns % 4).to_int()


def _trig(op: OpCode, value: RationalNumber, angle: AngleType) -> RationalNumber:
    quadrant = _right_angle_quadrant(value, angle)
    if quadrant is not None:
        if op == OpCode.SIN:
            return RationalNumber.from_int(_SIN_QUADRANT[quadrant])
        if op == OpCode.COS:
            return RationalNumber.from_int(_COS_QUADRANT[quadrant])
        if quadrant % 2:
            raise DomainError("tan", value)
        return RationalNumber()

    function = {OpCode.SIN: mp.sin, OpCode.COS: mp.cos, OpCode.TAN: mp.tan}[op]
    return from_mpf(function(_to_radians(to_mpf(value), angle)), op.name.lower())


def _inverse_trig(op: OpCode, value: RationalNumber, angle: AngleType) -> RationalNumber:
    name = "arc" + op.name.lower()
    if op != OpCode.TAN:
        # OutOfRangeError reports DOMAIN_ERROR
        validate_range(value, -1, 1)
    function = {OpCode.SIN: mp.asin, OpCode.COS: mp.acos, OpCode.TAN: mp.atan}[op]
    return from_mpf(_from_radians(function(to_mpf(value)), angle), name)


def _hyperbolic(op: OpCode, value: RationalNumber, inverse: bool) -> RationalNumber:
    name = ("arc" if inverse else "") + op.name.lower()
    if inverse:
        if op == OpCode.COSH and value < 1:
            raise DomainError(name, value)
        if op == OpCode.TANH and not -1 < value < 1:
            raise DomainError(name, value)
        function = {OpCode.SINH: mp.asinh, OpCode.COSH: mp.acosh, OpCode.TANH: mp.atanh}[op]
    else:
        function = {OpCode.SINH: mp.sinh, OpCode.COSH: mp.cosh, OpCode.TANH: mp.tanh}[op]
    return from_mpf(function(to_mpf(value)), name)


def _exact_root(value: RationalNumber, degree: int) -> RationalNumber | None:
    """The exact ``degree``-th root of a rational, if there is one."""
    numerator, denominator = value.as_integer_ratio()
    roots = []
    for part in (abs(numerator), denominator):
        if degree == 2:
            root = math.isqrt(part)
        else:
            with mp.workdps(math.ceil(part.bit_length() * math.log10(2)) + GUARD_DIGITS):
                root = int(mp.nint(mp.cbrt(part)))
        if root**degree != part:
            return None
        roots.append(root)
    sign = -1 if numerator < 0 else 1
    return RationalNumber.from_ints(sign * roots[0], roots[1])


def _sqrt(value: RationalNumber) -> RationalNumber:
    validate_positive(value, "sqrt", allow_zero=True)
    exact = _exact_root(value, 2)
    if exact is not None:
        return exact
    return from_mpf(mp.sqrt(to_mpf(value)), "sqrt")


def _cuberoot(value: RationalNumber) -> RationalNumber:
    exact = _exact_root(value, 3)
    if exact is not None:
        return exact
    return from_mpf(mp.cbrt(to_mpf(value)), "cuberoot")


def _checked_power(base: RationalNumber, exponent: int, operation: str, precision: int) -> RationalNumber:
    """
    Integer power guarded against results beyond the representable range.

    Powers are exact while the operands stay small enough to reduce;
    larger ones are evaluated through mpmath, which also decides overflow
    and underflow from the magnitude of the result.
    """
    if exponent and not base.is_zero() and abs(base) != 1:
        numerator, denominator = base.as_integer_ratio()
        size = max(abs(numerator).bit_length(), denominator.bit_length()) * abs(exponent)
        unit = abs(numerator) == 1 or denominator == 1
        if size > (2 * MAX_MAGNITUDE_BITS if unit else _EXACT_FRACTION_BITS):
            with mp.workdps(precision + GUARD_DIGITS):
                return from_mpf(mp.power(to_mpf(base), exponent), operation)
    return validate_magnitude(base.power(exponent), operation)


def power_of_ten(value: RationalNumber, precision: int) -> RationalNumber:
    if value.is_integer():
        return _checked_power(RationalNumber.from_int(10), value.to_int(), "10^x", precision)
    with mp.workdps(precision + GUARD_DIGITS):
        return from_mpf(mp.power(10, to_mpf(value)), "10^x")


def power(base: RationalNumber, exponent: RationalNumber, precision: int) -> RationalNumber:
    """
    ``base ** exponent`` for any rational exponent.

    Integer exponents are exact.  A negative base accepts a fractional
    exponent only when the exponent's reduced denominator is odd.

    Raises:
        DivisionByZeroError: If zero is raised to a negative power
        DomainError: For an even root of a negative base
        OverflowError: If the result is too large
    """
    if exponent.is_integer():
        return _checked_power(base, exponent.to_int(), "power", precision)

    if base.is_zero():
        if exponent.is_negative():
            raise DivisionByZeroError(base)
        return RationalNumber()

    numerator, denominator = exponent.as_integer_ratio()
    negative = base.is_negative()
    if negative and denominator % 2 == 0:
        raise DomainError("power", (base, exponent))

    with mp.workdps(precision + GUARD_DIGITS):
        result = from_mpf(mp.power(to_mpf(abs(base)), to_mpf(exponent)), "power")
    if negative and numerator % 2:
        return -result
    return result


def evaluate(op: OpCode, value: RationalNumber, inverse: bool, angle: AngleType, precision: int) -> RationalNumber:
    """
    Apply a scientific unary function.

    Args:
        op: One of SIN, COS, TAN, SINH, COSH, TANH, LN, LOG, SQRT,
            SQUARE, CUBEROOT, CUBE or POW10
        value: The argument
        inverse: Whether the inverse function was selected
        angle: Unit of trigonometric arguments and results
        precision: Significant decimal digits required in the result

    Raises:
        DomainError: If the argument is outside the function's domain
        OverflowError: If the result is too large
    """
    logger.debug("Evaluating %s (inverse=%s) at precision %d", op.name, inverse, precision)
    with mp.workdps(precision + GUARD_DIGITS):
        if op in (OpCode.SIN, OpCode.COS, OpCode.TAN):
            if inverse:
                return _inverse_trig(op, value, angle)
            return _trig(op, value, angle)

        if op in (OpCode.SINH, OpCode.COSH, OpCode.TANH):
            return _hyperbolic(op, value, inverse)

        if op == OpCode.LN:
            if inverse:
                return from_mpf(mp.exp(to_mpf(value)), "exp")
            validate_positive(value, "ln")
            return from_mpf(mp.ln(to_mpf(value)), "ln")

        if op == OpCode.LOG:
            if inverse:
                return power_of_ten(value, precision)
            validate_positive(value, "log")
            exact = _exact_log10(value)
            if exact is not None:
                return exact
            return from_mpf(mp.log10(to_mpf(value)), "log")

        if op == OpCode.SQRT:
            return _checked_power(value, 2, "square", precision) if inverse else _sqrt(value)

        if op == OpCode.CUBEROOT:
            return _checked_power(value, 3, "cube", precision) if inverse else _cuberoot(value)

        if op == OpCode.SQUARE:
            return _checked_power(value, 2, "square", precision)

        if op == OpCode.CUBE:
            return _checked_power(value, 3, "cube", precision)

        if op == OpCode.POW10:
            return power_of_ten(value, precision)

    raise DomainError(op.name.lower(), value)


def _ten_exponent(n: int) -> int | None:
    """``k`` such that ``n == 10 ** k``, or None."""
    estimate = int((n.bit_length() - 1) * math.log10(2))
    for k in (estimate, estimate + 1):
        if 10**k == n:
            return k
    return None


def _exact_log10(value: RationalNumber) -> RationalNumber | None:
    """log10 of an exact power of ten."""
    numerator, denominator = value.as_integer_ratio()
    if numerator == 1:
        exponent = _ten_exponent(denominator)
        return None if exponent is None else RationalNumber.from_int(-exponent)
    exponent = _ten_exponent(numerator) if denominator == 1 else None
    return None if exponent is None else RationalNumber.from_int(exponent)


__all__ = [
    "evaluate",
    "from_mpf",
    "pi",
    "power",
    "power_of_ten",
    "to_mpf",
]
