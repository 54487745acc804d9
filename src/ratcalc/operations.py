"""
Multi-limb integer arithmetic.

The first half of this module works on bare limb lists (little-endian,
base 2**32, no most-significant zero limbs).  The second half lifts
those algorithms to signed ``BigNumber`` values, aligning exponents
where needed.  ``RationalNumber`` is built entirely on top of these.
"""

from __future__ import annotations

from ratcalc.exceptions import DivisionByZeroError, InvalidInputError
from ratcalc.number import LIMB_BITS, LIMB_MASK, BigNumber

Limbs = list[int]

DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def trim(limbs: Limbs) -> Limbs:
    """Drop most-significant zero limbs in place and return the list."""
    while limbs and limbs[-1] == 0:
        limbs.pop()
    return limbs


def bit_length(limbs: Limbs) -> int:
    if not limbs:
        return 0
    return (len(limbs) - 1) * LIMB_BITS + limbs[-1].bit_length()


def compare_limbs(a: Limbs, b: Limbs) -> int:
    """Return -1, 0 or 1 as ``a`` is less than, equal to or greater than ``b``."""
    if len(a) != len(b):
        return 1 if len(a) > len(b) else -1
    for x, y in zip(reversed(a), reversed(b)):
        if x != y:
            return 1 if x > y else -1
    return 0


def add_limbs(a: Limbs, b: Limbs) -> Limbs:
    if len(a) < len(b):
        a, b = b, a
    result = []
    carry = 0
    for i, x in enumerate(a):
        total = x + (b[i] if i < len(b) else 0) + carry
        result.append(total & LIMB_MASK)
        carry = total >> LIMB_BITS
    if carry:
        result.append(carry)
    return result


def sub_limbs(a: Limbs, b: Limbs) -> Limbs:
    """
    Compute ``a - b``.

    Raises:
        InvalidInputError: If ``b`` is larger than ``a``
    """
    if compare_limbs(a, b) < 0:
        raise InvalidInputError((a, b), "Subtrahend larger than minuend")
    result = []
    borrow = 0
    for i, x in enumerate(a):
        diff = x - (b[i] if i < len(b) else 0) - borrow
        borrow = 1 if diff < 0 else 0
        result.append(diff & LIMB_MASK)
    return trim(result)


def mul_limbs(a: Limbs, b: Limbs) -> Limbs:
    """Schoolbook multiplication."""
    if not a or not b:
        return []
    result = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            total = result[i + j] + x * y + carry
            result[i + j] = total & LIMB_MASK
            carry = total >> LIMB_BITS
        result[i + len(b)] = carry
    return trim(result)


def mul_small(a: Limbs, factor: int) -> Limbs:
    """Multiply by a single limb."""
    if factor == 0 or not a:
        return []
    result = []
    carry = 0
    for x in a:
        total = x * factor + carry
        result.append(total & LIMB_MASK)
        carry = total >> LIMB_BITS
    if carry:
        result.append(carry)
    return result


def add_small(a: Limbs, addend: int) -> Limbs:
    result = list(a)
    carry = addend
    i = 0
    while carry:
        if i == len(result):
            result.append(0)
        total = result[i] + carry
        result[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
        i += 1
    return result


def divmod_small(a: Limbs, divisor: int) -> tuple[Limbs, int]:
    """Divide by a single non-zero limb, returning (quotient, remainder)."""
    if divisor == 0:
        raise DivisionByZeroError(a)
    quotient = [0] * len(a)
    remainder = 0
    for i in range(len(a) - 1, -1, -1):
        current = (remainder << LIMB_BITS) | a[i]
        quotient[i], remainder = divmod(current, divisor)
    return trim(quotient), remainder


def shift_left_bits(a: Limbs, bits: int) -> Limbs:
    """Shift left by any number of bits."""
    if not a:
        return []
    limbs, bits = divmod(bits, LIMB_BITS)
    result = [0] * limbs
    if bits == 0:
        return result + list(a)
    carry = 0
    for x in a:
        result.append(((x << bits) | carry) & LIMB_MASK)
        carry = x >> (LIMB_BITS - bits)
    if carry:
        result.append(carry)
    return result


def shift_right_bits(a: Limbs, bits: int) -> Limbs:
    """Shift right by any number of bits, discarding the low bits."""
    limbs, bits = divmod(bits, LIMB_BITS)
    a = a[limbs:]
    if bits == 0 or not a:
        return list(a)
    result = []
    for i, x in enumerate(a):
        high = a[i + 1] if i + 1 < len(a) else 0
        result.append(((x >> bits) | (high << (LIMB_BITS - bits))) & LIMB_MASK)
    return trim(result)


def divmod_limbs(u: Limbs, v: Limbs) -> tuple[Limbs, Limbs]:
    """
    Long division (Knuth, TAOCP vol. 2, algorithm 4.3.1 D).

    Returns:
        (quotient, remainder) with ``u == quotient * v + remainder``

    Raises:
        DivisionByZeroError: If ``v`` is zero
    """
    if not v:
        raise DivisionByZeroError(u)
    if compare_limbs(u, v) < 0:
        return [], list(u)
    if len(v) == 1:
        quotient, remainder = divmod_small(u, v[0])
        return quotient, [remainder] if remainder else []

    # D1: normalise so the divisor's top limb has its high bit set
    shift = LIMB_BITS - v[-1].bit_length()
    vn = shift_left_bits(v, shift)
    un = shift_left_bits(u, shift)
    n = len(vn)
    m = len(u) - n
    un.extend([0] * (m + n + 1 - len(un)))

    v_top = vn[-1]
    v_next = vn[-2]
    quotient = [0] * (m + 1)

    for j in range(m, -1, -1):
        # D3: estimate the quotient limb
        numerator = (un[j + n] << LIMB_BITS) | un[j + n - 1]
        qhat, rhat = divmod(numerator, v_top)
        while qhat > LIMB_MASK or qhat * v_next > ((rhat << LIMB_BITS) | un[j + n - 2]):
            qhat -= 1
            rhat += v_top
            if rhat > LIMB_MASK:
                break

        # D4: multiply and subtract
        borrow = 0
        carry = 0
        for i in range(n):
            product = qhat * vn[i] + carry
            carry = product >> LIMB_BITS
            diff = un[i + j] - (product & LIMB_MASK) - borrow
            un[i + j] = diff & LIMB_MASK
            borrow = 1 if diff < 0 else 0
        diff = un[j + n] - carry - borrow
        un[j + n] = diff & LIMB_MASK

        # D6: the estimate was one too large, add the divisor back
        if diff < 0:
            qhat -= 1
            carry = 0
            for i in range(n):
                total = un[i + j] + vn[i] + carry
                un[i + j] = total & LIMB_MASK
                carry = total >> LIMB_BITS
            un[j + n] = (un[j + n] + carry) & LIMB_MASK

        quotient[j] = qhat

    # D8: unnormalise the remainder
    remainder = shift_right_bits(trim(un[:n]), shift)
    return trim(quotient), remainder


def gcd_limbs(a: Limbs, b: Limbs) -> Limbs:
    """Greatest common divisor by the Euclidean algorithm."""
    a, b = list(a), list(b)
    while b:
        a, b = b, divmod_limbs(a, b)[1]
    return a


def _chunk_size(radix: int) -> int:
    """Largest k such that radix**k still fits in one limb."""
    size = 1
    while radix ** (size + 1) <= LIMB_MASK:
        size += 1
    return size


def digit_value(char: str) -> int:
    """Value of a single digit character, or -1 when it is not a digit."""
    return DIGITS.find(char.upper())


def limbs_to_digits(a: Limbs, radix: int) -> str:
    """Render a magnitude in ``radix`` (2-36), most significant digit first."""
    if not 2 <= radix <= len(DIGITS):
        raise InvalidInputError(radix, "Radix must be between 2 and 36")
    if not a:
        return "0"
    size = _chunk_size(radix)
    chunk = radix**size
    pieces = []
    while a:
        a, remainder = divmod_small(a, chunk)
        digits = []
        for _ in range(size):
            remainder, digit = divmod(remainder, radix)
            digits.append(DIGITS[digit])
        pieces.append("".join(reversed(digits)))
    return "".join(reversed(pieces)).lstrip("0") or "0"


def digits_to_limbs(text: str, radix: int) -> Limbs:
    """
    Parse an unsigned digit string in ``radix``.

    Raises:
        InvalidInputError: If the string is empty or holds a non-digit
    """
    if not 2 <= radix <= len(DIGITS):
        raise InvalidInputError(radix, "Radix must be between 2 and 36")
    if not text:
        raise InvalidInputError(text, "Empty digit string")
    size = _chunk_size(radix)
    result: Limbs = []
    for start in range(0, len(text), size):
        piece = text[start : start + size]
        value = 0
        for char in piece:
            digit = digit_value(char)
            if not 0 <= digit < radix:
                raise InvalidInputError(text, f"Invalid digit {char!r} for radix {radix}")
            value = value * radix + digit
        result = add_small(mul_small(result, radix ** len(piece)), value)
    return trim(result)


# -- signed BigNumber combinators ------------------------------------------


def _aligned(a: BigNumber, b: BigNumber) -> tuple[Limbs, Limbs, int]:
    """Both mantissas scaled to the smaller exponent."""
    exponent = min(a.exponent, b.exponent)
    ma = [0] * (a.exponent - exponent) + a.mantissa if a.mantissa else []
    mb = [0] * (b.exponent - exponent) + b.mantissa if b.mantissa else []
    return ma, mb, exponent


def number_negate(a: BigNumber) -> BigNumber:
    return BigNumber(-a.sign, a.exponent, a.mantissa)


def number_add(a: BigNumber, b: BigNumber) -> BigNumber:
    if a.is_zero():
        return b.clone()
    if b.is_zero():
        return a.clone()
    ma, mb, exponent = _aligned(a, b)
    if a.sign == b.sign:
        return BigNumber(a.sign, exponent, add_limbs(ma, mb))
    order = compare_limbs(ma, mb)
    if order == 0:
        return BigNumber.zero()
    if order > 0:
        return BigNumber(a.sign, exponent, sub_limbs(ma, mb))
    return BigNumber(b.sign, exponent, sub_limbs(mb, ma))


def number_subtract(a: BigNumber, b: BigNumber) -> BigNumber:
    return number_add(a, number_negate(b))


def number_multiply(a: BigNumber, b: BigNumber) -> BigNumber:
    if a.is_zero() or b.is_zero():
        return BigNumber.zero()
    return BigNumber(a.sign * b.sign, a.exponent + b.exponent, mul_limbs(a.mantissa, b.mantissa))


def number_compare(a: BigNumber, b: BigNumber) -> int:
    if a.sign != b.sign:
        return 1 if a.sign > b.sign else -1
    if a.is_zero():
        return 0
    ma, mb, _ = _aligned(a, b)
    return a.sign * compare_limbs(ma, mb)


def number_divmod(a: BigNumber, b: BigNumber) -> tuple[BigNumber, BigNumber]:
    """
    Truncating division: the quotient rounds toward zero and the
    remainder takes the sign of the dividend.

    Raises:
        DivisionByZeroError: If ``b`` is zero
    """
    if b.is_zero():
        raise DivisionByZeroError(a)
    ma, mb, exponent = _aligned(a, b)
    quotient, remainder = divmod_limbs(ma, mb)
    return (
        BigNumber(a.sign * b.sign, 0, quotient),
        BigNumber(a.sign, exponent, remainder),
    )


def number_gcd(a: BigNumber, b: BigNumber) -> BigNumber:
    """Non-negative greatest common divisor of the aligned magnitudes."""
    ma, mb, exponent = _aligned(a, b)
    return BigNumber(1, exponent, gcd_limbs(ma, mb))
