"""Arbitrary-precision magnitude stored as 32-bit limbs."""

from __future__ import annotations

from ratcalc.exceptions import InvalidInputError

LIMB_BITS = 32
LIMB_BASE = 1 << LIMB_BITS
LIMB_MASK = LIMB_BASE - 1
UINT64_MASK = (1 << 64) - 1


class BigNumber:
    """
    Signed value ``sign * mantissa * LIMB_BASE ** exponent``.

    The mantissa is a list of unsigned 32-bit limbs, least significant
    first, without most-significant zero limbs.  ``sign`` is 0 exactly
    when the mantissa is empty.  Instances are treated as immutable:
    arithmetic in ``ratcalc.operations`` always builds new ones.

    Example:
        >>> BigNumber.from_int(-(1 << 40)).mantissa
        [0, 256]
    """

    __slots__ = ("sign", "exponent", "mantissa")

    def __init__(self, sign: int = 0, exponent: int = 0, mantissa: list[int] | None = None) -> None:
        limbs = list(mantissa) if mantissa else []
        for limb in limbs:
            if not 0 <= limb <= LIMB_MASK:
                raise InvalidInputError(limb, "Limb outside 32-bit range")
        while limbs and limbs[-1] == 0:
            limbs.pop()

        if not limbs:
            sign, exponent = 0, 0
        elif sign not in (-1, 1):
            raise InvalidInputError(sign, "Sign of a non-zero BigNumber must be -1 or 1")

        self.sign = sign
        self.exponent = exponent
        self.mantissa = limbs

    @classmethod
    def zero(cls) -> BigNumber:
        return cls()

    @classmethod
    def from_int(cls, value: int) -> BigNumber:
        """Build from any Python integer."""
        sign = (value > 0) - (value < 0)
        magnitude = abs(value)
        limbs = []
        while magnitude:
            limbs.append(magnitude & LIMB_MASK)
            magnitude >>= LIMB_BITS
        return cls(sign, 0, limbs)

    @classmethod
    def from_uint64(cls, value: int) -> BigNumber:
        """Build from the low 64 bits of ``value``."""
        return cls.from_int(value & UINT64_MASK)

    def clone(self) -> BigNumber:
        return BigNumber(self.sign, self.exponent, self.mantissa)

    def is_zero(self) -> bool:
        return self.sign == 0

    def bit_length(self) -> int:
        """Bit length of the mantissa, ignoring the exponent."""
        if not self.mantissa:
            return 0
        return (len(self.mantissa) - 1) * LIMB_BITS + self.mantissa[-1].bit_length()

    def to_int(self) -> int:
        """Value as a Python int; limbs below the radix point are dropped."""
        value = 0
        for limb in reversed(self.mantissa):
            value = (value << LIMB_BITS) | limb
        if self.exponent >= 0:
            value <<= LIMB_BITS * self.exponent
        else:
            value >>= LIMB_BITS * -self.exponent
        return self.sign * value

    def _canonical(self) -> tuple[int, int, tuple[int, ...]]:
        limbs = self.mantissa
        shift = 0
        while shift < len(limbs) and limbs[shift] == 0:
            shift += 1
        return self.sign, self.exponent + shift if limbs else 0, tuple(limbs[shift:])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigNumber):
            return NotImplemented
        return self._canonical() == other._canonical()

    def __hash__(self) -> int:
        return hash(self._canonical())

    def __repr__(self) -> str:
        if self.is_zero():
            return "BigNumber(0)"
        limbs = ", ".join(f"0x{limb:x}" for limb in self.mantissa)
        return f"BigNumber(sign={self.sign}, exponent={self.exponent}, mantissa=[{limbs}])"
