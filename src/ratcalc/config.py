"""Engine construction settings."""

from __future__ import annotations

from dataclasses import dataclass

from ratcalc.constants import (
    MAX_STR_LEN,
    AngleType,
    NumberFormat,
    NumWidth,
    RadixType,
)
from ratcalc.exceptions import InvalidInputError


@dataclass(frozen=True)
class EngineConfig:
    """
    Fixed configuration of one engine instance.

    Attributes:
        precedence: Whether ``×`` binds tighter than ``+`` (scientific
            mode) or operators apply left to right (standard mode)
        integer_mode: Whether values are whole numbers wrapped to the word
            width (programmer mode)
        precision: Significant digits used for display and entry
        radix: Initial radix
        num_width: Initial word width
        angle: Initial angle unit
        number_format: Initial display format

    Example:
        >>> EngineConfig(integer_mode=True, radix=RadixType.HEX).precision
        32
    """

    precedence: bool = True
    integer_mode: bool = False
    precision: int = 32
    radix: RadixType = RadixType.DECIMAL
    num_width: NumWidth = NumWidth.QWORD
    angle: AngleType = AngleType.DEGREES
    number_format: NumberFormat = NumberFormat.FLOAT

    def __post_init__(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise InvalidInputError(self.precision, "Precision must be an integer")
        if not 1 <= self.precision <= MAX_STR_LEN:
            raise InvalidInputError(self.precision, f"Precision must be between 1 and {MAX_STR_LEN}")
        for name, kind in (
            ("radix", RadixType),
            ("num_width", NumWidth),
            ("angle", AngleType),
            ("number_format", NumberFormat),
        ):
            if not isinstance(getattr(self, name), kind):
                raise InvalidInputError(getattr(self, name), f"{name} must be a {kind.__name__}")
        if not self.integer_mode and self.radix != RadixType.DECIMAL:
            raise InvalidInputError(self.radix, "Only integer mode supports non-decimal radixes")
