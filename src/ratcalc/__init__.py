"""
Arbitrary-precision rational calculator engine.

This package provides:
- Exact multi-limb integers and rational numbers
- A digit-by-digit input accumulator
- A command-driven engine with operator precedence, integer word
  widths and radix display
"""

from ratcalc.config import EngineConfig
from ratcalc.constants import (
    AngleType,
    ErrorCode,
    NumberFormat,
    NumWidth,
    OpCode,
    RadixType,
)
from ratcalc.core import CalculatorEngine
from ratcalc.exceptions import (
    CalculatorError,
    DivisionByZeroError,
    DomainError,
    InvalidInputError,
    MemoryRegisterError,
    OutOfRangeError,
    OverflowError,
)
from ratcalc.history import EngineStrings, ExpressionCommand, HistoryCollector
from ratcalc.input import InputAccumulator
from ratcalc.interfaces import DefaultResourceProvider, DisplaySink, HistorySink, ResourceProvider
from ratcalc.number import BigNumber
from ratcalc.rational import RationalNumber
from ratcalc.validators import (
    validate_magnitude,
    validate_non_zero,
    validate_number,
    validate_positive,
    validate_range,
)

__all__ = [
    "AngleType",
    "BigNumber",
    "CalculatorEngine",
    "CalculatorError",
    "DefaultResourceProvider",
    "DisplaySink",
    "DivisionByZeroError",
    "DomainError",
    "EngineConfig",
    "EngineStrings",
    "ErrorCode",
    "ExpressionCommand",
    "HistoryCollector",
    "HistorySink",
    "InputAccumulator",
    "InvalidInputError",
    "MemoryRegisterError",
    "NumWidth",
    "NumberFormat",
    "OpCode",
    "OutOfRangeError",
    "OverflowError",
    "RadixType",
    "RationalNumber",
    "ResourceProvider",
    "validate_magnitude",
    "validate_non_zero",
    "validate_number",
    "validate_positive",
    "validate_range",
]

__version__ = "0.1.0"
