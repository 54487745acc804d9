"""Custom exceptions for the calculator engine."""

from typing import Any

from ratcalc.constants import ErrorCode


class CalculatorError(Exception):
    """Base exception for all calculator errors."""

    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, value: Any = None) -> None:
        self.message = message
        self.value = value
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.message}: {self.value}"
        return self.message


class DivisionByZeroError(CalculatorError):
    """Raised when dividing (or taking a modulus) by zero."""

    code = ErrorCode.DIVIDE_BY_ZERO

    def __init__(self, numerator: Any) -> None:
        super().__init__("Division by zero", numerator)
        self.numerator = numerator


class DomainError(CalculatorError):
    """Raised when a function is evaluated outside its domain."""

    code = ErrorCode.DOMAIN_ERROR

    def __init__(self, function: str, argument: Any) -> None:
        super().__init__(f"Invalid argument for {function}", argument)
        self.function = function
        self.argument = argument


class OverflowError(CalculatorError):
    """Raised when a result or an engine stack exceeds its capacity."""

    code = ErrorCode.OVERFLOW

    def __init__(self, operation: str, *operands: Any) -> None:
        super().__init__(f"Overflow in {operation}", operands or None)
        self.operation = operation
        self.operands = operands


class InvalidInputError(CalculatorError):
    """Raised when input is malformed or of the wrong type."""

    code = ErrorCode.INVALID_INPUT

    def __init__(self, value: Any, reason: str = "invalid input") -> None:
        super().__init__(reason, value)
        self.reason = reason


class MemoryRegisterError(CalculatorError):
    """Raised when the memory register cannot satisfy an operation."""

    code = ErrorCode.MEMORY_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class OutOfRangeError(CalculatorError):
    """Raised when a value falls outside an accepted interval."""

    code = ErrorCode.DOMAIN_ERROR

    def __init__(self, value: Any, min_val: Any = None, max_val: Any = None) -> None:
        range_str = f"[{min_val}, {max_val}]"
        super().__init__(f"Value out of range {range_str}", value)
        self.min_val = min_val
        self.max_val = max_val
