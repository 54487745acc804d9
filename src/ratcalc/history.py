"""Operator and error texts, and the record of completed calculations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ratcalc.constants import ErrorCode, OpCode

if TYPE_CHECKING:
    from ratcalc.interfaces import HistorySink, ResourceProvider

logger = logging.getLogger(__name__)

_DEFAULT_OPERATORS = {
    OpCode.ADD: "+",
    OpCode.SUBTRACT: "-",
    OpCode.MULTIPLY: "×",
    OpCode.DIVIDE: "÷",
    OpCode.MOD: "Mod",
    OpCode.POW: "^",
    OpCode.AND: "AND",
    OpCode.OR: "OR",
    OpCode.XOR: "XOR",
    OpCode.SHIFT_LEFT: "Lsh",
    OpCode.SHIFT_RIGHT: "Rsh",
    OpCode.NOT: "NOT",
    OpCode.SIN: "sin",
    OpCode.COS: "cos",
    OpCode.TAN: "tan",
    OpCode.SINH: "sinh",
    OpCode.COSH: "cosh",
    OpCode.TANH: "tanh",
    OpCode.LN: "ln",
    OpCode.LOG: "log",
    OpCode.SQRT: "√",
    OpCode.SQUARE: "sqr",
    OpCode.CUBEROOT: "cuberoot",
    OpCode.CUBE: "cube",
    OpCode.POW10: "10^",
    OpCode.PERCENT: "%",
    OpCode.OPEN_PAREN: "(",
    OpCode.CLOSE_PAREN: ")",
    OpCode.EQUALS: "=",
    OpCode.NEGATE: "negate",
}

# Functions whose inverse has a name of its own
_DEFAULT_INVERSES = {
    OpCode.LN: "e^",
    OpCode.LOG: "10^",
    OpCode.SQRT: "sqr",
    OpCode.CUBEROOT: "cube",
}

_DEFAULT_ERRORS = {
    ErrorCode.DIVIDE_BY_ZERO: "Cannot divide by zero",
    ErrorCode.DOMAIN_ERROR: "Invalid input",
    ErrorCode.OVERFLOW: "Overflow",
    ErrorCode.INVALID_INPUT: "Invalid input",
    ErrorCode.MEMORY_ERROR: "Memory error",
}

_ANGLE_SUFFIX = {"degrees": "deg", "radians": "rad", "gradians": "grad"}


def operator_resource_id(op: OpCode) -> str:
    return f"op_{op.name.lower()}"


def error_resource_id(code: ErrorCode) -> str:
    return f"error_{code.name.lower()}"


class EngineStrings:
    """
    Display texts of one engine.

    Built-in English texts are replaced by whatever the resource
    provider returns for ``op_<name>``, ``inv_<name>`` and
    ``error_<name>`` ids; empty lookups keep the built-in text.
    """

    def __init__(self, resources: ResourceProvider | None = None) -> None:
        self._operators = dict(_DEFAULT_OPERATORS)
        self._inverses = dict(_DEFAULT_INVERSES)
        self._errors = dict(_DEFAULT_ERRORS)
        if resources is not None:
            self.load(resources)

    def load(self, resources: ResourceProvider) -> None:
        for op in self._operators:
            text = resources.get_string(operator_resource_id(op))
            if text:
                self._operators[op] = text
        for op in self._inverses:
            text = resources.get_string(f"inv_{op.name.lower()}")
            if text:
                self._inverses[op] = text
        for code in self._errors:
            text = resources.get_string(error_resource_id(code))
            if text:
                self._errors[code] = text

    def operator(self, op: OpCode) -> str:
        return self._operators.get(op, op.name.lower())

    def function(self, op: OpCode, inverse: bool = False, angle: str | None = None) -> str:
        """
        Label of a unary function such as ``arcsin(deg)`` or ``e^``.

        Trigonometric labels carry the angle unit.
        """
        if inverse and op in self._inverses:
            return self._inverses[op]
        label = self.operator(op)
        if inverse:
            label = "arc" + label
        if angle is not None and op in (OpCode.SIN, OpCode.COS, OpCode.TAN):
            label += f"({_ANGLE_SUFFIX.get(angle, angle)})"
        return label

    def error(self, code: ErrorCode) -> str:
        return self._errors.get(code, self._errors[ErrorCode.INVALID_INPUT])


@dataclass(frozen=True)
class ExpressionCommand:
    """One completed calculation."""

    command: OpCode
    expression: str
    result: str

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"


class HistoryCollector:
    """Records completed calculations and forwards them to a history sink."""

    def __init__(self, sink: HistorySink | None = None, strings: EngineStrings | None = None) -> None:
        self._sink = sink
        self._strings = strings or EngineStrings()
        self._commands: list[ExpressionCommand] = []

    @property
    def commands(self) -> list[ExpressionCommand]:
        return self._commands.copy()

    def _add(self, command: OpCode, expression: str, result: str) -> None:
        self._commands.append(ExpressionCommand(command, expression, result))
        logger.debug("History: %s = %s", expression, result)
        if self._sink is not None:
            self._sink.add_history_item(expression, result)

    def add_binary_op(self, op: OpCode, lhs: str, rhs: str, result: str) -> None:
        self._add(op, f"{lhs} {self._strings.operator(op)} {rhs}", result)

    def add_unary_op(self, op: OpCode, label: str, operand: str, result: str) -> None:
        self._add(op, f"{label}({operand})", result)

    def clear(self) -> None:
        self._commands.clear()
        if self._sink is not None:
            self._sink.clear_history()
