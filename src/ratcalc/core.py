"""CalculatorEngine: the command-driven calculator state machine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ratcalc import scientific
from ratcalc.config import EngineConfig
from ratcalc.constants import (
    ANGLE_COMMANDS,
    BINARY_OPERATORS,
    MAX_EXPONENT,
    MAX_PREC_DEPTH,
    MAX_STR_LEN,
    MEMORY_COMMANDS,
    RADIX_COMMANDS,
    UNARY_OPERATORS,
    WIDTH_COMMANDS,
    AngleType,
    NumberFormat,
    NumWidth,
    OpCode,
    precedence_of,
)
from ratcalc.exceptions import (
    CalculatorError,
    DivisionByZeroError,
    InvalidInputError,
    MemoryRegisterError,
    OverflowError,
)
from ratcalc.history import EngineStrings, HistoryCollector
from ratcalc.input import InputAccumulator
from ratcalc.interfaces import DefaultResourceProvider
from ratcalc.rational import RationalNumber
from ratcalc.utils import (
    digit_grouping_string_to_grouping_vector,
    group_digits_per_radix,
    max_value_string,
    radix_from_radix_type,
    radix_type_from_radix,
    truncate_for_integer_mode,
    validate_numeric_string,
    word_bit_width_from_num_width,
)
from ratcalc.validators import validate_magnitude, validate_non_zero, validate_number

if TYPE_CHECKING:
    from ratcalc.constants import RadixType
    from ratcalc.history import ExpressionCommand
    from ratcalc.interfaces import DisplaySink, HistorySink, ResourceProvider

logger = logging.getLogger(__name__)

_HUNDRED = RationalNumber.from_int(100)


class CalculatorEngine:
    """
    A calculator driven one command at a time.

    The engine keeps exact rational values, resolves chained operators
    with or without precedence, and reports every visible change to the
    injected display and history sinks.  Calculation errors put the
    engine into an error state that only CLEAR or CLEAR_ENTRY leave.

    Example:
        >>> engine = CalculatorEngine()
        >>> for op in (OpCode.DIGIT_2, OpCode.ADD, OpCode.DIGIT_3, OpCode.MULTIPLY,
        ...            OpCode.DIGIT_4, OpCode.EQUALS):
        ...     engine.process_command(op)
        >>> engine.display_text
        '14'
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        resource_provider: ResourceProvider | None = None,
        display: DisplaySink | None = None,
        history: HistorySink | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._resources = resource_provider or DefaultResourceProvider()
        self._display = display
        self._strings = EngineStrings(self._resources)
        self._history = HistoryCollector(history, self._strings)

        self._precedence = self._config.precedence
        self._integer_mode = self._config.integer_mode
        self._precision = self._config.precision
        self._radix = radix_from_radix_type(self._config.radix)
        self._num_width = self._config.num_width
        self._word_bits = word_bit_width_from_num_width(self._num_width)
        self._angle = self._config.angle
        self._number_format = self._config.number_format
        self._memory: RationalNumber | None = None

        self._decimal_separator = "."
        self._group_separator = ""
        self._grouping = [3]
        self._input = InputAccumulator()
        self._load_locale()
        self._update_max_digits()
        self._reset()

    # -- public API ----------------------------------------------------

    def process_command(self, op: OpCode | int) -> None:
        """
        Execute one command.

        Raises:
            InvalidInputError: If ``op`` is not a known command
        """
        try:
            op = OpCode(op)
        except ValueError as exc:
            raise InvalidInputError(op, "Unknown command") from exc

        if self._error:
            if op in (OpCode.CLEAR, OpCode.CLEAR_ENTRY):
                self._clear()
                self._last_command = op
            else:
                logger.debug("Ignoring %s in error state", op.name)
            return

        logger.debug("Processing %s", op.name)
        try:
            self._dispatch(op)
        except CalculatorError as exc:
            self._display_error(exc)
        self._last_command = op

    def is_in_error_state(self) -> bool:
        return self._error

    def is_input_empty(self) -> bool:
        return self._input.is_empty()

    @property
    def current_value(self) -> RationalNumber:
        """The value on display, including a number still being typed."""
        if not self._input.is_empty():
            value = self._input.commit(self._radix, self._entry_precision())
            return self._chop(value) if self._integer_mode else value
        return self._current

    @property
    def display_text(self) -> str:
        return self._primary_text

    @property
    def memory(self) -> RationalNumber | None:
        return self._memory

    @memory.setter
    def memory(self, value: RationalNumber | int | None) -> None:
        if value is not None:
            try:
                value = validate_number(value)
            except InvalidInputError as exc:
                raise MemoryRegisterError(f"Memory holds numbers, not {type(value).__name__}") from exc
            if self._integer_mode:
                value = self._chop(value)
        self._memory = value

    @property
    def radix(self) -> RadixType:
        return radix_type_from_radix(self._radix)

    @property
    def word_bit_width(self) -> int:
        return self._word_bits

    @property
    def num_width(self) -> NumWidth:
        return self._num_width

    @property
    def angle_unit(self) -> AngleType:
        return self._angle

    @property
    def inverse(self) -> bool:
        return self._inverse

    @property
    def number_format(self) -> NumberFormat:
        return self._number_format

    @property
    def precision(self) -> int:
        return self._precision

    @property
    def decimal_separator(self) -> str:
        return self._decimal_separator

    @property
    def history_commands(self) -> list[ExpressionCommand]:
        return self._history.commands

    def settings_changed(self) -> None:
        """Reload strings and separators from the resource provider."""
        self._strings.load(self._resources)
        self._load_locale()
        logger.info("Locale reloaded: decimal %r, grouping %r", self._decimal_separator, self._group_separator)
        if not self._error:
            self._refresh_display()

    def get_current_result_for_radix(self, radix: int, precision: int, group_digits: bool) -> str:
        """Render the current value in another radix without switching to it."""
        if self._error:
            return ""
        return self._format(self.current_value, radix, precision, group_digits)

    def change_precision(self, precision: int) -> None:
        """
        Change the number of significant digits used for display.

        Raises:
            InvalidInputError: If precision is outside 1..MAX_STR_LEN
        """
        if isinstance(precision, bool) or not isinstance(precision, int) or not 1 <= precision <= MAX_STR_LEN:
            raise InvalidInputError(precision, f"Precision must be between 1 and {MAX_STR_LEN}")
        self._precision = precision
        logger.info("Precision set to %d", precision)
        if not self._error:
            self._refresh_display()

    # -- dispatch ------------------------------------------------------

    def _dispatch(self, op: OpCode) -> None:
        if op.digit_value is not None:
            self._add_digit(op.digit_value)
        elif op in BINARY_OPERATORS:
            self._binary_operator(op)
        elif op in UNARY_OPERATORS:
            self._unary_operator(op)
        elif op in MEMORY_COMMANDS:
            self._memory_command(op)
        elif op in ANGLE_COMMANDS:
            self._angle = ANGLE_COMMANDS[op]
            logger.info("Angle unit set to %s", self._angle.value)
        elif op in RADIX_COMMANDS:
            self._set_radix(radix_from_radix_type(RADIX_COMMANDS[op]))
        elif op in WIDTH_COMMANDS:
            self._set_width(WIDTH_COMMANDS[op])
        else:
            handler = {
                OpCode.EQUALS: self._equals,
                OpCode.PERCENT: self._percent,
                OpCode.CLEAR: self._clear,
                OpCode.CLEAR_ENTRY: self._clear_entry,
                OpCode.BACKSPACE: self._backspace,
                OpCode.NEGATE: self._negate,
                OpCode.DECIMAL_SEPARATOR: self._decimal_point,
                OpCode.EXPONENT: self._exponent,
                OpCode.OPEN_PAREN: self._open_paren,
                OpCode.CLOSE_PAREN: self._close_paren,
                OpCode.INV: self._toggle_inverse,
                OpCode.PI: self._pi,
                OpCode.FE: self._toggle_format,
            }[op]
            handler()

    # -- state ---------------------------------------------------------

    def _reset(self) -> None:
        self._input.clear()
        self._current = RationalNumber()
        self._hold = RationalNumber()
        self._repeat_op: OpCode | None = None
        self._stack: list[tuple[RationalNumber, OpCode]] = []
        self._paren_stack: list[list[tuple[RationalNumber, OpCode]]] = []
        self._no_prev_equ = True
        self._error = False
        self._inverse = False
        self._last_command: OpCode | None = None
        self._tokens: list[str] = []
        self._paren_starts: list[int] = []
        self._operand_token: str | None = None
        self._primary_text = "0"

    def _load_locale(self) -> None:
        self._decimal_separator = self._resources.get_decimal_separator() or "."
        self._group_separator = self._resources.get_digit_grouping_separator()
        self._grouping = digit_grouping_string_to_grouping_vector(self._resources.get_digit_grouping_string())
        self._input.set_decimal_symbol(self._decimal_separator)

    def _update_max_digits(self) -> None:
        self._max_int_digits = len(max_value_string(self._word_bits, self._radix))

    def _max_num_string(self) -> str:
        # entry accepts the full unsigned range; committing wraps it to signed
        return max_value_string(self._word_bits, self._radix)

    def _entry_precision(self) -> int:
        return max(self._precision, MAX_STR_LEN) if self._integer_mode else self._precision

    def _commit_input(self) -> bool:
        """Move a typed number into the current value; False if nothing was typed."""
        if self._input.is_empty():
            return False
        self._current = self._finish(self._input.commit(self._radix, self._entry_precision()))
        self._input.clear()
        self._operand_token = None
        return True

    # -- value handling ------------------------------------------------

    def _chop(self, value: RationalNumber) -> RationalNumber:
        """Truncate and wrap to a signed value of the current word width."""
        value = truncate_for_integer_mode(value)
        modulus = RationalNumber.from_int(1 << self._word_bits)
        value = value % modulus
        if value >= 1 << (self._word_bits - 1):
            value = value - modulus
        return value

    def _finish(self, value: RationalNumber, operation: str = "calculation") -> RationalNumber:
        if self._integer_mode:
            return self._chop(value)
        return validate_magnitude(value, operation)

    def _integer_power(self, base: RationalNumber, exponent: RationalNumber) -> RationalNumber:
        """Power with wrapping after every multiplication."""
        n = exponent.to_int()
        if n < 0:
            if base.is_zero():
                raise DivisionByZeroError(base)
            # 1 / x**n truncates to zero unless |x| == 1
            return base.power(n) if abs(base) == 1 else RationalNumber()

        result = RationalNumber.from_int(1)
        square = self._chop(base)
        while n:
            if n & 1:
                result = self._chop(result * square)
            n >>= 1
            if n:
                square = self._chop(square * square)
        return result

    def _do_operation(self, op: OpCode, lhs: RationalNumber, rhs: RationalNumber) -> RationalNumber:
        if op == OpCode.ADD:
            result = lhs + rhs
        elif op == OpCode.SUBTRACT:
            result = lhs - rhs
        elif op == OpCode.MULTIPLY:
            result = lhs * rhs
        elif op == OpCode.DIVIDE:
            validate_non_zero(rhs, lhs)
            result = lhs / rhs
        elif op == OpCode.MOD:
            validate_non_zero(rhs, lhs)
            result = lhs % rhs
        elif op == OpCode.POW:
            if self._integer_mode:
                result = self._integer_power(lhs, rhs)
            else:
                result = scientific.power(lhs, rhs, self._precision)
        elif op == OpCode.AND:
            result = lhs & rhs
        elif op == OpCode.OR:
            result = lhs | rhs
        elif op == OpCode.XOR:
            result = lhs ^ rhs
        elif op == OpCode.SHIFT_LEFT:
            result = lhs << rhs
        elif op == OpCode.SHIFT_RIGHT:
            result = lhs >> rhs
        else:
            raise InvalidInputError(op, "Not a binary operator")

        result = self._finish(result, op.name.lower())
        self._history.add_binary_op(op, self._format(lhs), self._format(rhs), self._format(result))
        return result

    def _resolve(self, operand: RationalNumber, threshold: int) -> RationalNumber:
        """
        Fold pending operators whose precedence is at least ``threshold``.

        The strongest pending operator is applied first, the leftmost one
        on ties, and its result replaces its two operands.  Returns the
        new right-hand operand and leaves the rest on the stack.
        """
        values = [value for value, _ in self._stack] + [operand]
        ops = [op for _, op in self._stack]
        while ops:
            index = max(range(len(ops)), key=lambda i: (precedence_of(ops[i]), -i))
            if precedence_of(ops[index]) < threshold:
                break
            values[index : index + 2] = [self._do_operation(ops[index], values[index], values[index + 1])]
            del ops[index]
        self._stack = list(zip(values[:-1], ops))
        return values[-1]

    # -- entry ---------------------------------------------------------

    def _add_digit(self, value: int) -> None:
        max_digits = self._max_int_digits if self._integer_mode else self._precision
        if not self._input.try_add_digit(
            value, self._radix, self._integer_mode, self._max_num_string(), self._word_bits, max_digits
        ):
            return
        text = self._input.to_string(self._radix).replace(self._decimal_separator, ".")
        if not validate_numeric_string(text, MAX_EXPONENT, max_digits, self._radix):
            logger.debug("Digit rejected: %r is not a valid entry", text)
            self._input.backspace()
            return
        self._display_input()

    def _decimal_point(self) -> None:
        if self._integer_mode:
            return
        if self._input.try_add_decimal_point():
            self._display_input()

    def _exponent(self) -> None:
        if self._integer_mode or self._radix != 10:
            return
        if self._input.try_begin_exponent():
            self._display_input()

    def _backspace(self) -> None:
        if self._input.is_empty():
            return
        self._input.backspace()
        self._display_input()

    def _negate(self) -> None:
        if not self._input.is_empty():
            if self._input.try_toggle_sign(self._integer_mode, self._max_num_string()):
                self._display_input()
            return
        self._operand_token = f"{self._strings.operator(OpCode.NEGATE)}({self._operand_text()})"
        self._current = self._finish(-self._current, "negate")
        self._refresh_display()

    # -- operators -----------------------------------------------------

    def _binary_operator(self, op: OpCode) -> None:
        had_input = self._commit_input()
        symbol = self._strings.operator(op)

        if not had_input and self._last_command in BINARY_OPERATORS and self._stack:
            value, _ = self._stack.pop()
            self._stack.append((value, op))
            self._tokens[-1] = symbol
            self._update_expression()
            self._announce(symbol)
            return

        self._tokens.append(self._operand_text())
        self._operand_token = None
        threshold = precedence_of(op) if self._precedence else 0
        self._current = self._resolve(self._current, threshold)
        if len(self._stack) >= MAX_PREC_DEPTH:
            raise OverflowError("operator stack", len(self._stack))

        self._stack.append((self._current, op))
        self._no_prev_equ = True
        self._tokens.append(symbol)
        self._refresh_display()
        self._update_expression()
        self._announce(symbol)

    def _equals(self) -> None:
        self._commit_input()
        while self._paren_stack:
            self._close_paren()

        if self._stack:
            self._hold = self._current
            self._repeat_op = self._stack[-1][1]
            expression = self._tokens + [self._operand_text()]
            self._current = self._resolve(self._current, 0)
        elif not self._no_prev_equ and self._repeat_op is not None:
            expression = [
                self._format(self._current),
                self._strings.operator(self._repeat_op),
                self._format(self._hold),
            ]
            self._current = self._do_operation(self._repeat_op, self._current, self._hold)
        else:
            expression = [self._operand_text()]

        self._no_prev_equ = False
        self._tokens = []
        self._operand_token = None
        self._set_expression(" ".join(expression + [self._strings.operator(OpCode.EQUALS)]))
        self._refresh_display()

    def _percent(self) -> None:
        self._commit_input()
        if self._stack and self._stack[-1][1] in (OpCode.ADD, OpCode.SUBTRACT):
            result = self._stack[-1][0] * self._current / _HUNDRED
        else:
            result = self._current / _HUNDRED
        self._current = self._finish(result, "percent")
        self._operand_token = None
        self._refresh_display()

    def _open_paren(self) -> None:
        if len(self._paren_stack) >= MAX_PREC_DEPTH:
            raise OverflowError("parentheses", len(self._paren_stack))
        self._input.clear()
        self._paren_stack.append(self._stack)
        self._stack = []
        self._current = RationalNumber()
        self._operand_token = None
        self._paren_starts.append(len(self._tokens))
        self._tokens.append(self._strings.operator(OpCode.OPEN_PAREN))
        self._update_expression()

    def _close_paren(self) -> None:
        if not self._paren_stack:
            logger.debug("Ignoring unmatched close parenthesis")
            return
        self._commit_input()
        operand = self._operand_text()
        self._current = self._resolve(self._current, 0)
        self._stack = self._paren_stack.pop()

        start = self._paren_starts.pop()
        group = self._tokens[start:] + [operand, self._strings.operator(OpCode.CLOSE_PAREN)]
        del self._tokens[start:]
        self._operand_token = " ".join(group)
        self._set_expression(" ".join(self._tokens + [self._operand_token]))
        self._refresh_display()

    def _unary_operator(self, op: OpCode) -> None:
        self._commit_input()
        operand = self._current
        if op == OpCode.NOT:
            result = ~operand
            label = self._strings.operator(op)
        else:
            result = scientific.evaluate(op, operand, self._inverse, self._angle, self._precision)
            label = self._strings.function(op, self._inverse, self._angle.value)
        self._current = self._finish(result, label)

        self._history.add_unary_op(op, label, self._format(operand), self._format(self._current))
        self._operand_token = f"{label}({self._operand_text(operand)})"
        self._refresh_display()

    def _toggle_inverse(self) -> None:
        self._inverse = not self._inverse
        logger.debug("Inverse functions %s", "on" if self._inverse else "off")

    def _pi(self) -> None:
        self._input.clear()
        self._current = self._finish(scientific.pi(self._precision), "pi")
        self._operand_token = None
        self._refresh_display()

    # -- memory --------------------------------------------------------

    def _memory_command(self, op: OpCode) -> None:
        if op == OpCode.MEMORY_CLEAR:
            self._memory = None
            return

        if op == OpCode.MEMORY_RECALL:
            if self._memory is None:
                return
            self._input.clear()
            self._current = self._memory
            self._operand_token = None
            self._refresh_display()
            return

        self._commit_input()
        if op == OpCode.MEMORY_STORE:
            self._memory = self._current
        elif op == OpCode.MEMORY_ADD:
            if self._memory is None:
                self._memory = self._current
            else:
                self._memory = self._finish(self._memory + self._current, "memory add")
        elif op == OpCode.MEMORY_SUBTRACT:
            if self._memory is None:
                self._memory = self._finish(-self._current, "memory subtract")
            else:
                self._memory = self._finish(self._memory - self._current, "memory subtract")
        self._refresh_display()

    # -- modes ---------------------------------------------------------

    def _set_radix(self, radix: int) -> None:
        if not self._integer_mode and radix != 10:
            logger.debug("Ignoring radix %d outside integer mode", radix)
            return
        self._commit_input()
        self._radix = radix
        self._update_max_digits()
        logger.info("Radix set to %d", radix)
        self._rechop()
        self._refresh_display()

    def _set_width(self, num_width: NumWidth) -> None:
        self._commit_input()
        self._num_width = num_width
        self._word_bits = word_bit_width_from_num_width(num_width)
        self._update_max_digits()
        logger.info("Word width set to %d bits", self._word_bits)
        self._rechop()
        self._refresh_display()

    def _rechop(self) -> None:
        if not self._integer_mode:
            return
        self._current = self._chop(self._current)
        self._hold = self._chop(self._hold)
        self._stack = [(self._chop(value), op) for value, op in self._stack]
        self._paren_stack = [[(self._chop(value), op) for value, op in saved] for saved in self._paren_stack]
        if self._memory is not None:
            self._memory = self._chop(self._memory)

    def _toggle_format(self) -> None:
        self._commit_input()
        if self._number_format == NumberFormat.FLOAT:
            self._number_format = NumberFormat.SCIENTIFIC
        else:
            self._number_format = NumberFormat.FLOAT
        logger.info("Number format set to %s", self._number_format.value)
        self._refresh_display()

    # -- clearing ------------------------------------------------------

    def _clear(self) -> None:
        self._reset()
        self._history.clear()
        self._set_expression("")
        self._refresh_display()

    def _clear_entry(self) -> None:
        self._input.clear()
        self._current = RationalNumber()
        self._operand_token = None
        self._refresh_display()

    # -- display -------------------------------------------------------

    def _format(
        self,
        value: RationalNumber,
        radix: int | None = None,
        precision: int | None = None,
        group: bool = True,
    ) -> str:
        radix = radix or self._radix
        precision = precision or self._precision
        if self._integer_mode:
            if radix != 10 and value.is_negative():
                # the other radixes show the two's-complement bit pattern
                value = value + RationalNumber.from_int(1 << self._word_bits)
            text = value.to_string(radix, NumberFormat.FLOAT, max(precision, MAX_STR_LEN))
        else:
            text = value.to_string(radix, self._number_format, precision)

        text = text.replace(".", self._decimal_separator)
        if group and self._group_separator:
            text = group_digits_per_radix(text, radix, self._group_separator, self._grouping, self._decimal_separator)
        return text

    def _operand_text(self, value: RationalNumber | None = None) -> str:
        if self._operand_token is not None:
            return self._operand_token
        return self._format(self._current if value is None else value)

    def _set_primary(self, text: str, is_error: bool = False) -> None:
        self._primary_text = text
        if self._display is not None:
            self._display.set_primary_display(text, is_error)

    def _set_expression(self, text: str) -> None:
        if self._display is not None:
            self._display.set_expression_display(text)

    def _update_expression(self) -> None:
        self._set_expression(" ".join(self._tokens))

    def _announce(self, text: str) -> None:
        if self._display is not None:
            self._display.announce_operator(text)

    def _display_input(self) -> None:
        text = self._input.to_string(self._radix) or "0"
        if self._group_separator:
            text = group_digits_per_radix(text, self._radix, self._group_separator, self._grouping, self._decimal_separator)
        self._set_primary(text)

    def _refresh_display(self) -> None:
        if not self._input.is_empty():
            self._display_input()
        else:
            self._set_primary(self._format(self._current))

    def _display_error(self, exc: CalculatorError) -> None:
        logger.warning("Calculation error: %s", exc)
        self._error = True
        self._input.clear()
        self._set_primary(self._strings.error(exc.code), is_error=True)

    def __repr__(self) -> str:
        return (
            f"CalculatorEngine(current={self._current!r}, radix={self._radix}, "
            f"integer_mode={self._integer_mode}, error={self._error})"
        )
