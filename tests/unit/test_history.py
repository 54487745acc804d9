"""Unit tests for strings, history collection and configuration."""

import pytest

from ratcalc import (
    DefaultResourceProvider,
    EngineConfig,
    EngineStrings,
    ErrorCode,
    ExpressionCommand,
    HistoryCollector,
    InvalidInputError,
    OpCode,
    RadixType,
)


class FrenchResources(DefaultResourceProvider):
    def get_string(self, resource_id: str) -> str:
        return {
            "op_multiply": "fois",
            "inv_ln": "exp",
            "error_overflow": "Dépassement",
        }.get(resource_id, "")


class TestEngineStrings:
    """Tests for the injected string table."""

    def test_defaults(self):
        strings = EngineStrings()
        assert strings.operator(OpCode.ADD) == "+"
        assert strings.operator(OpCode.MULTIPLY) == "×"
        assert strings.error(ErrorCode.DIVIDE_BY_ZERO) == "Cannot divide by zero"

    def test_provider_overrides(self):
        strings = EngineStrings(FrenchResources())
        assert strings.operator(OpCode.MULTIPLY) == "fois"
        assert strings.operator(OpCode.ADD) == "+"
        assert strings.error(ErrorCode.OVERFLOW) == "Dépassement"
        assert strings.function(OpCode.LN, inverse=True) == "exp"

    def test_tables_are_per_instance(self):
        EngineStrings(FrenchResources())
        assert EngineStrings().operator(OpCode.MULTIPLY) == "×"

    def test_trig_labels_carry_angle_unit(self):
        strings = EngineStrings()
        assert strings.function(OpCode.SIN, angle="degrees") == "sin(deg)"
        assert strings.function(OpCode.COS, inverse=True, angle="radians") == "arccos(rad)"

    def test_non_trig_labels_ignore_angle(self):
        assert EngineStrings().function(OpCode.SINH, inverse=True, angle="degrees") == "arcsinh"

    def test_named_inverses(self):
        strings = EngineStrings()
        assert strings.function(OpCode.LN, inverse=True) == "e^"
        assert strings.function(OpCode.SQRT, inverse=True) == "sqr"


class TestHistoryCollector:
    """Tests for HistoryCollector."""

    def test_binary_op(self, history):
        collector = HistoryCollector(history)
        collector.add_binary_op(OpCode.ADD, "2", "3", "5")
        assert history.items == [("2 + 3", "5")]
        assert collector.commands == [ExpressionCommand(OpCode.ADD, "2 + 3", "5")]

    def test_unary_op(self, history):
        collector = HistoryCollector(history)
        collector.add_unary_op(OpCode.SQRT, "√", "9", "3")
        assert history.items == [("√(9)", "3")]

    def test_uses_injected_strings(self, history):
        collector = HistoryCollector(history, EngineStrings(FrenchResources()))
        collector.add_binary_op(OpCode.MULTIPLY, "2", "3", "6")
        assert history.items == [("2 fois 3", "6")]

    def test_clear(self, history):
        collector = HistoryCollector(history)
        collector.add_binary_op(OpCode.ADD, "2", "3", "5")
        collector.clear()
        assert collector.commands == []
        assert history.cleared == 1

    def test_works_without_sink(self):
        collector = HistoryCollector()
        collector.add_binary_op(OpCode.SUBTRACT, "5", "3", "2")
        assert str(collector.commands[0]) == "5 - 3 = 2"

    def test_commands_is_a_copy(self):
        collector = HistoryCollector()
        collector.add_binary_op(OpCode.ADD, "1", "1", "2")
        collector.commands.clear()
        assert len(collector.commands) == 1


class TestEngineConfig:
    """Tests for EngineConfig validation."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.precedence
        assert not config.integer_mode
        assert config.precision == 32

    def test_frozen(self):
        with pytest.raises(AttributeError):
            EngineConfig().precision = 10  # type: ignore

    @pytest.mark.parametrize("precision", [0, -1, 85, True, "32"])
    def test_rejects_bad_precision(self, precision):
        with pytest.raises(InvalidInputError):
            EngineConfig(precision=precision)

    def test_rejects_wrong_enum_type(self):
        with pytest.raises(InvalidInputError):
            EngineConfig(radix="hex")  # type: ignore

    def test_hex_requires_integer_mode(self):
        with pytest.raises(InvalidInputError):
            EngineConfig(radix=RadixType.HEX)
        assert EngineConfig(integer_mode=True, radix=RadixType.HEX).radix == RadixType.HEX
