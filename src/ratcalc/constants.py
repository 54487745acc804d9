"""Command codes, mode enums and engine limits."""

from __future__ import annotations

from enum import Enum, IntEnum

# Maximum depth of the pending-operator and parenthesis stacks
MAX_PREC_DEPTH = 25

# Enough room for a quadword binary number (64) plus digit separators (20)
MAX_STR_LEN = 84

# Largest decimal exponent accepted during entry
MAX_EXPONENT = 9999

# Results beyond roughly 10**10000 are reported as overflow
MAX_MAGNITUDE_BITS = 33220

# Default significant digits for RationalNumber.to_string
RATIONAL_PRECISION = 128

# Default significant digits shown by the engine
DISPLAY_PRECISION = 32


class NumWidth(Enum):
    """Word width used in integer mode."""

    QWORD = "qword"
    DWORD = "dword"
    WORD = "word"
    BYTE = "byte"


class RadixType(Enum):
    """Display and entry radix."""

    DECIMAL = "decimal"
    HEX = "hex"
    OCTAL = "octal"
    BINARY = "binary"


class AngleType(Enum):
    """Unit for trigonometric arguments and results."""

    DEGREES = "degrees"
    RADIANS = "radians"
    GRADIANS = "gradians"


class NumberFormat(Enum):
    """Rendering style for non-integer results."""

    FLOAT = "float"
    SCIENTIFIC = "scientific"
    ENGINEERING = "engineering"


class ErrorCode(IntEnum):
    NO_ERROR = 0
    DIVIDE_BY_ZERO = 1
    DOMAIN_ERROR = 2
    OVERFLOW = 3
    INVALID_INPUT = 4
    MEMORY_ERROR = 5


class OpCode(IntEnum):
    """Commands accepted by ``CalculatorEngine.process_command``."""

    # Basic operations
    ADD = 0x01
    SUBTRACT = 0x02
    MULTIPLY = 0x03
    DIVIDE = 0x04
    MOD = 0x05
    PERCENT = 0x06
    EQUALS = 0x07
    CLEAR = 0x08
    CLEAR_ENTRY = 0x09
    BACKSPACE = 0x0A
    NEGATE = 0x0B
    DECIMAL_SEPARATOR = 0x0C
    EXPONENT = 0x0D

    # Numeric input
    DIGIT_0 = 0x10
    DIGIT_1 = 0x11
    DIGIT_2 = 0x12
    DIGIT_3 = 0x13
    DIGIT_4 = 0x14
    DIGIT_5 = 0x15
    DIGIT_6 = 0x16
    DIGIT_7 = 0x17
    DIGIT_8 = 0x18
    DIGIT_9 = 0x19
    DIGIT_A = 0x1A
    DIGIT_B = 0x1B
    DIGIT_C = 0x1C
    DIGIT_D = 0x1D
    DIGIT_E = 0x1E
    DIGIT_F = 0x1F

    # Scientific functions
    SIN = 0x20
    COS = 0x21
    TAN = 0x22
    SINH = 0x23
    COSH = 0x24
    TANH = 0x25
    INV = 0x26
    LN = 0x27
    LOG = 0x28
    SQRT = 0x29
    SQUARE = 0x2A
    CUBEROOT = 0x2B
    CUBE = 0x2C
    POW = 0x2D
    POW10 = 0x2E
    PI = 0x2F

    # Memory operations
    MEMORY_STORE = 0x30
    MEMORY_RECALL = 0x31
    MEMORY_CLEAR = 0x32
    MEMORY_ADD = 0x33
    MEMORY_SUBTRACT = 0x34

    # Parentheses
    OPEN_PAREN = 0x40
    CLOSE_PAREN = 0x41

    # Bitwise operations
    AND = 0x50
    OR = 0x51
    XOR = 0x52
    NOT = 0x53
    SHIFT_LEFT = 0x54
    SHIFT_RIGHT = 0x55

    # Angle and radix settings
    DEGREES = 0x60
    RADIANS = 0x61
    GRADIANS = 0x62
    DECIMAL = 0x63
    HEX = 0x64
    OCTAL = 0x65
    BINARY = 0x66

    # Word size
    QWORD = 0x70
    DWORD = 0x71
    WORD = 0x72
    BYTE = 0x73

    # Display format toggle (float <-> scientific)
    FE = 0x80

    @classmethod
    def digit(cls, value: int) -> OpCode:
        """Return the digit command for ``value`` (0-15)."""
        if not 0 <= value <= 15:
            raise ValueError(f"digit out of range: {value}")
        return cls(cls.DIGIT_0 + value)

    @property
    def digit_value(self) -> int | None:
        if OpCode.DIGIT_0 <= self <= OpCode.DIGIT_F:
            return self - OpCode.DIGIT_0
        return None


BINARY_OPERATORS = frozenset(
    {
        OpCode.ADD,
        OpCode.SUBTRACT,
        OpCode.MULTIPLY,
        OpCode.DIVIDE,
        OpCode.MOD,
        OpCode.POW,
        OpCode.AND,
        OpCode.OR,
        OpCode.XOR,
        OpCode.SHIFT_LEFT,
        OpCode.SHIFT_RIGHT,
    }
)

UNARY_OPERATORS = frozenset(
    {
        OpCode.SIN,
        OpCode.COS,
        OpCode.TAN,
        OpCode.SINH,
        OpCode.COSH,
        OpCode.TANH,
        OpCode.LN,
        OpCode.LOG,
        OpCode.SQRT,
        OpCode.SQUARE,
        OpCode.CUBEROOT,
        OpCode.CUBE,
        OpCode.POW10,
        OpCode.NOT,
    }
)

MEMORY_COMMANDS = frozenset(
    {
        OpCode.MEMORY_STORE,
        OpCode.MEMORY_RECALL,
        OpCode.MEMORY_CLEAR,
        OpCode.MEMORY_ADD,
        OpCode.MEMORY_SUBTRACT,
    }
)

ANGLE_COMMANDS = {
    OpCode.DEGREES: AngleType.DEGREES,
    OpCode.RADIANS: AngleType.RADIANS,
    OpCode.GRADIANS: AngleType.GRADIANS,
}

RADIX_COMMANDS = {
    OpCode.DECIMAL: RadixType.DECIMAL,
    OpCode.HEX: RadixType.HEX,
    OpCode.OCTAL: RadixType.OCTAL,
    OpCode.BINARY: RadixType.BINARY,
}

WIDTH_COMMANDS = {
    OpCode.QWORD: NumWidth.QWORD,
    OpCode.DWORD: NumWidth.DWORD,
    OpCode.WORD: NumWidth.WORD,
    OpCode.BYTE: NumWidth.BYTE,
}

_PRECEDENCE = {
    OpCode.ADD: 1,
    OpCode.SUBTRACT: 1,
    OpCode.MULTIPLY: 2,
    OpCode.DIVIDE: 2,
    OpCode.MOD: 2,
    OpCode.POW: 3,
}


def precedence_of(op: OpCode) -> int:
    """Binding strength of a binary operator; 0 for everything else."""
    return _PRECEDENCE.get(op, 0)
