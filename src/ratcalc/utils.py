"""Stateless helpers shared by the input accumulator and the engine."""

from __future__ import annotations

from ratcalc.constants import NumWidth, RadixType
from ratcalc.operations import digit_value, limbs_to_digits
from ratcalc.rational import RationalNumber

_RADIX_BY_TYPE = {
    RadixType.DECIMAL: 10,
    RadixType.HEX: 16,
    RadixType.OCTAL: 8,
    RadixType.BINARY: 2,
}

_TYPE_BY_RADIX = {radix: radix_type for radix_type, radix in _RADIX_BY_TYPE.items()}

_BITS_BY_WIDTH = {
    NumWidth.QWORD: 64,
    NumWidth.DWORD: 32,
    NumWidth.WORD: 16,
    NumWidth.BYTE: 8,
}

# Programmer radixes group by nibble or octal digit regardless of locale
_RADIX_GROUPING = {2: [4], 8: [3], 16: [4]}

DEFAULT_GROUPING = [3]


def radix_from_radix_type(radix_type: RadixType) -> int:
    return _RADIX_BY_TYPE[radix_type]


def radix_type_from_radix(radix: int) -> RadixType:
    return _TYPE_BY_RADIX.get(radix, RadixType.DECIMAL)


def word_bit_width_from_num_width(num_width: NumWidth) -> int:
    return _BITS_BY_WIDTH[num_width]


def max_value_string(word_bit_width: int, radix: int) -> str:
    """Largest unsigned value of the word width, written in ``radix``."""
    value = RationalNumber.from_int((1 << word_bit_width) - 1)
    return limbs_to_digits(value.numerator.mantissa, radix)


def group_digits(
    separator: str,
    grouping: list[int],
    display: str,
    is_negative: bool = False,
    decimal_symbol: str = ".",
) -> str:
    """
    Insert ``separator`` into the integer portion of ``display``.

    Group sizes are taken from ``grouping`` cyclically, starting at the
    digit nearest the decimal point.  The fraction and any exponent
    suffix are left untouched.

    Example:
        >>> group_digits(",", [3], "1234567.891")
        '1,234,567.891'
    """
    if not display or not separator:
        return display

    sign = ""
    if display.startswith("-"):
        display = display[1:]
        sign = "-"
    elif is_negative:
        sign = "-"

    end = len(display)
    for marker in (decimal_symbol, "e"):
        position = display.find(marker)
        if position >= 0:
            end = min(end, position)
    integer, suffix = display[:end], display[end:]

    sizes = [size for size in grouping if size > 0] or DEFAULT_GROUPING
    groups = []
    position = len(integer)
    index = 0
    while position > 0:
        size = sizes[index % len(sizes)]
        groups.append(integer[max(0, position - size) : position])
        position -= size
        index += 1

    return sign + separator.join(reversed(groups)) + suffix


def group_digits_per_radix(
    display: str,
    radix: int,
    separator: str,
    decimal_grouping: list[int],
    decimal_symbol: str = ".",
) -> str:
    """Group ``display`` with the sizes conventional for ``radix``."""
    grouping = _RADIX_GROUPING.get(radix, decimal_grouping)
    return group_digits(separator, grouping, display, decimal_symbol=decimal_symbol)


def digit_grouping_string_to_grouping_vector(grouping_string: str) -> list[int]:
    """
    Parse a ``;``-separated grouping string such as ``"3;2"``.

    Entries that are not positive integers are skipped; when nothing
    usable remains the default ``[3]`` is returned.
    """
    result = []
    for part in grouping_string.split(";"):
        part = part.strip()
        if part.isdecimal() and int(part) > 0:
            result.append(int(part))
    return result or list(DEFAULT_GROUPING)


def validate_numeric_string(number: str, max_exponent: int, max_mantissa: int, radix: int) -> bool:
    """
    Check a numeric string such as ``-12.5e-3`` against entry limits.

    Returns:
        True when the string is acceptable, False when it is empty, has
        too many mantissa digits, an exponent beyond ``max_exponent`` in
        magnitude, a misplaced sign, or a digit outside ``radix``.
    """
    if not number:
        return False

    mantissa, exponent = number, ""
    # 'e' is a digit from radix 15 upwards and cannot mark an exponent there
    if radix < 15:
        position = number.lower().find("e")
        if position >= 0:
            mantissa, exponent = number[:position], number[position + 1 :]
            if not exponent.lstrip("+-").isdecimal() or len(exponent) - len(exponent.lstrip("+-")) > 1:
                return False
            if abs(int(exponent)) > max_exponent:
                return False

    if "." in mantissa:
        position = mantissa.index(".")
        mantissa = mantissa[:position] + mantissa[position + 1 :]

    digits = 0
    for index, char in enumerate(mantissa):
        if char in "+-":
            if index > 0:
                return False
            continue
        value = digit_value(char)
        if not 0 <= value < radix:
            return False
        digits += 1

    return 0 < digits <= max_mantissa


def truncate_for_integer_mode(value: RationalNumber) -> RationalNumber:
    """Return integral values unchanged, otherwise truncate toward zero."""
    if value.is_integer():
        return value
    return value.trunc()
