"""Unit tests for InputAccumulator."""

import pytest

from ratcalc import InputAccumulator, RationalNumber

R = RationalNumber.from_ints


def typed(digits, radix=10, integer_mode=False, max_num_str="", word_bits=64, max_digits=32):
    accumulator = InputAccumulator()
    for digit in digits:
        accumulator.try_add_digit(digit, radix, integer_mode, max_num_str, word_bits, max_digits)
    return accumulator


class TestDigits:
    """Tests for digit entry."""

    def test_starts_empty(self):
        accumulator = InputAccumulator()
        assert accumulator.is_empty()
        assert accumulator.to_string(10) == ""

    def test_digits_append(self):
        assert typed([1, 2, 3]).to_string(10) == "123"

    def test_leading_zero_replaced(self):
        assert typed([0, 0, 7]).to_string(10) == "7"

    def test_digit_outside_radix_rejected(self):
        accumulator = InputAccumulator()
        assert not accumulator.try_add_digit(2, 2, False, "", 64, 32)
        assert accumulator.is_empty()

    def test_hex_digits(self):
        assert typed([0xA, 0xF], radix=16).to_string(16) == "AF"

    def test_max_digits_enforced(self):
        accumulator = typed([1, 2, 3], max_digits=3)
        assert not accumulator.try_add_digit(4, 10, False, "", 64, 3)
        assert accumulator.to_string(10) == "123"

    def test_integer_mode_limit(self):
        accumulator = typed([2, 5], integer_mode=True, max_num_str="255", word_bits=8)
        assert accumulator.try_add_digit(5, 10, True, "255", 8, 3)
        assert accumulator.to_string(10) == "255"

    def test_integer_mode_rejects_over_limit(self):
        accumulator = typed([2, 5], integer_mode=True, max_num_str="255", word_bits=8)
        assert not accumulator.try_add_digit(6, 10, True, "255", 8, 3)
        assert accumulator.to_string(10) == "25"

    def test_integer_mode_default_limit_from_width(self):
        accumulator = typed([0xF, 0xF], radix=16, integer_mode=True, word_bits=8)
        assert not accumulator.try_add_digit(0, 16, True, "", 8, 8)
        assert accumulator.to_string(16) == "FF"


class TestDecimalPoint:
    """Tests for decimal point entry."""

    def test_decimal_point_on_empty_inserts_zero(self):
        accumulator = InputAccumulator()
        assert accumulator.try_add_decimal_point()
        assert accumulator.to_string(10) == "0."

    def test_only_one_decimal_point(self):
        accumulator = typed([1])
        assert accumulator.try_add_decimal_point()
        assert not accumulator.try_add_decimal_point()

    def test_fraction_digits(self):
        accumulator = typed([1])
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(0, 10, False, "", 64, 32)
        accumulator.try_add_digit(5, 10, False, "", 64, 32)
        assert accumulator.to_string(10) == "1.05"
        assert accumulator.has_decimal_point()

    def test_zero_after_point_is_kept(self):
        accumulator = InputAccumulator()
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(0, 10, False, "", 64, 32)
        assert accumulator.to_string(10) == "0.0"

    def test_custom_decimal_symbol(self):
        accumulator = InputAccumulator(decimal_symbol=",")
        accumulator.try_add_digit(3, 10, False, "", 64, 32)
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(5, 10, False, "", 64, 32)
        assert accumulator.to_string(10) == "3,5"


class TestExponent:
    """Tests for exponent entry."""

    def test_exponent_on_empty_base_uses_one(self):
        accumulator = InputAccumulator()
        assert accumulator.try_begin_exponent()
        assert accumulator.to_string(10) == "1e+0"

    def test_exponent_digits(self):
        accumulator = typed([2])
        accumulator.try_begin_exponent()
        accumulator.try_add_digit(1, 10, False, "", 64, 32)
        accumulator.try_add_digit(2, 10, False, "", 64, 32)
        assert accumulator.to_string(10) == "2e+12"
        assert accumulator.has_exponent()

    def test_toggle_sign_applies_to_exponent(self):
        accumulator = typed([2])
        accumulator.try_begin_exponent()
        accumulator.try_add_digit(3, 10, False, "", 64, 32)
        accumulator.try_toggle_sign(False, "")
        assert accumulator.to_string(10) == "2e-3"

    def test_no_decimal_point_in_exponent(self):
        accumulator = typed([2])
        accumulator.try_begin_exponent()
        assert not accumulator.try_add_decimal_point()

    def test_only_one_exponent(self):
        accumulator = typed([2])
        assert accumulator.try_begin_exponent()
        assert not accumulator.try_begin_exponent()


class TestSign:
    """Tests for sign toggling."""

    def test_toggle(self):
        accumulator = typed([4])
        assert accumulator.try_toggle_sign(False, "")
        assert accumulator.to_string(10) == "-4"
        assert accumulator.try_toggle_sign(False, "")
        assert accumulator.to_string(10) == "4"

    def test_integer_mode_rejects_over_limit(self):
        accumulator = typed([3, 0, 0])
        assert not accumulator.try_toggle_sign(True, "255")
        assert accumulator.to_string(10) == "300"


class TestBackspace:
    """Tests for backspace."""

    def test_removes_last_digit(self):
        accumulator = typed([1, 2])
        accumulator.backspace()
        assert accumulator.to_string(10) == "1"

    def test_removes_decimal_point(self):
        accumulator = typed([1])
        accumulator.try_add_decimal_point()
        accumulator.backspace()
        assert not accumulator.has_decimal_point()
        assert accumulator.to_string(10) == "1"

    def test_removes_fraction_digit_before_point(self):
        accumulator = typed([1])
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(5, 10, False, "", 64, 32)
        accumulator.backspace()
        assert accumulator.to_string(10) == "1."

    def test_exponent_digit_then_marker(self):
        accumulator = typed([2])
        accumulator.try_begin_exponent()
        accumulator.try_add_digit(7, 10, False, "", 64, 32)
        accumulator.backspace()
        assert accumulator.to_string(10) == "2e+0"
        accumulator.backspace()
        assert accumulator.to_string(10) == "2"

    def test_emptying_resets_sign(self):
        accumulator = typed([5])
        accumulator.try_toggle_sign(False, "")
        accumulator.backspace()
        assert accumulator.is_empty()
        accumulator.try_add_digit(6, 10, False, "", 64, 32)
        assert accumulator.to_string(10) == "6"

    def test_clear(self):
        accumulator = typed([1, 2])
        accumulator.try_add_decimal_point()
        accumulator.clear()
        assert accumulator.is_empty()
        assert not accumulator.has_decimal_point()


class TestCommit:
    """Tests for converting typed input to a RationalNumber."""

    def test_empty_is_zero(self):
        assert InputAccumulator().commit(10, 32).is_zero()

    def test_integer(self):
        assert typed([4, 2]).commit(10, 32) == 42

    def test_fraction(self):
        accumulator = typed([1, 2])
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(5, 10, False, "", 64, 32)
        assert accumulator.commit(10, 32) == R(25, 2)

    def test_negative_exponent(self):
        accumulator = typed([1])
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(5, 10, False, "", 64, 32)
        accumulator.try_begin_exponent()
        accumulator.try_add_digit(3, 10, False, "", 64, 32)
        accumulator.try_toggle_sign(False, "")
        assert accumulator.commit(10, 32) == R(15, 10000)

    def test_positive_exponent(self):
        accumulator = typed([2])
        accumulator.try_begin_exponent()
        accumulator.try_add_digit(3, 10, False, "", 64, 32)
        assert accumulator.commit(10, 32) == 2000

    def test_negative(self):
        accumulator = typed([7])
        accumulator.try_toggle_sign(False, "")
        assert accumulator.commit(10, 32) == -7

    def test_hex(self):
        assert typed([0xF, 0xF], radix=16).commit(16, 32) == 255

    def test_binary_fraction(self):
        accumulator = typed([1], radix=2)
        accumulator.try_add_decimal_point()
        accumulator.try_add_digit(1, 2, False, "", 64, 32)
        assert accumulator.commit(2, 32) == R(3, 2)

    @pytest.mark.parametrize("precision, expected", [(3, 123000), (6, 123456), (1, 100000)])
    def test_digits_beyond_precision_become_zero(self, precision, expected):
        assert typed([1, 2, 3, 4, 5, 6]).commit(10, precision) == expected

    def test_precision_ignores_leading_zeros(self):
        accumulator = InputAccumulator()
        accumulator.try_add_decimal_point()
        for digit in (0, 0, 1, 2, 3):
            accumulator.try_add_digit(digit, 10, False, "", 64, 32)
        assert accumulator.commit(10, 2) == R(12, 10000)
