"""Unit tests for the stateless numeric helpers."""

import pytest

from ratcalc import NumWidth, RadixType, RationalNumber
from ratcalc.utils import (
    digit_grouping_string_to_grouping_vector,
    group_digits,
    group_digits_per_radix,
    max_value_string,
    radix_from_radix_type,
    radix_type_from_radix,
    truncate_for_integer_mode,
    validate_numeric_string,
    word_bit_width_from_num_width,
)


class TestLookups:
    """Tests for the radix and width tables."""

    @pytest.mark.parametrize(
        "radix_type, radix",
        [
            (RadixType.DECIMAL, 10),
            (RadixType.HEX, 16),
            (RadixType.OCTAL, 8),
            (RadixType.BINARY, 2),
        ],
    )
    def test_radix_round_trip(self, radix_type, radix):
        assert radix_from_radix_type(radix_type) == radix
        assert radix_type_from_radix(radix) == radix_type

    def test_unknown_radix_defaults_to_decimal(self):
        assert radix_type_from_radix(7) == RadixType.DECIMAL

    @pytest.mark.parametrize(
        "width, bits",
        [(NumWidth.QWORD, 64), (NumWidth.DWORD, 32), (NumWidth.WORD, 16), (NumWidth.BYTE, 8)],
    )
    def test_word_bit_width(self, width, bits):
        assert word_bit_width_from_num_width(width) == bits

    def test_max_value_string(self):
        assert max_value_string(8, 10) == "255"
        assert max_value_string(16, 16) == "FFFF"
        assert max_value_string(64, 10) == "18446744073709551615"
        assert max_value_string(8, 2) == "11111111"


class TestGroupDigits:
    """Tests for digit grouping."""

    def test_thousands(self):
        assert group_digits(",", [3], "1234567") == "1,234,567"

    def test_fraction_untouched(self):
        assert group_digits(",", [3], "1234567.891") == "1,234,567.891"

    def test_exponent_untouched(self):
        assert group_digits(",", [3], "1234.5e+10") == "1,234.5e+10"

    def test_negative(self):
        assert group_digits(",", [3], "-1234") == "-1,234"

    def test_is_negative_flag_adds_sign(self):
        assert group_digits(",", [3], "1234", is_negative=True) == "-1,234"

    def test_cyclic_group_sizes(self):
        assert group_digits(",", [3, 2], "123456789") == "1,234,56,789"

    def test_short_number_unchanged(self):
        assert group_digits(",", [3], "123") == "123"

    def test_empty_separator_is_noop(self):
        assert group_digits("", [3], "1234567") == "1234567"

    def test_custom_decimal_symbol(self):
        assert group_digits(".", [3], "1234567,5", decimal_symbol=",") == "1.234.567,5"

    def test_per_radix_grouping(self):
        assert group_digits_per_radix("11111111", 2, " ", [3]) == "1111 1111"
        assert group_digits_per_radix("FFFFFF", 16, " ", [3]) == "FF FFFF"
        assert group_digits_per_radix("7777", 8, " ", [2]) == "7 777"
        assert group_digits_per_radix("1234567", 10, ",", [3]) == "1,234,567"


class TestGroupingString:
    """Tests for grouping-string parsing."""

    def test_single(self):
        assert digit_grouping_string_to_grouping_vector("3") == [3]

    def test_multiple(self):
        assert digit_grouping_string_to_grouping_vector("3;2") == [3, 2]

    def test_invalid_entries_skipped(self):
        assert digit_grouping_string_to_grouping_vector("3;x;0;2") == [3, 2]

    def test_empty_defaults(self):
        assert digit_grouping_string_to_grouping_vector("") == [3]


class TestValidateNumericString:
    """Tests for validate_numeric_string."""

    @pytest.mark.parametrize(
        "number, radix",
        [
            ("123", 10),
            ("-12.5", 10),
            ("1.5e+10", 10),
            ("1e-9999", 10),
            ("FF", 16),
            ("1E5", 16),
            ("101", 2),
        ],
    )
    def test_valid(self, number, radix):
        assert validate_numeric_string(number, 9999, 32, radix)

    @pytest.mark.parametrize(
        "number, radix",
        [
            ("", 10),
            ("12a", 10),
            ("1e10000", 10),
            ("1e+", 10),
            ("1-2", 10),
            ("102", 2),
            ("1" * 33, 10),
            ("-", 10),
        ],
    )
    def test_invalid(self, number, radix):
        assert not validate_numeric_string(number, 9999, 32, radix)

    def test_sign_not_counted_as_digit(self):
        assert validate_numeric_string("-" + "1" * 32, 9999, 32, 10)


class TestTruncate:
    """Tests for truncate_for_integer_mode."""

    def test_integer_unchanged(self):
        assert truncate_for_integer_mode(RationalNumber.from_int(-5)) == -5

    def test_truncates_toward_zero(self):
        assert truncate_for_integer_mode(RationalNumber.from_ints(-7, 2)) == -3
        assert truncate_for_integer_mode(RationalNumber.from_ints(7, 2)) == 3
