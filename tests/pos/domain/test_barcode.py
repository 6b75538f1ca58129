"""Tests for EAN-13 barcode generation."""

import random

from pos.catalogue.barcode import ean13_check_digit, is_valid_ean13, random_ean13, to_ean13


class TestCheckDigit:
    def test_known_code(self):
        assert ean13_check_digit("400638133393") == 1

    def test_full_code_is_valid(self):
        assert is_valid_ean13("4006381333931")

    def test_wrong_check_digit_is_invalid(self):
        assert not is_valid_ean13("4006381333932")


class TestGeneration:
    def test_to_ean13_pads_and_appends_check_digit(self):
        code = to_ean13("42")
        assert len(code) == 13
        assert is_valid_ean13(code)

    def test_random_codes_are_valid(self):
        rng = random.Random(7)
        for _ in range(20):
            code = random_ean13(rng)
            assert len(code) == 13
            assert code.isdigit()
            assert is_valid_ean13(code)

    def test_non_numeric_is_invalid(self):
        assert not is_valid_ean13("ABCDEFGHIJKLM")
        assert not is_valid_ean13("123")
