"""
Tests for processing/upc_normalizer.py

Covers: whitespace/control-character stripping, OCR look-alike substitution,
non-digit stripping, leading-zero stripping, the "0" fallback, totality over
printable ASCII, and idempotence.
"""

import math
import string

import pytest

from processing.upc_normalizer import normalize_upc, strip_check_digit


# ═══════════════════════════════════════════════════════════════════════════
# Basic cleaning
# ═══════════════════════════════════════════════════════════════════════════

class TestBasicCleaning:
    def test_plain_digits_unchanged(self):
        assert normalize_upc("12345") == "12345"

    def test_whitespace_trimmed(self):
        assert normalize_upc("  12345  ") == "12345"

    def test_carriage_return_stripped(self):
        """Scanners in keyboard mode often terminate with CR/LF."""
        assert normalize_upc("012345\r\n") == "12345"

    def test_leading_zeros_stripped(self):
        assert normalize_upc("000071234") == "71234"

    def test_separators_stripped(self):
        assert normalize_upc("0-12345-67890-5") == "12345678905"

    def test_internal_spaces_stripped(self):
        assert normalize_upc("12 34 5") == "12345"

    @pytest.mark.parametrize("raw, expected", [
        ("１２３", "0"),
        ("١٢٣45", "45"),
        ("9８7", "97"),
    ])
    def test_non_ascii_digits_dropped(self, raw, expected):
        result = normalize_upc(raw)
        assert result == expected
        assert result.isascii()


# ═══════════════════════════════════════════════════════════════════════════
# OCR look-alike substitution
# ═══════════════════════════════════════════════════════════════════════════

class TestOcrSubstitution:
    @pytest.mark.parametrize("raw, expected", [
        ("1O5", "105"),
        ("1Q5", "105"),
        ("I23", "123"),
        ("L23", "123"),
        ("|23", "123"),
        ("S5", "55"),
        ("$5", "55"),
        ("B8", "88"),
        ("Z2", "22"),
        ("G6", "66"),
        ("T7", "77"),
    ])
    def test_uppercase_lookalikes(self, raw, expected):
        assert normalize_upc(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("1o5", "105"),
        ("i23", "123"),
        ("l23", "123"),
        ("s5", "55"),
        ("b8", "88"),
        ("z2", "22"),
        ("g6", "66"),
        ("t7", "77"),
    ])
    def test_lowercase_lookalikes(self, raw, expected):
        assert normalize_upc(raw) == expected

    def test_substitution_runs_before_zero_stripping(self):
        """A leading 'O' becomes a zero and is then stripped."""
        assert normalize_upc("O0O999") == "999"

    def test_other_letters_dropped(self):
        assert normalize_upc("UPC: 4A5") == "45"


# ═══════════════════════════════════════════════════════════════════════════
# Empty / missing input
# ═══════════════════════════════════════════════════════════════════════════

class TestEmptyInput:
    def test_empty_string(self):
        assert normalize_upc("") == "0"

    def test_whitespace_only(self):
        assert normalize_upc("   \r\n") == "0"

    def test_all_zeros(self):
        assert normalize_upc("0000") == "0"

    def test_no_digits(self):
        assert normalize_upc("--**--") == "0"

    def test_none(self):
        assert normalize_upc(None) == "0"

    def test_nan(self):
        assert normalize_upc(math.nan) == "0"


class TestNonStringInput:
    def test_integer(self):
        assert normalize_upc(12345) == "12345"

    def test_integral_float(self):
        """Spreadsheet exports can turn codes into 12345.0."""
        assert normalize_upc(12345.0) == "12345"


# ═══════════════════════════════════════════════════════════════════════════
# Totality & idempotence
# ═══════════════════════════════════════════════════════════════════════════

_SAMPLES = [
    "",
    "0",
    "00012345",
    " 0 7 1 2 \r",
    "O0O999",
    "ISBN 978-0-306-40615-7",
    "$$$",
    string.printable,
    "|||",
]


class TestProperties:
    @pytest.mark.parametrize("char", list(string.printable))
    def test_total_for_every_printable_char(self, char):
        result = normalize_upc(char)
        assert result
        assert result.isdigit()

    @pytest.mark.parametrize("raw", _SAMPLES)
    def test_result_is_canonical(self, raw):
        result = normalize_upc(raw)
        assert result.isdigit()
        assert result == "0" or not result.startswith("0")

    @pytest.mark.parametrize("raw", _SAMPLES)
    def test_idempotent(self, raw):
        once = normalize_upc(raw)
        assert normalize_upc(once) == once


class TestStripCheckDigit:
    def test_drops_last_digit(self):
        assert strip_check_digit("123456") == "12345"

    def test_single_digit_becomes_empty(self):
        assert strip_check_digit("7") == ""
