"""
tests/test_format.py - Tests for display formatting.
"""
import pytest

from cosmic_paperclip.format import format_number, format_rate
from cosmic_paperclip.numbers import BigNum, INFINITY


class TestFormatNumber:
    @pytest.mark.parametrize("value,expected", [
        (0, '0'),
        (12345, '12,345'),
        (999_999.4, '999,999'),
        (1_500_000, '1.5 M'),
        (1_000_000, '1 M'),
        (2_000_000_000, '2 B'),
        (BigNum('3.0234e12'), '3.02 T'),
        (BigNum('5.972e27'), '5.97e+27'),
    ])
    def test_scales(self, value, expected):
        assert format_number(value) == expected

    def test_infinite(self):
        assert format_number(INFINITY) == '∞'

    def test_beyond_float_range(self):
        assert format_number(BigNum('1e400')) == '1.00e+400'


class TestFormatRate:
    def test_suffix(self):
        assert format_rate(1.2) == '1/s'
        assert format_rate(2_500_000) == '2.5 M/s'
