"""
tests/test_numbers.py - Tests for the extended-precision number type.
"""
import pytest

from cosmic_paperclip.numbers import BigNum, D, INFINITY, NEG_INFINITY, ONE, ZERO, big_max, big_min


class TestMagnitude:
    """Values far beyond float range stay ordered and finite."""

    def test_product_beyond_float_range(self):
        huge = BigNum('1e300').times('1e300')
        assert huge.is_finite()
        assert huge.to_string() == '1E+600'
        assert huge.gt(BigNum('1e599'))

    def test_to_float_degrades_to_inf(self):
        assert BigNum('1e600').to_float() == float('inf')
        assert BigNum('2.5').to_float() == 2.5

    def test_power(self):
        assert BigNum(10).pow(40) == BigNum('1e40')
        assert BigNum(2) ** 10 == 1024


class TestDivision:
    def test_division_by_zero_is_infinite(self):
        assert BigNum(5).div(0) == INFINITY
        assert not BigNum(5).div(0).is_finite()

    def test_negative_division_by_zero(self):
        assert BigNum(-5).div(ZERO) == NEG_INFINITY

    def test_zero_over_zero(self):
        assert ZERO.div(ZERO) == INFINITY

    def test_regular_division(self):
        assert BigNum(1).div(4) == BigNum('0.25')


class TestStrings:
    def test_float_input_uses_shortest_repr(self):
        assert BigNum(0.15).to_string() == '0.15'

    def test_integral_values_have_no_fraction(self):
        assert BigNum('12345.0').to_string() == '12345'
        assert BigNum(12345.0).to_string() == '12345'
        assert BigNum(1000).times('1.15').to_string() == '1150'

    def test_large_round_trip_is_exact(self):
        value = BigNum(10).pow(40)
        text = value.to_string()
        assert BigNum.from_string(text) == value
        assert BigNum.from_string(text).to_string() == text

    def test_fractional_subtraction_is_exact(self):
        assert BigNum(1000).minus('0.3').to_string() == '999.7'

    def test_zero(self):
        assert ZERO.to_string() == '0'
        assert ONE.minus(ONE).to_string() == '0'

    def test_infinity_text(self):
        assert INFINITY.to_string() == 'Infinity'

    def test_invalid_string_rejected(self):
        with pytest.raises(ValueError):
            BigNum.from_string('not a number')

    def test_from_string_requires_str(self):
        with pytest.raises(TypeError):
            BigNum.from_string(12)


class TestComparisons:
    def test_method_comparisons(self):
        a = BigNum(3)
        assert a.lt(4) and a.lte(3) and a.gt(2) and a.gte(3) and a.eq(3)

    def test_operator_comparisons_and_sorting(self):
        values = [BigNum('1e50'), BigNum(2), BigNum('0.5')]
        assert sorted(values) == [BigNum('0.5'), BigNum(2), BigNum('1e50')]
        assert BigNum(2) < 3

    def test_min_max(self):
        assert BigNum(2).min(5) == 2
        assert BigNum(2).max(5) == 5
        assert big_min(7, BigNum(3), 4) == 3
        assert big_max(7, BigNum(3), 4) == 7

    def test_operators(self):
        assert BigNum(2) + 3 == 5
        assert 10 - BigNum(4) == 6
        assert 3 * BigNum(2) == 6
        assert BigNum(1) / 8 == BigNum('0.125')
        assert -BigNum(2) == -2
        assert abs(BigNum(-2)) == 2

    def test_booleans_rejected(self):
        with pytest.raises(TypeError):
            BigNum(True)

    def test_d_reuses_instances(self):
        value = BigNum(7)
        assert D(value) is value
        assert D('7') == value

    def test_round_half_up(self):
        assert BigNum('17.25').round() == 17
        assert BigNum('2.5').round() == 3
        assert BigNum('1e53').round() == BigNum('1e53')
