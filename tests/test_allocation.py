"""
tests/test_allocation.py - Tests for probe allocation normalization and slider edits.
"""
import pytest

from cosmic_paperclip.allocation import (
    AXES,
    ProbeAllocation,
    clamp_percent,
    normalize_allocation,
    set_allocation_axis,
)


def alloc(replicate, harvest, manufacture):
    return ProbeAllocation(replicate=replicate, harvest=harvest, manufacture=manufacture)


class TestNormalize:
    def test_already_normalized_is_unchanged(self):
        assert normalize_allocation({'replicate': 34, 'harvest': 33, 'manufacture': 33}) == alloc(34, 33, 33)

    def test_zero_sum_uses_default_split(self):
        assert normalize_allocation({'replicate': 0, 'harvest': 0, 'manufacture': 0}) == alloc(34, 33, 33)

    def test_missing_axes_count_as_zero(self):
        assert normalize_allocation({}) == alloc(34, 33, 33)
        assert normalize_allocation({'harvest': 40}) == alloc(0, 100, 0)

    def test_residual_goes_to_replicate_first(self):
        # 150 -> 33/33/33 after flooring, residual 1
        assert normalize_allocation({'replicate': 50, 'harvest': 50, 'manufacture': 50}) == alloc(34, 33, 33)

    def test_uneven_scaling(self):
        # clamps to 10/21/30 (sum 61) -> floors 16/34/49 -> residual 1
        assert normalize_allocation({'replicate': 10.4, 'harvest': 20.6, 'manufacture': 30}) == alloc(17, 34, 49)

    def test_axes_are_clamped(self):
        assert normalize_allocation({'replicate': 200, 'harvest': 0, 'manufacture': 0}) == alloc(100, 0, 0)
        assert normalize_allocation({'replicate': -5, 'harvest': 10, 'manufacture': 10}) == alloc(0, 50, 50)

    def test_accepts_allocation_objects(self):
        assert normalize_allocation(alloc(1, 1, 1)) == alloc(34, 33, 33)

    def test_clamp_percent_rounds_half_up(self):
        assert clamp_percent(32.5) == 33
        assert clamp_percent(float('nan')) == 0
        assert clamp_percent(float('inf')) == 100

    def test_clamp_percent_treats_non_numbers_as_zero(self):
        assert clamp_percent('x') == 0
        assert clamp_percent(None) == 0


class TestSetAxis:
    def test_rebalances_proportionally(self):
        result = set_allocation_axis(alloc(34, 33, 33), 'harvest', 80)
        assert result == alloc(10, 80, 10)
        assert result.total == 100

    def test_preserves_relative_preference(self):
        result = set_allocation_axis(alloc(60, 20, 20), 'manufacture', 50)
        # remaining 50 split 60:20 between replicate and harvest
        assert result == alloc(38, 12, 50)

    def test_pin_to_full(self):
        assert set_allocation_axis(alloc(34, 33, 33), 'replicate', 100) == alloc(100, 0, 0)

    def test_value_is_clamped(self):
        assert set_allocation_axis(alloc(34, 33, 33), 'replicate', 140) == alloc(100, 0, 0)
        assert set_allocation_axis(alloc(34, 33, 33), 'replicate', -10).replicate == 0

    def test_even_split_without_previous_weights(self):
        assert set_allocation_axis(alloc(100, 0, 0), 'replicate', 40) == alloc(40, 30, 30)

    def test_unknown_axis(self):
        with pytest.raises(ValueError):
            set_allocation_axis(alloc(34, 33, 33), 'research', 10)

    def test_sequence_of_edits_always_sums_to_100(self):
        current = alloc(34, 33, 33)
        for axis, value in [('harvest', 80), ('replicate', 7), ('manufacture', 99),
                            ('harvest', 0), ('replicate', 51), ('manufacture', 13)]:
            current = set_allocation_axis(current, axis, value)
            assert current.total == 100
            assert all(0 <= current.get(a) <= 100 for a in AXES)
            assert current.get(axis) == value
