"""Probe work split across replicate / harvest / manufacture.

Every stored allocation sums to exactly 100. ``normalize_allocation`` enforces
that for arbitrary input, and ``set_allocation_axis`` implements the slider
edit: pin one axis, share the remainder between the other two in proportion
to their previous weights, then normalize.
"""
import math
from dataclasses import dataclass

from cosmic_paperclip.config import Config

AXES = ('replicate', 'harvest', 'manufacture')


@dataclass(frozen=True)
class ProbeAllocation:
    replicate: int
    harvest: int
    manufacture: int

    @property
    def total(self):
        return self.replicate + self.harvest + self.manufacture

    def get(self, axis, default=0):
        return getattr(self, axis, default)

    def fractions(self):
        """(replicate, harvest, manufacture) as fractions of 1."""
        return tuple(self.get(axis) / 100 for axis in AXES)

    def to_dict(self):
        return {axis: self.get(axis) for axis in AXES}

    @classmethod
    def from_mapping(cls, data):
        """Build from a mapping of axis -> number; missing axes count as 0."""
        return cls(**{axis: data.get(axis, 0) for axis in AXES})


def default_allocation():
    replicate, harvest, manufacture = Config.DEFAULT_ALLOCATION
    return ProbeAllocation(replicate=replicate, harvest=harvest, manufacture=manufacture)


def clamp_percent(value):
    """Round half up to an integer and clamp into [0, 100]; non-numbers count as 0."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return 100 if value > 0 else 0
    return max(0, min(100, math.floor(value + 0.5)))


def normalize_allocation(raw):
    clamped = {axis: clamp_percent(raw.get(axis, 0)) for axis in AXES}
    total = sum(clamped.values())
    if total == 100:
        return ProbeAllocation(**clamped)
    if total == 0:
        return default_allocation()

    scaled = {axis: clamped[axis] * 100 // total for axis in AXES}
    diff = 100 - sum(scaled.values())

    # Spread the residual one unit at a time in fixed axis order
    idx = 0
    while diff != 0:
        axis = AXES[idx % len(AXES)]
        step = 1 if diff > 0 else -1
        scaled[axis] += step
        diff -= step
        idx += 1

    return ProbeAllocation(**scaled)


def set_allocation_axis(current, axis, value):
    """Pin ``axis`` to ``value`` and rebalance the other two axes.

    The remainder follows the other axes' previous weights. When both were
    0 there is no preference to follow, so the remainder is split evenly
    between them (``(100, 0, 0)`` with replicate set to 40 gives 40/30/30).
    """
    if axis not in AXES:
        raise ValueError(f"Unknown allocation axis: {axis}")

    pinned = clamp_percent(value)
    first_axis, second_axis = [a for a in AXES if a != axis]

    remaining = clamp_percent(100 - pinned)
    first_weight = current.get(first_axis)
    second_weight = current.get(second_axis)
    if first_weight + second_weight <= 0:
        # No previous preference: split evenly
        first_weight = second_weight = 1
    previous_sum = first_weight + second_weight

    first = math.floor(first_weight / previous_sum * remaining + 0.5)
    second = remaining - first

    nxt = {
        axis: pinned,
        first_axis: clamp_percent(first),
        second_axis: clamp_percent(second),
    }
    return normalize_allocation(nxt)
