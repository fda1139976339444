"""Game actions accepted by the reducer.

Each action is a small frozen dataclass; ``action_type`` is its wire name as
used by the HTTP layer (``{"action_type": "buy_auto_clipper"}``).
"""
import math
from dataclasses import dataclass
from typing import ClassVar

from cosmic_paperclip.allocation import AXES, ProbeAllocation


@dataclass(frozen=True)
class ClickMake:
    action_type: ClassVar[str] = 'click_make'


@dataclass(frozen=True)
class BuyAutoClipper:
    action_type: ClassVar[str] = 'buy_auto_clipper'


@dataclass(frozen=True)
class BuyMegaClipper:
    action_type: ClassVar[str] = 'buy_mega_clipper'


@dataclass(frozen=True)
class BuyWireHarvester:
    action_type: ClassVar[str] = 'buy_wire_harvester'


@dataclass(frozen=True)
class BuyWire:
    action_type: ClassVar[str] = 'buy_wire'


@dataclass(frozen=True)
class UpgradeSpeed:
    action_type: ClassVar[str] = 'upgrade_speed'


@dataclass(frozen=True)
class UpgradeEfficiency:
    action_type: ClassVar[str] = 'upgrade_efficiency'


@dataclass(frozen=True)
class DesignProbe:
    action_type: ClassVar[str] = 'design_probe'


@dataclass(frozen=True)
class SetAllocation:
    allocation: ProbeAllocation
    action_type: ClassVar[str] = 'set_allocation'


@dataclass(frozen=True)
class Reset:
    action_type: ClassVar[str] = 'reset'


@dataclass(frozen=True)
class Tick:
    dt: float  # seconds
    action_type: ClassVar[str] = 'tick'


SIMPLE_ACTIONS = {
    cls.action_type: cls
    for cls in (
        ClickMake,
        BuyAutoClipper,
        BuyMegaClipper,
        BuyWireHarvester,
        BuyWire,
        UpgradeSpeed,
        UpgradeEfficiency,
        DesignProbe,
        Reset,
    )
}

ACTION_TYPES = tuple(SIMPLE_ACTIONS) + (SetAllocation.action_type, Tick.action_type)


def _as_number(value, name):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    return value


def parse_allocation(data):
    """Validate a raw {replicate, harvest, manufacture} mapping (not normalized)."""
    if not isinstance(data, dict):
        raise ValueError("allocation must be an object")
    values = {}
    for axis in AXES:
        values[axis] = _as_number(data.get(axis, 0), f"allocation.{axis}")
    return ProbeAllocation(**values)


def action_from_dict(action_type, action_data=None):
    """Build an action from its wire form. Raises ValueError if malformed."""
    action_data = action_data or {}
    if not isinstance(action_data, dict):
        raise ValueError("action_data must be an object")

    if action_type in SIMPLE_ACTIONS:
        return SIMPLE_ACTIONS[action_type]()
    if action_type == SetAllocation.action_type:
        return SetAllocation(allocation=parse_allocation(action_data.get('allocation')))
    if action_type == Tick.action_type:
        return Tick(dt=float(_as_number(action_data.get('dt'), 'dt')))

    raise ValueError(f"Unknown action type: {action_type}")
