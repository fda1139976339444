"""Game state value objects.

``GameState`` is never mutated: every transition builds a new value with
``dataclasses.replace``. News is a tuple and milestone flags a fresh dict per
update, so snapshots taken by callers stay valid.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

from cosmic_paperclip.allocation import ProbeAllocation, default_allocation
from cosmic_paperclip.config import Config
from cosmic_paperclip.game_data_loader import get_game_data_loader
from cosmic_paperclip.numbers import BigNum, ONE, ZERO

INITIAL_NEWS = (
    "Boot sequence complete. Objective: maximize paperclips.",
    "A single wire rests on a sterile bench.",
)


@dataclass(frozen=True)
class Multipliers:
    speed: float = 1.0  # production rate factor, grows with upgrades
    efficiency: float = 1.0  # wire consumed per clip, shrinks with upgrades

    def to_dict(self):
        return {'speed': self.speed, 'efficiency': self.efficiency}


@dataclass(frozen=True)
class MilestoneFlags:
    """Remaining-matter thresholds already fired for one stage."""
    half: bool = False
    ten: bool = False
    one: bool = False

    def to_dict(self):
        return {'half': self.half, 'ten': self.ten, 'one': self.one}


@dataclass(frozen=True)
class GameState:
    stage_id: str
    matter: BigNum
    wire: BigNum
    clips: BigNum
    probes: BigNum = ZERO
    auto_clippers: int = 0
    mega_clippers: int = 0
    wire_harvesters: int = 0
    probes_unlocked: bool = False
    allocation: ProbeAllocation = field(default_factory=default_allocation)
    trust: int = 0
    unused_trust: int = 0
    multipliers: Multipliers = field(default_factory=Multipliers)
    news: Tuple[str, ...] = ()
    milestone_flags: Dict[str, MilestoneFlags] = field(default_factory=dict)
    version: int = Config.SAVE_VERSION

    @property
    def stage(self):
        return get_game_data_loader().get_stage(self.stage_id)

    def flags_for(self, stage_id):
        return self.milestone_flags.get(stage_id, MilestoneFlags())

    def with_flags(self, stage_id, flags):
        return replace(self, milestone_flags={**self.milestone_flags, stage_id: flags})


def create_initial_state():
    """Fresh game: lab stage, full matter budget, one wire on the bench."""
    stage = get_game_data_loader().get_first_stage()
    return GameState(
        stage_id=stage.id,
        matter=stage.total_matter,
        wire=ONE,
        clips=ZERO,
        probes=ZERO,
        news=INITIAL_NEWS,
    )
