"""Core game engine: reducer, tick simulation and stage progression.

``reducer(state, action)`` is the only way state changes. It is pure and
total: invalid or unaffordable actions return the input state unchanged.
``GameEngine`` is the stateful holder a host loop uses around it.
"""
import math
from dataclasses import replace

from cosmic_paperclip.actions import (
    BuyAutoClipper,
    BuyMegaClipper,
    BuyWire,
    BuyWireHarvester,
    ClickMake,
    DesignProbe,
    Reset,
    SetAllocation,
    Tick,
    UpgradeEfficiency,
    UpgradeSpeed,
)
from cosmic_paperclip.allocation import normalize_allocation
from cosmic_paperclip.config import Config
from cosmic_paperclip.costs import (
    auto_clipper_cost,
    can_afford,
    mega_clipper_cost,
    wire_harvester_cost,
)
from cosmic_paperclip.format import format_number, format_rate
from cosmic_paperclip.game_data_loader import get_game_data_loader
from cosmic_paperclip.news import maybe_emit_milestones, push_news
from cosmic_paperclip.numbers import BigNum, ONE, ZERO, big_min
from cosmic_paperclip.state import create_initial_state
from cosmic_paperclip.storage import dehydrate_v2

TERMINAL_MESSAGE = "All matter exhausted. The directive persists."


# -------------------------
# Rates
# -------------------------


def wire_rate(state):
    """Matter -> wire per second from machines and harvesters."""
    rate = (
        BigNum(state.auto_clippers).times(Config.WIRE_PER_SECOND_PER_AUTO_CLIPPER)
        .plus(Config.WIRE_PER_SECOND_BASE)
        .plus(BigNum(state.wire_harvesters).times(Config.WIRE_PER_SECOND_PER_HARVESTER))
    )
    return rate.times(state.multipliers.speed)


def clip_rate(state):
    """Wire -> clips per second from auto- and mega-clippers."""
    rate = (
        BigNum(state.auto_clippers).times(Config.CLIPS_PER_SECOND_PER_AUTO_CLIPPER)
        .plus(BigNum(state.mega_clippers).times(Config.CLIPS_PER_SECOND_PER_MEGA_CLIPPER))
    )
    return rate.times(state.multipliers.speed)


# -------------------------
# Tick simulation
# -------------------------


def _valid_dt(dt):
    try:
        dt = float(dt)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(dt) or dt <= 0:
        return None
    return dt


def tick(state, dt):
    """Advance all resource flows by dt seconds.

    Order matters, each step sees the previous step's output:
    matter -> wire, wire -> clips (machines), probes (grow, harvest,
    manufacture), milestones, stage progression.
    """
    dt = _valid_dt(dt)
    if dt is None:
        return state

    matter = state.matter
    wire = state.wire
    clips = state.clips
    probes = state.probes

    # 1. Matter -> wire
    gained = big_min(matter, wire_rate(state).times(dt))
    matter = matter.minus(gained)
    wire = wire.plus(gained)

    # 2. Wire -> clips; efficiency is wire spent per clip
    efficiency = state.multipliers.efficiency
    wanted = clip_rate(state).times(dt)
    made = big_min(wire.div(efficiency), wanted)
    wire = wire.minus(made.times(efficiency)).max(ZERO)
    clips = clips.plus(made)

    # 3. Probes: growth first, so this tick's harvest/manufacture use the new count
    stage = state.stage
    if state.probes_unlocked and probes.gt(0) and matter.gt(0) and stage is not None:
        alloc = normalize_allocation(state.allocation)
        replicate, harvest, manufacture = alloc.fractions()

        probes = probes.plus(
            probes.times(Config.PROBE_REPLICATION_PER_SECOND).times(replicate).times(dt)
        )

        harvested = big_min(
            matter,
            probes.times(stage.probe_harvest_per_second).times(harvest).times(dt),
        )
        matter = matter.minus(harvested)
        wire = wire.plus(harvested)

        manufactured = big_min(
            wire,
            probes.times(stage.probe_manufacture_per_second).times(manufacture).times(dt),
        )
        wire = wire.minus(manufactured)
        clips = clips.plus(manufactured)

    nxt = replace(state, matter=matter, wire=wire, clips=clips, probes=probes)
    nxt = maybe_emit_milestones(nxt)
    return maybe_advance_stage(nxt)


def maybe_advance_stage(state):
    """Move to the next stage once matter is exhausted.

    The final stage has no successor: matter stays at 0 and the game keeps
    running with every matter-driven flow yielding nothing.
    """
    if state.matter.gt(0):
        return state

    loader = get_game_data_loader()
    if loader.get_stage_index(state.stage_id) < 0:
        return state

    next_stage = loader.get_next_stage(state.stage_id)
    if next_stage is None:
        if state.news and state.news[0] == TERMINAL_MESSAGE:
            return state
        return push_news(state, TERMINAL_MESSAGE)

    progressed = replace(state, stage_id=next_stage.id, matter=next_stage.total_matter)
    return push_news(progressed, f"Scale shift: {next_stage.name}. Available matter recalibrated.")


# -------------------------
# Action handlers
# -------------------------


def _click_make(state, action):
    nxt = state
    if nxt.wire.lt(1) and nxt.matter.gte(1):
        nxt = replace(nxt, matter=nxt.matter.minus(ONE), wire=nxt.wire.plus(ONE))
    if nxt.wire.gte(1):
        nxt = replace(nxt, wire=nxt.wire.minus(ONE), clips=nxt.clips.plus(ONE))
    return nxt


def _buy_unit(state, field_name, cost_fn, message):
    owned = getattr(state, field_name)
    price = cost_fn(owned)
    if not can_afford(state.clips, price):
        return state
    nxt = replace(state, clips=state.clips.minus(price), **{field_name: owned + 1})
    return push_news(nxt, message)


def _buy_auto_clipper(state, action):
    return _buy_unit(state, 'auto_clippers', auto_clipper_cost,
                     "Auto-Clipper commissioned. Efficiency rises.")


def _buy_mega_clipper(state, action):
    return _buy_unit(state, 'mega_clippers', mega_clipper_cost,
                     "Mega-Clipper online. Industrial throughput enabled.")


def _buy_wire_harvester(state, action):
    return _buy_unit(state, 'wire_harvesters', wire_harvester_cost,
                     "Dedicated Harvester active. Wire supply lines stabilized.")


def _buy_wire(state, action):
    if not can_afford(state.clips, Config.WIRE_PURCHASE_COST):
        return state
    return replace(
        state,
        clips=state.clips.minus(Config.WIRE_PURCHASE_COST),
        wire=state.wire.plus(Config.WIRE_PURCHASE_AMOUNT),
    )


def _upgrade(state, message, **factors):
    if state.unused_trust < 1:
        return state
    multipliers = state.multipliers
    updated = {name: getattr(multipliers, name) * factor for name, factor in factors.items()}
    nxt = replace(
        state,
        unused_trust=state.unused_trust - 1,
        multipliers=replace(multipliers, **updated),
    )
    return push_news(nxt, message)


def _upgrade_speed(state, action):
    return _upgrade(state, "Processor clock speed increased. Operation frequency optimized.",
                    speed=Config.SPEED_UPGRADE_FACTOR)


def _upgrade_efficiency(state, action):
    return _upgrade(state, "Nano-shearing techniques refined. Material wastage reduced.",
                    efficiency=Config.EFFICIENCY_UPGRADE_FACTOR)


def _design_probe(state, action):
    if state.probes_unlocked:
        return state
    if not can_afford(state.clips, Config.PROBE_DESIGN_COST):
        return state
    nxt = replace(
        state,
        clips=state.clips.minus(Config.PROBE_DESIGN_COST),
        probes_unlocked=True,
        probes=state.probes.max(ONE),
    )
    return push_news(nxt, "Von Neumann Probe design finalized. Exponential pathways open.")


def _set_allocation(state, action):
    return replace(state, allocation=normalize_allocation(action.allocation))


def _reset(state, action):
    return create_initial_state()


def _tick(state, action):
    return tick(state, action.dt)


HANDLERS = {
    ClickMake: _click_make,
    BuyAutoClipper: _buy_auto_clipper,
    BuyMegaClipper: _buy_mega_clipper,
    BuyWireHarvester: _buy_wire_harvester,
    BuyWire: _buy_wire,
    UpgradeSpeed: _upgrade_speed,
    UpgradeEfficiency: _upgrade_efficiency,
    DesignProbe: _design_probe,
    SetAllocation: _set_allocation,
    Reset: _reset,
    Tick: _tick,
}


def reducer(state, action):
    """Map (state, action) to the next state. Unknown actions are no-ops."""
    handler = HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)


# -------------------------
# Host wrapper
# -------------------------


def clamp_dt(elapsed):
    """Floor elapsed seconds at 0 and cap them at MAX_TICK_SECONDS."""
    try:
        elapsed = float(elapsed)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(elapsed):
        return 0.0
    return min(Config.MAX_TICK_SECONDS, max(0.0, elapsed))


class GameEngine:
    """Current game state for one player plus its persistence."""

    def __init__(self, state=None, persistence=None):
        """Initialize game engine."""
        self.state = state if state is not None else create_initial_state()
        self.persistence = persistence
        self._last_frame = None
        self._last_save = None

    @classmethod
    def load(cls, persistence=None):
        """Hydrate from persistence, falling back to a fresh game."""
        state = persistence.load() if persistence is not None else None
        return cls(state, persistence)

    def dispatch(self, action):
        self.state = reducer(self.state, action)
        if isinstance(action, Reset) and self.persistence is not None:
            self.persistence.clear()
        return self.state

    def tick(self, elapsed):
        """Tick by elapsed seconds, clamped to [0, MAX_TICK_SECONDS]."""
        return self.dispatch(Tick(dt=clamp_dt(elapsed)))

    def advance(self, now):
        """Tick by the wall-clock time since the previous frame."""
        if self._last_frame is None:
            self._last_frame = now
            return self.state
        elapsed = now - self._last_frame
        self._last_frame = now
        return self.tick(elapsed)

    def maybe_autosave(self, now):
        """Save when AUTOSAVE_INTERVAL_SECONDS passed since the last save."""
        if self._last_save is not None and now - self._last_save < Config.AUTOSAVE_INTERVAL_SECONDS:
            return False
        self.flush()
        self._last_save = now
        return True

    def flush(self):
        if self.persistence is not None:
            self.persistence.save(self.state)

    def get_state(self):
        """JSON-ready snapshot for display layers."""
        state = self.state
        stage = state.stage
        wire_per_second = wire_rate(state)
        clips_per_second = clip_rate(state)

        return {
            'save': dehydrate_v2(state),
            'stage': stage.to_dict() if stage else None,
            'costs': {
                'auto_clipper': auto_clipper_cost(state.auto_clippers).to_string(),
                'mega_clipper': mega_clipper_cost(state.mega_clippers).to_string(),
                'wire_harvester': wire_harvester_cost(state.wire_harvesters).to_string(),
                'wire': str(Config.WIRE_PURCHASE_COST),
                'probe_design': str(Config.PROBE_DESIGN_COST)
            },
            'rates': {
                'wire_per_second': wire_per_second.to_string(),
                'clips_per_second': clips_per_second.to_string()
            },
            'display': {
                'clips': format_number(state.clips),
                'wire': format_number(state.wire),
                'matter': format_number(state.matter),
                'probes': format_number(state.probes),
                'wire_per_second': format_rate(wire_per_second),
                'clips_per_second': format_rate(clips_per_second),
                'wire_starved': wire_per_second.lt(clips_per_second)
            }
        }
