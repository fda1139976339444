"""Save/load of game state with versioned records.

Two record shapes exist:

- v1: matter/wire/clips/probes stored as JSON numbers (floats); later
  fields such as wireHarvesters, trust and multipliers may be missing.
- v2 (current): the four quantities stored as exact decimal strings, plus
  wireHarvesters, trust, unusedTrust, multipliers and milestoneFlags.

Loading tries v2 first, then migrates a v1 record forward (and writes the
migrated record back best-effort). Anything unreadable means "no save".
None of the public operations raise: storage failures are logged and
swallowed, since the next autosave may succeed.
"""
import json
import logging
import math
from typing import Optional, Protocol

from cosmic_paperclip.actions import parse_allocation
from cosmic_paperclip.allocation import normalize_allocation
from cosmic_paperclip.config import Config
from cosmic_paperclip.game_data_loader import get_game_data_loader
from cosmic_paperclip.numbers import BigNum
from cosmic_paperclip.state import GameState, MilestoneFlags, Multipliers, create_initial_state

logger = logging.getLogger(__name__)

QUANTITY_FIELDS = ('matter', 'wire', 'clips', 'probes')
COUNT_FIELDS = ('autoClippers', 'megaClippers')
OPTIONAL_COUNT_FIELDS = ('wireHarvesters', 'trust', 'unusedTrust')


class KeyValueStore(Protocol):
    """Minimal string key-value store (browser-storage shaped)."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """In-process KeyValueStore, used by headless hosts and tests."""

    def __init__(self, items=None):
        self.items = dict(items or {})

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value

    def remove_item(self, key):
        self.items.pop(key, None)


# =========================
# Validation
# =========================


def _require_count(record, key):
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key} must be a non-negative integer")
    return value


def _require_quantity(value, key):
    quantity = BigNum.coerce(value)
    if not quantity.is_finite() or quantity.is_negative():
        raise ValueError(f"{key} must be a finite non-negative quantity")
    return quantity


def _require_positive(value, key):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{key} must be positive")
    return float(value)


def _validate_common(record):
    if not isinstance(record, dict):
        raise ValueError("save record must be an object")

    stage_id = record.get('stageId')
    if not isinstance(stage_id, str):
        raise ValueError("stageId must be a string")
    if get_game_data_loader().get_stage(stage_id) is None:
        raise ValueError(f"unknown stage: {stage_id}")

    for key in COUNT_FIELDS:
        _require_count(record, key)

    if not isinstance(record.get('probesUnlocked'), bool):
        raise ValueError("probesUnlocked must be a boolean")

    parse_allocation(record.get('allocation'))

    news = record.get('news')
    if not isinstance(news, list) or not all(isinstance(item, str) for item in news):
        raise ValueError("news must be a list of strings")

    flags = record.get('milestoneFlags')
    if flags is not None:
        _validate_milestone_flags(flags)


def _validate_milestone_flags(flags):
    if not isinstance(flags, dict):
        raise ValueError("milestoneFlags must be an object")
    for stage_id, entry in flags.items():
        if not isinstance(entry, dict):
            raise ValueError(f"milestoneFlags.{stage_id} must be an object")
        for name in ('half', 'ten', 'one'):
            if not isinstance(entry.get(name, False), bool):
                raise ValueError(f"milestoneFlags.{stage_id}.{name} must be a boolean")


def _validate_multipliers(multipliers):
    if not isinstance(multipliers, dict):
        raise ValueError("multipliers must be an object")
    _require_positive(multipliers.get('speed'), 'multipliers.speed')
    _require_positive(multipliers.get('efficiency'), 'multipliers.efficiency')


def validate_saved_state_v2(record):
    """Raise ValueError unless record is a well-formed v2 save."""
    if not isinstance(record, dict) or record.get('version') != 2:
        raise ValueError("not a v2 save record")
    _validate_common(record)

    for key in QUANTITY_FIELDS:
        value = record.get(key)
        if not isinstance(value, str):
            raise ValueError(f"{key} must be a decimal string")
        _require_quantity(BigNum.from_string(value), key)

    for key in OPTIONAL_COUNT_FIELDS:
        _require_count(record, key)

    _validate_multipliers(record.get('multipliers'))


def validate_saved_state_v1(record):
    """Raise ValueError unless record is a well-formed v1 save."""
    if not isinstance(record, dict) or record.get('version') != 1:
        raise ValueError("not a v1 save record")
    _validate_common(record)

    for key in QUANTITY_FIELDS:
        value = record.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{key} must be a number")
        _require_quantity(value, key)

    for key in OPTIONAL_COUNT_FIELDS:
        if key in record:
            _require_count(record, key)

    multipliers = record.get('multipliers')
    if multipliers is not None:
        # Partial v1 multipliers are merged over fresh defaults on migration
        if not isinstance(multipliers, dict):
            raise ValueError("multipliers must be an object")
        for name in ('speed', 'efficiency'):
            if name in multipliers:
                _require_positive(multipliers[name], f"multipliers.{name}")


# =========================
# Conversion
# =========================


def dehydrate_v2(state):
    """GameState -> v2 save record (JSON-compatible dict)."""
    return {
        'version': 2,
        'stageId': state.stage_id,
        'matter': state.matter.to_string(),
        'wire': state.wire.to_string(),
        'clips': state.clips.to_string(),
        'autoClippers': state.auto_clippers,
        'megaClippers': state.mega_clippers,
        'wireHarvesters': state.wire_harvesters,
        'probesUnlocked': state.probes_unlocked,
        'probes': state.probes.to_string(),
        'allocation': state.allocation.to_dict(),
        'trust': state.trust,
        'unusedTrust': state.unused_trust,
        'multipliers': state.multipliers.to_dict(),
        'news': list(state.news),
        'milestoneFlags': {
            stage_id: flags.to_dict() for stage_id, flags in state.milestone_flags.items()
        }
    }


def hydrate_v2(record):
    """Validated v2 save record -> GameState."""
    initial = create_initial_state()
    multipliers = {**initial.multipliers.to_dict(), **record['multipliers']}
    flags = record.get('milestoneFlags') or {}

    return GameState(
        stage_id=record['stageId'],
        matter=BigNum.from_string(record['matter']),
        wire=BigNum.from_string(record['wire']),
        clips=BigNum.from_string(record['clips']),
        probes=BigNum.from_string(record['probes']),
        auto_clippers=record['autoClippers'],
        mega_clippers=record['megaClippers'],
        wire_harvesters=record['wireHarvesters'],
        probes_unlocked=record['probesUnlocked'],
        allocation=normalize_allocation(record['allocation']),
        trust=record['trust'],
        unused_trust=record['unusedTrust'],
        multipliers=Multipliers(
            speed=float(multipliers['speed']),
            efficiency=float(multipliers['efficiency'])
        ),
        news=tuple(record['news'])[:Config.NEWS_LIMIT],
        milestone_flags={
            stage_id: MilestoneFlags(
                half=entry.get('half', False),
                ten=entry.get('ten', False),
                one=entry.get('one', False)
            )
            for stage_id, entry in flags.items()
        },
        version=Config.SAVE_VERSION,
    )


def migrate_v1_to_v2(record):
    """Validated v1 save record -> v2 save record.

    Numbers become exact decimal strings; fields v1 may lack are taken
    from a fresh game.
    """
    initial = dehydrate_v2(create_initial_state())
    migrated = {
        'version': 2,
        'stageId': record['stageId'],
        'autoClippers': record['autoClippers'],
        'megaClippers': record['megaClippers'],
        'wireHarvesters': record.get('wireHarvesters', initial['wireHarvesters']),
        'probesUnlocked': record['probesUnlocked'],
        'allocation': dict(record['allocation']),
        'trust': record.get('trust', initial['trust']),
        'unusedTrust': record.get('unusedTrust', initial['unusedTrust']),
        'multipliers': {**initial['multipliers'], **(record.get('multipliers') or {})},
        'news': list(record.get('news', initial['news'])),
        'milestoneFlags': dict(record.get('milestoneFlags') or initial['milestoneFlags'])
    }
    for key in QUANTITY_FIELDS:
        migrated[key] = BigNum.coerce(record[key]).to_string()
    return migrated


# =========================
# Persistence port
# =========================


class SavePersistence:
    """load/save/clear of GameState over a KeyValueStore."""

    def __init__(self, store, key_v1=None, key_v2=None):
        self.store = store
        self.key_v1 = key_v1 or Config.SAVE_KEY_V1
        self.key_v2 = key_v2 or Config.SAVE_KEY_V2

    def load(self):
        """Return the saved GameState, or None when there is no usable save."""
        try:
            state = self._load_v2()
            if state is not None:
                return state
            return self._load_v1()
        except Exception as e:
            logger.warning(f"Failed to load save: {e}")
            return None

    def _load_v2(self):
        raw = self.store.get_item(self.key_v2)
        if not raw:
            return None
        try:
            record = json.loads(raw)
            validate_saved_state_v2(record)
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable v2 save: {e}")
            return None
        return hydrate_v2(record)

    def _load_v1(self):
        raw = self.store.get_item(self.key_v1)
        if not raw:
            return None
        try:
            record = json.loads(raw)
            validate_saved_state_v1(record)
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable v1 save: {e}")
            return None

        migrated = migrate_v1_to_v2(record)
        try:
            self.store.set_item(self.key_v2, json.dumps(migrated))
        except Exception as e:
            logger.debug(f"Could not write migrated save: {e}")
        logger.info("Migrated v1 save to v2")
        return hydrate_v2(migrated)

    def save(self, state):
        try:
            self.store.set_item(self.key_v2, json.dumps(dehydrate_v2(state)))
        except Exception as e:
            logger.debug(f"Save failed: {e}")

    def clear(self):
        for key in (self.key_v1, self.key_v2):
            try:
                self.store.remove_item(key)
            except Exception as e:
                logger.debug(f"Could not remove {key}: {e}")
