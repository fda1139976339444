"""Game data loader for the stage table."""
import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from cosmic_paperclip.numbers import BigNum

STAGE_FIELDS = (
    'id',
    'name',
    'scope_label',
    'matter_unit',
    'total_matter',
    'probe_harvest_per_second',
    'probe_manufacture_per_second',
)


@dataclass(frozen=True)
class Stage:
    """A progression tier with its own matter budget and probe throughput."""
    id: str
    name: str
    scope_label: str
    matter_unit: str
    total_matter: BigNum
    probe_harvest_per_second: BigNum
    probe_manufacture_per_second: BigNum

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'scope_label': self.scope_label,
            'matter_unit': self.matter_unit,
            'total_matter': self.total_matter.to_string(),
            'probe_harvest_per_second': self.probe_harvest_per_second.to_string(),
            'probe_manufacture_per_second': self.probe_manufacture_per_second.to_string()
        }


class GameDataLoader:
    """Loads and caches game data from JSON files."""

    def __init__(self, data_dir=None):
        """Initialize the data loader."""
        if data_dir is None:
            self.data_dir = Path(__file__).parent / 'game_data'
        else:
            self.data_dir = Path(data_dir)

        self._stages = None
        self._stage_by_id = None

    def load_stages(self):
        """Load the ordered stage table (Lab -> Planetary -> Space -> Universal)."""
        if self._stages is None:
            file_path = self.data_dir / 'stages.json'
            with open(file_path, 'r') as f:
                # Decimal keeps 5.972e27 exact instead of going through float
                data = json.load(f, parse_float=Decimal)

            stages = []
            for entry in data['stages']:
                missing = [name for name in STAGE_FIELDS if name not in entry]
                if missing:
                    raise ValueError(f"Stage entry {entry.get('id')!r} missing fields: {missing}")
                stages.append(Stage(
                    id=str(entry['id']),
                    name=str(entry['name']),
                    scope_label=str(entry['scope_label']),
                    matter_unit=str(entry['matter_unit']),
                    total_matter=BigNum(entry['total_matter']),
                    probe_harvest_per_second=BigNum(entry['probe_harvest_per_second']),
                    probe_manufacture_per_second=BigNum(entry['probe_manufacture_per_second'])
                ))
            self._stages = tuple(stages)
            self._stage_by_id = {stage.id: stage for stage in self._stages}
        return self._stages

    def get_stage(self, stage_id):
        """Get stage data by ID, or None if unknown."""
        if self._stages is None:
            self.load_stages()
        return self._stage_by_id.get(stage_id)

    def get_stage_index(self, stage_id):
        """Position of a stage in the table, or -1 if unknown."""
        for idx, stage in enumerate(self.load_stages()):
            if stage.id == stage_id:
                return idx
        return -1

    def get_next_stage(self, stage_id):
        """Stage following stage_id, or None at the end of the table."""
        stages = self.load_stages()
        idx = self.get_stage_index(stage_id)
        if idx < 0 or idx + 1 >= len(stages):
            return None
        return stages[idx + 1]

    def get_first_stage(self):
        return self.load_stages()[0]

    def validate_data(self):
        """Validate loaded data structure."""
        errors = []

        stages = self.load_stages()
        if not stages:
            errors.append("No stages loaded")
            return errors

        stage_ids = [s.id for s in stages]
        if len(stage_ids) != len(set(stage_ids)):
            errors.append("Duplicate stage IDs found")

        for stage in stages:
            if not stage.total_matter.gt(0):
                errors.append(f"Stage {stage.id}: total_matter must be positive")
            if stage.probe_harvest_per_second.is_negative():
                errors.append(f"Stage {stage.id}: negative probe harvest rate")
            if stage.probe_manufacture_per_second.is_negative():
                errors.append(f"Stage {stage.id}: negative probe manufacture rate")

        for earlier, later in zip(stages, stages[1:]):
            if later.total_matter.lt(earlier.total_matter):
                errors.append(f"Stage {later.id}: matter budget smaller than {earlier.id}")

        return errors

# Global instance
_game_data_loader = None

def get_game_data_loader(data_dir=None):
    """Get or create the global game data loader instance."""
    global _game_data_loader
    if _game_data_loader is None:
        _game_data_loader = GameDataLoader(data_dir)
    return _game_data_loader
