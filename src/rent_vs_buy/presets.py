"""Named assumption sets kept in a local JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import InputError, PresetError
from .inputs import parse_settings, to_settings
from .schemas import AssumptionSet

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path.home() / ".rent_vs_buy" / "presets.json"


class PresetStore:
    """Maps a preset name to the settings it was saved with."""

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_STORE_PATH

    def all(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise PresetError(f"Preset file {self.path} is not valid JSON") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise PresetError(f"Preset file {self.path} does not hold a JSON object")
        return data

    def names(self) -> List[str]:
        return list(self.all())

    def settings(self, name: str) -> Optional[Mapping[str, Any]]:
        """Raw stored settings for a preset, or None when it is absent."""
        settings = self.all().get(name)
        if settings is not None and not isinstance(settings, Mapping):
            raise PresetError(f'Preset "{name}" is invalid: expected a JSON object')
        return settings

    def get(self, name: str) -> Optional[AssumptionSet]:
        settings = self.settings(name)
        if settings is None:
            return None
        try:
            return parse_settings(settings)
        except InputError as exc:
            raise PresetError(f'Preset "{name}" is invalid: {exc}') from exc

    def save(self, name: str, assumptions: AssumptionSet) -> str:
        name = name.strip()
        if not name:
            raise PresetError("Please enter a name for the preset.")
        presets = self.all()
        if name in presets:
            logger.info("Overwriting preset %r", name)
        presets[name] = to_settings(assumptions)
        self._write(presets)
        logger.debug("Saved preset %r to %s", name, self.path)
        return name

    def delete(self, name: str) -> bool:
        presets = self.all()
        if name not in presets:
            return False
        del presets[name]
        self._write(presets)
        logger.debug("Deleted preset %r from %s", name, self.path)
        return True

    def load_pair(self, name_a: str, name_b: str) -> Tuple[AssumptionSet, AssumptionSet]:
        """Fetch two distinct presets for a side-by-side comparison."""
        presets = self.all()
        if name_a not in presets or name_b not in presets or name_a == name_b:
            raise PresetError("Please select two valid presets to compare.")
        scenario_a = self.get(name_a)
        scenario_b = self.get(name_b)
        return scenario_a, scenario_b

    def _write(self, presets: Dict[str, Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(presets, handle, indent=2)
