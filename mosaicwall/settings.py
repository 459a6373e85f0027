"""
Persisted user preferences, stored as JSON.

Layout and timing code never reads these; only the CLI does, so the same
store can be swapped for any section/key provider.
"""

import json
from pathlib import Path
from typing import Any, Dict


class SettingsStore:
    """
    Section/key settings persisted to a JSON file.

    File layout: {"MosaicWall": {"Orientation": "portrait"}}
    Reads raise ValueError if the file is not valid JSON.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupt settings file {self.path}: {e}")

    def have_setting(self, section: str, key: str) -> bool:
        return key in self._load().get(section, {})

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        return self._load().get(section, {}).get(key, default)

    def save_setting(self, section: str, key: str, value: Any):
        """Write one value, keeping everything else already in the file."""
        data = self._load()
        data.setdefault(section, {})[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2)
