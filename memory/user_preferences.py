"""User preference persistence."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from models.preferences import UserPreferences


class PreferenceStore:
    """Simple JSON-backed preference store, one file per user."""

    def __init__(self, base_dir: str = "data/preferences") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _preferences_path(self, user_id: str) -> Path:
        return self.base_dir / f"{user_id}.json"

    def get(self, user_id: str) -> Optional[UserPreferences]:
        path = self._preferences_path(user_id)
        if not path.exists():
            return None

        data = json.loads(path.read_text())
        data["user_id"] = user_id
        return UserPreferences(**data)

    def upsert(self, preferences: UserPreferences) -> UserPreferences:
        path = self._preferences_path(preferences.user_id)
        path.write_text(json.dumps(asdict(preferences), indent=2))
        return preferences


__all__ = ["PreferenceStore"]
