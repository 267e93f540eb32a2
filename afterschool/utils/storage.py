"""Persisted key-value store backends for the roster.

The store only ever reads and writes serialized strings under three keys.
Backends raise StorageError; callers decide whether that is fatal.
"""
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from afterschool.errors import StorageError

STUDENTS_KEY = "students"
ACTIVITIES_KEY = "activities"
ACTIVITY_COLORS_KEY = "activityColors"

STATE_KEYS = (STUDENTS_KEY, ACTIVITIES_KEY, ACTIVITY_COLORS_KEY)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """One `<key>.json` file per key inside a state directory."""

    def __init__(self, state_dir: Union[str, Path]):
        self.state_dir = Path(state_dir)

    def path_for(self, key: str) -> Path:
        return self.state_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # atomic replace
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Could not save {path}: {e}") from e
