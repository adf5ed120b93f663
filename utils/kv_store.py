"""
Key/value stores for persisted session state.

The tracker and the session only need get/set/delete of string values.  Two
implementations are provided:

  - MemoryStore: dict-backed, used by tests and as a Streamlit session_state
    stand-in.
  - JsonFileStore: one JSON object on disk.  Writes go to a temporary file
    that then replaces the real one, so a crash mid-write never leaves a
    truncated state file.

A missing or unreadable state file is treated as empty, never as an error.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-memory store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def as_dict(self) -> dict[str, str]:
        return dict(self._data)


class JsonFileStore:
    """String values persisted as a single JSON object file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data = self._read()

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._write()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Ignoring unreadable state file '{self.path}': {exc}")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring state file '{self.path}': not a JSON object")
            return {}

        # Values are opaque strings; anything else is dropped.
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(
            json.dumps(self._data, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        tmp_path.replace(self.path)
