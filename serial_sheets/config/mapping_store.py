from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

"""Key/value store for the column-mapping preference.

The pipeline never touches storage directly: a MappingStore is passed in by
the caller. JsonFileMappingStore keeps all keys in one JSON object on disk,
InMemoryMappingStore is used by tests and one-off runs.
"""

__all__ = [
    "COLUMN_MAPPING_KEY",
    "MappingStore",
    "InMemoryMappingStore",
    "JsonFileMappingStore",
]

COLUMN_MAPPING_KEY = "serial_sheets.column_mapping"

logger = logging.getLogger(__name__)


class MappingStore(Protocol):
    def load(self, key: str) -> dict[str, str] | None: ...

    def save(self, key: str, mapping: dict[str, str]) -> None: ...


class InMemoryMappingStore:
    def __init__(self, initial: dict[str, dict[str, str]] | None = None) -> None:
        self._data: dict[str, dict[str, str]] = dict(initial or {})

    def load(self, key: str) -> dict[str, str] | None:
        value = self._data.get(key)
        return dict(value) if value is not None else None

    def save(self, key: str, mapping: dict[str, str]) -> None:
        self._data[key] = dict(mapping)


class JsonFileMappingStore:
    """File-backed store. A corrupt or unreadable file behaves as empty."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, dict[str, str]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"mapping store unreadable, ignoring saved mapping: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, dict)}

    def load(self, key: str) -> dict[str, str] | None:
        value = self._read_all().get(key)
        if value is None:
            return None
        return {str(k): str(v) for k, v in value.items()}

    def save(self, key: str, mapping: dict[str, str]) -> None:
        data = self._read_all()
        data[key] = dict(mapping)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
