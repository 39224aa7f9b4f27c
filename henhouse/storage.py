"""Persistence utilities for the chicken keeper core services."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_CORRUPT = "corrupt"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of reading one slot: the records plus how they were obtained."""

    status: str
    records: List[Dict[str, Any]] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def is_corrupt(self) -> bool:
        return self.status == STATUS_CORRUPT

    @classmethod
    def corrupt(cls, reason: str) -> "LoadResult":
        return cls(STATUS_CORRUPT, [], reason)


class JSONStorage:
    """File-based slot storage: one versioned JSON document per named collection."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path
        self._base_path.mkdir(parents=True, exist_ok=True)

    def load(self, slot: str) -> List[Dict[str, Any]]:
        """Return the raw records stored in ``slot``; unreadable data yields an empty list."""
        return self.load_result(slot).records

    def load_result(self, slot: str) -> LoadResult:
        path = self.path_for(slot)
        if not path.exists():
            return LoadResult(STATUS_EMPTY)
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, RecursionError) as exc:
            return self._degrade(slot, f"Corrupted JSON data in {path}: {exc}")
        except (OSError, UnicodeDecodeError) as exc:
            return self._degrade(slot, f"Unable to read from {path}: {exc}")

        if not isinstance(payload, dict) or not isinstance(payload.get("records"), list):
            return self._degrade(slot, f"Expected versioned object payload in {path}")
        if payload.get("version") != SCHEMA_VERSION:
            return self._degrade(
                slot, f"Unsupported schema version {payload.get('version')!r} in {path}"
            )
        records = payload["records"]
        if not all(isinstance(record, dict) for record in records):
            return self._degrade(slot, f"Expected object records in {path}")
        if not records:
            return LoadResult(STATUS_EMPTY)
        return LoadResult(STATUS_OK, records)

    def save(self, slot: str, records: Iterable[Dict[str, Any]]) -> None:
        path = self.path_for(slot)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        payload = {"version": SCHEMA_VERSION, "records": list(records)}
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
                handle.flush()
            # Use replace for atomic move on POSIX; ensures crash-safe persistence.
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save %s: %s", slot, exc)
            raise PersistenceError(f"Unable to write to {path}") from exc

    def path_for(self, slot: str) -> Path:
        return self._base_path / f"{slot}.json"

    @staticmethod
    def _degrade(slot: str, reason: str) -> LoadResult:
        logger.warning("Resetting %s to empty: %s", slot, reason)
        return LoadResult.corrupt(reason)
