"""Persisted one-time import flag stored in a small local JSON file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger(__name__)

DEFAULT_KEY = "hasLoadedNotes"


class ImportState(str, Enum):
    PENDING = "pending"
    DONE = "done"


class SyncFlag:
    """Boolean flag scoped to this installation; once set it is never cleared."""

    def __init__(self, path: str | Path, key: str = DEFAULT_KEY) -> None:
        self.path = Path(path).expanduser()
        self.key = key

    def _load(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Ignoring unreadable state file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def is_set(self) -> bool:
        return self._load().get(self.key) is True

    @property
    def state(self) -> ImportState:
        return ImportState.DONE if self.is_set() else ImportState.PENDING

    def mark_done(self) -> None:
        data = self._load()
        data[self.key] = True
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(temp_name, self.path)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise
        LOGGER.debug("Set %s in %s", self.key, self.path)


__all__ = ["DEFAULT_KEY", "ImportState", "SyncFlag"]
