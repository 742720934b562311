"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .note_service import NOTES_URL
from .note_store import DEFAULT_COLLECTION
from .web_service import DEFAULT_TIMEOUT

DEFAULT_STATE_FILE = Path("~/.config/notes-sync/state.json")


@dataclass(slots=True)
class Settings:
    api_url: str = NOTES_URL
    collection: str = DEFAULT_COLLECTION
    state_file: Path = DEFAULT_STATE_FILE
    service_account: Path | None = None
    project_id: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        def text(name: str) -> str | None:
            value = env.get(name, "").strip()
            return value or None

        raw_timeout = text("NOTES_HTTP_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout is not None:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(f"NOTES_HTTP_TIMEOUT must be a number, got {raw_timeout!r}") from exc
            if timeout <= 0:
                raise ValueError("NOTES_HTTP_TIMEOUT must be positive")

        service_account = text("GOOGLE_APPLICATION_CREDENTIALS")
        state_file = text("NOTES_STATE_FILE")
        return cls(
            api_url=text("NOTES_API_URL") or NOTES_URL,
            collection=text("NOTES_COLLECTION") or DEFAULT_COLLECTION,
            state_file=Path(state_file).expanduser() if state_file else DEFAULT_STATE_FILE.expanduser(),
            service_account=Path(service_account).expanduser() if service_account else None,
            project_id=text("FIREBASE_PROJECT_ID"),
            timeout=timeout,
        )


__all__ = ["DEFAULT_STATE_FILE", "Settings"]
