"""First-run import of the API notes into Firestore."""

from __future__ import annotations

import logging
from enum import Enum

from .note_service import NoteService
from .note_store import NoteStore
from .sync_flag import SyncFlag

LOGGER = logging.getLogger(__name__)


class BootstrapOutcome(str, Enum):
    SKIPPED = "skipped"
    FETCH_FAILED = "fetch_failed"
    STORE_UNAVAILABLE = "store_unavailable"
    NOTHING_TO_IMPORT = "nothing_to_import"
    PARTIAL = "partial"
    IMPORTED = "imported"


class Bootstrapper:
    """Import the API notes exactly once per installation.

    The flag is only set after every note made it into Firestore. Notes whose
    ``nid`` is already stored are not uploaded again, so a run that follows a
    partial import only sends the missing ones.
    """

    def __init__(self, flag: SyncFlag, service: NoteService, store: NoteStore) -> None:
        self.flag = flag
        self.service = service
        self.store = store

    def run_once(self) -> BootstrapOutcome:
        if self.flag.is_set():
            LOGGER.debug("Notes already imported; nothing to do")
            return BootstrapOutcome.SKIPPED

        result = self.service.fetch_remote_notes_result()
        if not result.ok:
            LOGGER.warning("Could not fetch notes from the API: %s", result.error)
            return BootstrapOutcome.FETCH_FAILED
        remote_notes = list(result.value or [])
        if not remote_notes:
            LOGGER.info("The API returned no notes; will try again next time")
            return BootstrapOutcome.NOTHING_TO_IMPORT

        current = self.store.fetch_all()
        if self.store.last_error is not None:
            LOGGER.warning("Could not read the stored notes: %s", self.store.last_error)
            return BootstrapOutcome.STORE_UNAVAILABLE
        stored = {note.nid for note in current}
        pending = [note for note in remote_notes if note.nid not in stored]
        if len(pending) < len(remote_notes):
            LOGGER.info("Skipping %d notes that are already stored", len(remote_notes) - len(pending))

        report = self.store.bulk_import(pending)
        if not report.complete:
            LOGGER.warning(
                "%d notes failed to upload; the import will be retried",
                len(report.failed),
            )
            return BootstrapOutcome.PARTIAL

        self.flag.mark_done()
        LOGGER.info("Imported %d notes", len(report.created))
        return BootstrapOutcome.IMPORTED

    ensure_imported = run_once


__all__ = ["BootstrapOutcome", "Bootstrapper"]
