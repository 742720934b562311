"""Firestore-backed store that keeps an observable in-memory list of notes.

Every mutation is written to the ``tasks`` collection first and then followed
by a full reload, so the in-memory list always mirrors what Firestore holds.
Failures are logged and handed back to the caller as values; the store never
raises for a remote error and never leaves the ``READY`` state because of one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable

from firebase_admin import exceptions as firebase_exceptions
from google.api_core.exceptions import GoogleAPIError, NotFound
from google.api_core.retry import Retry

from .errors import DecodeError, EmptyTitle, MissingIdentifier, NoteNotFound, NotesError, StoreError
from .notes import Note, normalize_title, note_to_map, parse_remote_note

LOGGER = logging.getLogger(__name__)

DEFAULT_COLLECTION = "tasks"
STREAM_DEADLINE = 30.0

REMOTE_ERRORS = (GoogleAPIError, firebase_exceptions.FirebaseError)

Subscriber = Callable[[list[Note]], None]


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass(slots=True)
class ImportReport:
    created: list[Note] = field(default_factory=list)
    failed: list[tuple[Note, NotesError]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


class NoteStore:
    def __init__(self, client: Any, collection_name: str = DEFAULT_COLLECTION, *, autoload: bool = True) -> None:
        self._client = client
        self.collection_name = collection_name
        self._notes: list[Note] = []
        self._subscribers: list[Subscriber] = []
        self.state = StoreState.UNINITIALIZED
        self.last_error: NotesError | None = None
        if autoload:
            self.fetch_all()

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    def _collection(self):
        return self._client.collection(self.collection_name)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` to receive the note list after every reload."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _report(self, error: NotesError) -> NotesError:
        self.last_error = error
        LOGGER.error("%s", error)
        return error

    def _wrap(self, action: str, exc: Exception) -> StoreError:
        error = StoreError(f"Error {action}: {exc}")
        error.__cause__ = exc
        return error

    def fetch_all(self) -> list[Note]:
        self.state = StoreState.LOADING
        self.last_error = None
        try:
            notes: list[Note] = []
            for snapshot in self._collection().stream(retry=Retry(deadline=STREAM_DEADLINE)):
                try:
                    notes.append(parse_remote_note(snapshot))
                except (DecodeError, TypeError, ValueError) as exc:
                    LOGGER.debug("Skipping document %s: %s", getattr(snapshot, "id", "?"), exc)
        except REMOTE_ERRORS as exc:
            self._report(self._wrap("getting notes", exc))
            return self.notes
        finally:
            self.state = StoreState.READY

        self._notes = notes
        LOGGER.info("Got %d notes from Firestore", len(notes))
        for callback in list(self._subscribers):
            callback(self.notes)
        return self.notes

    def get(self, note_id: str) -> Note | None:
        self.last_error = None
        if not note_id or not note_id.strip():
            self._report(MissingIdentifier("Note has no id"))
            return None
        try:
            snapshot = self._collection().document(note_id).get()
        except REMOTE_ERRORS as exc:
            self._report(self._wrap(f"reading note {note_id}", exc))
            return None
        if not snapshot.exists:
            self._report(NoteNotFound(note_id))
            return None
        try:
            return parse_remote_note(snapshot)
        except DecodeError as exc:
            self._report(exc)
            return None

    def update_title(self, note: Note, new_title: str) -> NotesError | None:
        self.last_error = None
        if not note.id:
            return self._report(MissingIdentifier(f"Note {note.nid} has no id"))
        try:
            title = normalize_title(new_title)
        except EmptyTitle as exc:
            return self._report(exc)

        self.state = StoreState.LOADING
        try:
            self._collection().document(note.id).update({"title": title})
        except NotFound:
            return self._report(NoteNotFound(note.id))
        except REMOTE_ERRORS as exc:
            return self._report(self._wrap("updating note", exc))
        finally:
            self.state = StoreState.READY

        LOGGER.info("Updated note %s: %s", note.id, title)
        self.fetch_all()
        return None

    def delete(self, note_id: str) -> NotesError | None:
        self.last_error = None
        if not note_id or not note_id.strip():
            return self._report(MissingIdentifier("Note has no id"))

        self.state = StoreState.LOADING
        try:
            reference = self._collection().document(note_id)
            if not reference.get().exists:
                return self._report(NoteNotFound(note_id))
            reference.delete()
        except REMOTE_ERRORS as exc:
            return self._report(self._wrap("deleting note", exc))
        finally:
            self.state = StoreState.READY

        LOGGER.info("Deleted note %s", note_id)
        self.fetch_all()
        return None

    def delete_note(self, note: Note) -> NotesError | None:
        if not note.id:
            self.last_error = None
            return self._report(MissingIdentifier(f"Note {note.nid} has no id"))
        return self.delete(note.id)

    def bulk_import(self, notes: Iterable[Note]) -> ImportReport:
        """Create one document per note, one at a time; failures do not stop the batch."""

        report = ImportReport()
        collection = self._collection()
        self.state = StoreState.LOADING
        try:
            for note in notes:
                try:
                    _, reference = collection.add(note_to_map(note))
                except REMOTE_ERRORS as exc:
                    error = self._wrap(f"uploading note {note.nid}", exc)
                    LOGGER.error("%s", error)
                    report.failed.append((note, error))
                    continue
                LOGGER.info("Uploaded note: %s", note.title)
                report.created.append(Note(nid=note.nid, title=note.title, image=note.image, id=reference.id))
        finally:
            self.state = StoreState.READY

        if report.failed:
            LOGGER.warning(
                "Imported %d of %d notes",
                len(report.created),
                len(report.created) + len(report.failed),
            )
        self.fetch_all()
        if report.failed and self.last_error is None:
            self.last_error = report.failed[-1][1]
        return report


__all__ = ["DEFAULT_COLLECTION", "ImportReport", "NoteStore", "StoreState"]
