"""Error types reported by the notes sync helpers."""

from __future__ import annotations

from enum import Enum


class NotesError(RuntimeError):
    """Base class for every failure reported by the notes sync helpers."""


class BadURL(NotesError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url!r}")
        self.url = url


class TransportError(NotesError):
    """Raised for DNS, connection, and timeout failures."""


class BadStatus(NotesError):
    def __init__(self, status: int, reason: str = "") -> None:
        message = f"Unexpected HTTP status {status}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.status = status


class DecodeErrorKind(str, Enum):
    MISSING_KEY = "missing_key"
    TYPE_MISMATCH = "type_mismatch"
    MISSING_VALUE = "missing_value"
    CORRUPTED = "corrupted"


class DecodeError(NotesError):
    def __init__(self, kind: DecodeErrorKind, detail: str) -> None:
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


class MissingIdentifier(NotesError):
    """Raised when an operation needs a persisted document id the note lacks."""


class NoteNotFound(NotesError):
    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note '{note_id}' not found")
        self.note_id = note_id


class EmptyTitle(NotesError):
    def __init__(self) -> None:
        super().__init__("Title can't be empty")


class StoreError(NotesError):
    """Wraps an error raised by Firestore or the Google API client."""


__all__ = [
    "BadStatus",
    "BadURL",
    "DecodeError",
    "DecodeErrorKind",
    "EmptyTitle",
    "MissingIdentifier",
    "NoteNotFound",
    "NotesError",
    "StoreError",
    "TransportError",
]
