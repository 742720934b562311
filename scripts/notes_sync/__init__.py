"""Import notes from the notes API and keep them in Firestore."""

from .bootstrap import BootstrapOutcome, Bootstrapper
from .config import Settings
from .errors import (
    BadStatus,
    BadURL,
    DecodeError,
    DecodeErrorKind,
    EmptyTitle,
    MissingIdentifier,
    NoteNotFound,
    NotesError,
    StoreError,
    TransportError,
)
from .firebase import initialize_firestore
from .note_service import NOTES_URL, NoteService
from .note_store import ImportReport, NoteStore, StoreState
from .notes import (
    Note,
    decode_note,
    decode_note_list,
    normalize_title,
    note_to_map,
    parse_remote_note,
)
from .sync_flag import ImportState, SyncFlag
from .web_service import HTTPMethod, RequestResult, WebService

__all__ = [
    "initialize_firestore",
    "BadStatus",
    "BadURL",
    "BootstrapOutcome",
    "Bootstrapper",
    "DecodeError",
    "DecodeErrorKind",
    "EmptyTitle",
    "HTTPMethod",
    "ImportReport",
    "ImportState",
    "MissingIdentifier",
    "NOTES_URL",
    "Note",
    "NoteNotFound",
    "NoteService",
    "NoteStore",
    "NotesError",
    "RequestResult",
    "Settings",
    "StoreError",
    "StoreState",
    "SyncFlag",
    "TransportError",
    "WebService",
    "decode_note",
    "decode_note_list",
    "normalize_title",
    "note_to_map",
    "parse_remote_note",
]
