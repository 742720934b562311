"""Note dataclass and helpers for decoding API payloads and Firestore documents."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from .errors import DecodeError, DecodeErrorKind, EmptyTitle

DocumentData = Mapping[str, Any]


@dataclass(slots=True)
class Note:
    nid: int
    title: str
    image: str
    id: str | None = None

    @property
    def identifier(self) -> str:
        """Stable key for listing, whether or not the note has been persisted."""

        return self.id if self.id else str(self.nid)

    def with_title(self, title: str) -> "Note":
        return replace(self, title=title)


def _require(data: DocumentData, key: str, expected: type, label: str) -> Any:
    if key not in data:
        raise DecodeError(DecodeErrorKind.MISSING_KEY, f"{label} is missing key '{key}'")
    value = data[key]
    if value is None:
        raise DecodeError(DecodeErrorKind.MISSING_VALUE, f"{label} has null '{key}'")
    # bool is an int subclass; a JSON true is not a note id.
    if isinstance(value, bool) or not isinstance(value, expected):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"{label} expected {expected.__name__} for '{key}', got {type(value).__name__}",
        )
    return value


def decode_note(data: Any, *, note_id: str | None = None, label: str = "note") -> Note:
    if not isinstance(data, Mapping):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"{label} expected an object, got {type(data).__name__}",
        )
    return Note(
        nid=_require(data, "nid", int, label),
        title=_require(data, "title", str, label),
        image=_require(data, "image", str, label),
        id=note_id,
    )


def decode_note_list(payload: Any) -> list[Note]:
    """Decode a JSON array of notes; the first invalid entry fails the whole payload."""

    if not isinstance(payload, list):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"expected an array of notes, got {type(payload).__name__}",
        )
    return [decode_note(entry, label=f"note[{index}]") for index, entry in enumerate(payload)]


def _document_payload(document: Any) -> tuple[str, DocumentData]:
    if hasattr(document, "to_dict"):
        data = document.to_dict() or {}
    elif isinstance(document, Mapping):
        data = dict(document)
    else:
        raise TypeError("Unsupported document type")

    if hasattr(document, "id"):
        doc_id = getattr(document, "id")
    else:
        doc_id = data.get("id")
    if doc_id is None or str(doc_id).strip() == "":
        raise ValueError("Document is missing an identifier")
    return str(doc_id), data


def parse_remote_note(document: Any) -> Note:
    doc_id, data = _document_payload(document)
    return decode_note(data, note_id=doc_id, label=f"document '{doc_id}'")


def note_to_map(note: Note) -> dict[str, Any]:
    return {"nid": note.nid, "title": note.title, "image": note.image}


def normalize_title(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise EmptyTitle()
    return trimmed


__all__ = [
    "Note",
    "decode_note",
    "decode_note_list",
    "normalize_title",
    "note_to_map",
    "parse_remote_note",
]
