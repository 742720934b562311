"""Client for the remote notes API."""

from __future__ import annotations

import logging

from .notes import Note, decode_note_list
from .web_service import HTTPMethod, RequestResult, WebService

LOGGER = logging.getLogger(__name__)

NOTES_URL = "https://api.jerryjoy.me/notes"


class NoteService:
    def __init__(self, base_url: str = NOTES_URL, web_service: WebService | None = None) -> None:
        self.base_url = base_url
        self.web_service = web_service or WebService()

    def fetch_remote_notes_result(self) -> RequestResult:
        return self.web_service.send_request(self.base_url, HTTPMethod.GET, decoder=decode_note_list)

    def fetch_remote_notes(self) -> list[Note]:
        """Return the notes served by the API, or an empty list if the call fails."""

        result = self.fetch_remote_notes_result()
        if not result.ok:
            LOGGER.info("Falling back to an empty note list: %s", result.error)
            return []
        return list(result.value or [])


__all__ = ["NOTES_URL", "NoteService"]
