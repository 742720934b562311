from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from typing import Any

from google.api_core.exceptions import ServiceUnavailable

from scripts.notes_sync.bootstrap import BootstrapOutcome, Bootstrapper
from scripts.notes_sync.note_service import NoteService
from scripts.notes_sync.note_store import NoteStore
from scripts.notes_sync.sync_flag import SyncFlag
from scripts.notes_sync.web_service import WebService
from scripts.tests.firestore_fakes import DummyClient


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200) -> None:
        self.body = body
        self.status = status

    def read(self) -> bytes:
        return self.body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class CountingOpener:
    def __init__(self, payload: Any, status: int = 200) -> None:
        self.body = json.dumps(payload).encode("utf-8")
        self.status = status
        self.calls = 0

    def __call__(self, request: Any, timeout: float) -> FakeResponse:
        self.calls += 1
        return FakeResponse(self.body, self.status)


class BootstrapTest(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.flag = SyncFlag(Path(self._tmp.name) / "state.json")
        self.client = DummyClient()
        self.store = NoteStore(self.client)

    def bootstrapper(self, opener: CountingOpener) -> Bootstrapper:
        service = NoteService(web_service=WebService(opener=opener))
        return Bootstrapper(self.flag, service, self.store)

    def test_first_run_imports_once(self) -> None:
        opener = CountingOpener([{"nid": 1, "title": "A", "image": "http://x/a.png"}])
        flow = self.bootstrapper(opener)

        self.assertEqual(flow.run_once(), BootstrapOutcome.IMPORTED)
        documents = list(self.client.collection("tasks").documents.values())
        self.assertEqual(documents, [{"nid": 1, "title": "A", "image": "http://x/a.png"}])
        self.assertTrue(self.flag.is_set())
        self.assertEqual([note.nid for note in self.store.notes], [1])

        self.assertEqual(flow.run_once(), BootstrapOutcome.SKIPPED)
        self.assertEqual(opener.calls, 1)
        self.assertEqual(len(self.client.collection("tasks").documents), 1)

    def test_empty_response_leaves_flag_pending(self) -> None:
        opener = CountingOpener([])
        flow = self.bootstrapper(opener)
        self.assertEqual(flow.run_once(), BootstrapOutcome.NOTHING_TO_IMPORT)
        self.assertFalse(self.flag.is_set())
        self.assertEqual(flow.run_once(), BootstrapOutcome.NOTHING_TO_IMPORT)
        self.assertEqual(opener.calls, 2)

    def test_failed_fetch_leaves_flag_pending(self) -> None:
        opener = CountingOpener({"error": "boom"}, status=500)
        flow = self.bootstrapper(opener)
        self.assertEqual(flow.run_once(), BootstrapOutcome.FETCH_FAILED)
        self.assertFalse(self.flag.is_set())
        self.assertEqual(self.client.collection("tasks").calls, [])

    def test_partial_import_is_retried_without_duplicates(self) -> None:
        payload = [
            {"nid": 1, "title": "A", "image": ""},
            {"nid": 2, "title": "B", "image": ""},
        ]
        collection = self.client.collection("tasks")
        collection.fail_add_for = {1}
        flow = self.bootstrapper(CountingOpener(payload))

        self.assertEqual(flow.run_once(), BootstrapOutcome.PARTIAL)
        self.assertFalse(self.flag.is_set())
        self.assertEqual([note.nid for note in self.store.notes], [2])

        collection.fail_add_for = set()
        self.assertEqual(flow.run_once(), BootstrapOutcome.IMPORTED)
        self.assertTrue(self.flag.is_set())
        self.assertEqual(sorted(data["nid"] for data in collection.documents.values()), [1, 2])

    def test_stored_notes_are_reloaded_before_import(self) -> None:
        collection = self.client.collection("tasks")
        collection.documents["doc-1"] = {"nid": 1, "title": "A", "image": ""}
        collection.stream_error = ServiceUnavailable("down")
        self.store = NoteStore(self.client)
        self.assertEqual(self.store.notes, [])
        collection.stream_error = None

        opener = CountingOpener([{"nid": 1, "title": "A", "image": ""}])
        self.assertEqual(self.bootstrapper(opener).run_once(), BootstrapOutcome.IMPORTED)
        self.assertEqual([data["nid"] for data in collection.documents.values()], [1])
        self.assertTrue(self.flag.is_set())

    def test_unreadable_store_leaves_flag_pending(self) -> None:
        collection = self.client.collection("tasks")
        collection.documents["doc-1"] = {"nid": 1, "title": "A", "image": ""}
        collection.stream_error = ServiceUnavailable("down")

        opener = CountingOpener([{"nid": 1, "title": "A", "image": ""}])
        self.assertEqual(self.bootstrapper(opener).run_once(), BootstrapOutcome.STORE_UNAVAILABLE)
        self.assertFalse(self.flag.is_set())
        self.assertEqual(collection.calls, [])

    def test_already_set_flag_skips_everything(self) -> None:
        self.flag.mark_done()
        opener = CountingOpener([{"nid": 1, "title": "A", "image": ""}])
        self.assertEqual(self.bootstrapper(opener).ensure_imported(), BootstrapOutcome.SKIPPED)
        self.assertEqual(opener.calls, 0)
        self.assertEqual(self.client.collection("tasks").calls, [])


if __name__ == "__main__":
    unittest.main()
